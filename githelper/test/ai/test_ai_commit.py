"""Tests for githelper.ai.commit module."""

from __future__ import annotations

from githelper.ai.commit import OPENAI_URL, CommitGenerator, build_prompt
from githelper.core.result import Err, Ok
from githelper.platform.http import HttpError, MockHttpClient


def _reply(content: object) -> dict[str, object]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def test_prompt_embeds_diff() -> None:
    prompt = build_prompt("diff --git a/x b/x")
    assert "diff --git a/x b/x" in prompt
    assert "imperative mood" in prompt


def test_generate_returns_trimmed_first_choice() -> None:
    http = MockHttpClient()
    http.set_json("POST", OPENAI_URL, _reply("  feat(auth): add login\n"))
    result = CommitGenerator(http, "sk-test").generate("diff")
    assert result == Ok("feat(auth): add login")

    request = http.requests[0]
    assert request.headers["Authorization"] == "Bearer sk-test"
    assert isinstance(request.body, dict)
    assert request.body["model"] == "gpt-4"
    assert request.body["temperature"] == 0.7


def test_empty_reply_is_error() -> None:
    http = MockHttpClient()
    http.set_json("POST", OPENAI_URL, _reply("   "))
    result = CommitGenerator(http, "sk-test").generate("diff")
    assert isinstance(result, Err)
    assert "empty response" in result.error.message


def test_missing_choices_is_error() -> None:
    http = MockHttpClient()
    http.set_json("POST", OPENAI_URL, {"choices": []})
    assert isinstance(CommitGenerator(http, "k").generate("d"), Err)


def test_http_failure_is_error() -> None:
    http = MockHttpClient()
    http.set_json("POST", OPENAI_URL, HttpError(OPENAI_URL, 401, "Unauthorized"))
    result = CommitGenerator(http, "bad").generate("diff")
    assert isinstance(result, Err)
    assert result.error.message.startswith("failed to generate commit message")

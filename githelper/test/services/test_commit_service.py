"""Tests for githelper.services.commit module."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from githelper.ai.commit import OPENAI_URL
from githelper.cli.selector import Selector
from githelper.core.config import Config
from githelper.core.result import Err, Ok
from githelper.git.repository import Repository
from githelper.output.console import MockConsole
from githelper.platform.http import MockHttpClient
from githelper.platform.process import MockRunner
from githelper.services.commit import CommitService
from githelper.services.messages import resolve_commit_type

STAT = " src/app.py | 4 ++--\n 1 file changed, 2 insertions(+), 2 deletions(-)\n"


def scripted(*answers: str) -> Callable[[str], str]:
    pending = list(answers)

    def read(_prompt: str) -> str:
        if not pending:
            raise EOFError
        return pending.pop(0)

    return read


def make(
    runner: MockRunner,
    *answers: str,
    config: Config | None = None,
    http: MockHttpClient | None = None,
) -> tuple[CommitService, MockConsole]:
    console = MockConsole()
    service = CommitService(
        repo=Repository(runner),
        selector=Selector(runner, console, input_fn=scripted(*answers)),
        console=console,
        config=config or Config(),
        http=http,
    )
    return service, console


@pytest.fixture
def staged() -> MockRunner:
    runner = MockRunner()
    runner.on("git", "diff", "--cached", "--stat", stdout=STAT)
    return runner


def test_nothing_staged() -> None:
    service, _ = make(MockRunner())
    result = service.commit(no_edit=True, commit_type="fix")
    assert isinstance(result, Err)
    assert result.error.message == "no staged changes found"
    assert result.error.hint == "Use 'git add' to stage changes"


def test_type_by_number(staged: MockRunner) -> None:
    service, console = make(staged, "2")
    assert service.commit(no_edit=True) == Ok(None)
    assert staged.live_calls == [("git", "commit", "-m", "fix:")]
    assert console.find("1. feat     - A new feature")


def test_type_by_name(staged: MockRunner) -> None:
    service, _ = make(staged)
    assert service.commit(no_edit=True, commit_type="docs") == Ok(None)
    assert staged.live_calls == [("git", "commit", "-m", "docs:")]


def test_empty_type_cancels(staged: MockRunner) -> None:
    service, console = make(staged, "")
    assert service.commit(no_edit=True) == Ok(None)
    assert staged.live_calls == []
    assert console.find("Operation cancelled")


def test_editor_receives_template(staged: MockRunner) -> None:
    staged.tools.add("code")
    service, _ = make(staged, config=Config(editor="code --wait"))
    assert service.commit(commit_type="feat") == Ok(None)
    editor, commit = staged.live_calls
    assert editor[:2] == ("code", "--wait")
    assert editor[2].endswith("COMMIT_EDITMSG")
    assert commit == ("git", "commit", "-m", "feat:")


def test_editor_from_environment(staged: MockRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EDITOR", "nano")
    staged.tools.add("nano")
    service, _ = make(staged)
    assert service.commit(commit_type="feat") == Ok(None)
    assert staged.live_calls[0][0] == "nano"


def test_missing_editor(staged: MockRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EDITOR", raising=False)
    service, _ = make(staged)
    result = service.commit(commit_type="feat")
    assert isinstance(result, Err)
    assert result.error.kind == "tool_missing"
    assert result.error.message == "vim: command not found"
    assert not staged.ran("git", "commit")


def test_ai_requires_key(staged: MockRunner) -> None:
    service, _ = make(staged, http=MockHttpClient())
    result = service.commit(ai=True, no_edit=True)
    assert isinstance(result, Err)
    assert result.error.kind == "config"
    assert result.error.message == "OpenAI API key not configured"


def test_ai_message(staged: MockRunner) -> None:
    staged.on("git", "diff", "--cached", stdout="diff --git a/src/app.py b/src/app.py\n")
    http = MockHttpClient()
    http.set_json(
        "POST",
        OPENAI_URL,
        {"choices": [{"message": {"content": "fix: handle empty input\n\nGuard the parser."}}]},
    )
    service, _ = make(staged, config=Config(openai_api_key="sk-x"), http=http)
    assert service.commit(ai=True, no_edit=True) == Ok(None)
    assert staged.live_calls == [
        ("git", "commit", "-m", "fix: handle empty input\nGuard the parser.")
    ]
    body = http.requests[0].body
    assert isinstance(body, dict)
    assert "diff --git a/src/app.py" in body["messages"][0]["content"]


def test_ai_failure(staged: MockRunner) -> None:
    service, _ = make(staged, config=Config(openai_api_key="sk-x"), http=MockHttpClient())
    result = service.commit(ai=True, no_edit=True)
    assert isinstance(result, Err)
    assert result.error.kind == "api"
    assert staged.live_calls == []


@pytest.mark.parametrize(
    ("answer", "expected"),
    [("1", "feat"), (" 7 ", "chore"), ("fix", "fix"), ("8", "8"), ("0", "0"), ("²", "²")],
)
def test_resolve_commit_type(answer: str, expected: str) -> None:
    assert resolve_commit_type(answer) == expected


def test_superscript_type_is_taken_as_a_name(staged: MockRunner) -> None:
    service, _ = make(staged, "²")
    assert service.commit(no_edit=True) == Ok(None)
    assert staged.live_calls == [("git", "commit", "-m", "²:")]


@pytest.mark.parametrize("editor", ['code "--wait', "   "])
def test_malformed_editor_is_a_config_error(staged: MockRunner, editor: str) -> None:
    service, _ = make(staged, config=Config(editor=editor))
    result = service.commit(commit_type="feat")
    assert isinstance(result, Err)
    assert result.error.kind == "config"
    assert result.error.hint == "Set $EDITOR or editor in ~/.githelper.yaml"
    assert staged.live_calls == []

"""Commit message generation with the OpenAI chat completions API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from githelper.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from githelper.platform.http import HttpClient

__all__ = [
    "AIError",
    "CommitGenerator",
    "OPENAI_URL",
    "build_prompt",
]

OPENAI_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4"
DEFAULT_TEMPERATURE = 0.7

_PROMPT = """Generate a conventional commit message for the following git diff:

{diff}

The commit message should:
1. Follow the format: <type>(<optional scope>): <description>
2. Use one of these types: feat, fix, docs, style, refactor, test, chore
3. Be concise but descriptive
4. Focus on the "what" and "why" rather than the "how"
5. Use imperative mood ("add" not "added")

Return only the commit message without any additional text."""


@dataclass(frozen=True, slots=True)
class AIError:
    message: str

    def __str__(self) -> str:
        return self.message


def build_prompt(diff: str) -> str:
    return _PROMPT.format(diff=diff)


def _first_choice(data: dict[str, Any]) -> str | None:
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


class CommitGenerator:
    """Turns a diff (or a list of commit messages) into a conventional commit.

    Usage:
        generator = CommitGenerator(RealHttpClient(), api_key)
        match generator.generate(diff):
            case Ok(message):
                ...
            case Err(e):
                console.warning(e.message)
    """

    def __init__(
        self,
        http: HttpClient,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        url: str = OPENAI_URL,
    ) -> None:
        self._http = http
        self._api_key = api_key
        self._model = model
        self._url = url

    def generate(self, diff: str) -> Result[str, AIError]:
        body = {
            "model": self._model,
            "messages": [{"role": "user", "content": build_prompt(diff)}],
            "temperature": DEFAULT_TEMPERATURE,
        }
        result = self._http.post_json(
            self._url, body, headers={"Authorization": f"Bearer {self._api_key}"}
        )
        if isinstance(result, Err):
            return Err(AIError(f"failed to generate commit message: {result.error}"))

        content = _first_choice(result.value)
        if content is None or not content.strip():
            return Err(AIError("failed to generate commit message: empty response"))
        return Ok(content.strip())

"""Commit message and branch name text helpers."""

from __future__ import annotations

import re

__all__ = [
    "COMMIT_TYPES",
    "branch_name_from_message",
    "commit_template",
    "default_squash_summary",
    "resolve_commit_type",
    "strip_comment_lines",
]

COMMIT_TYPES: tuple[tuple[str, str], ...] = (
    ("feat", "A new feature"),
    ("fix", "A bug fix"),
    ("docs", "Documentation only changes"),
    ("style", "Changes that don't affect the meaning of the code"),
    ("refactor", "Code change that neither fixes a bug nor adds a feature"),
    ("test", "Adding missing tests or correcting existing tests"),
    ("chore", "Changes to the build process or auxiliary tools"),
)

_TYPE_PREFIXES = tuple(f"{name}:" for name, _ in COMMIT_TYPES)
_NOT_BRANCH_CHAR = re.compile(r"[^a-z0-9-]")
_MAX_BRANCH_LEN = 30


def resolve_commit_type(answer: str) -> str:
    """Accept a commit type by number ("2") or by name ("fix")."""
    text = answer.strip()
    if text.isdecimal() and 1 <= int(text) <= len(COMMIT_TYPES):
        return COMMIT_TYPES[int(text) - 1][0]
    return text


def default_squash_summary(messages: str) -> str:
    """Join the first three non-empty lines of the squashed messages.

    "..." is appended when anything was left out.
    """
    lines = messages.strip().split("\n")
    first: list[str] = []
    for line in lines:
        line = line.strip()
        if line:
            first.append(line)
            if len(first) >= 3:
                break
    summary = "; ".join(first)
    if len(first) < len(lines):
        summary += "..."
    return summary


def branch_name_from_message(message: str) -> str:
    """Suggest a branch name from a commit message.

    "feat: Add OAuth login" becomes "add-oauth-login". Names are cut to 30
    characters and always start with a letter.
    """
    text = message.strip().split("\n", 1)[0]
    for prefix in _TYPE_PREFIXES:
        text = text.removeprefix(prefix)
    text = text.strip().lower().replace(" ", "-")
    text = _NOT_BRANCH_CHAR.sub("", text)[:_MAX_BRANCH_LEN]
    if not text or text[0].isdigit():
        text = "branch-" + text
    return text


def commit_template(first_line: str, summary: str, *, ai: bool = False) -> str:
    """Editor buffer: the proposed message followed by commented context."""
    parts = [first_line, "", "# Changes to be committed:"]
    parts += [f"# {line}" for line in summary.splitlines()]
    if ai:
        parts += ["", "# AI-generated commit message above"]
    parts.append("# Lines starting with '#' will be ignored")
    return "\n".join(parts) + "\n"


def strip_comment_lines(text: str) -> str:
    """Drop comment lines and empty lines from an edited message."""
    kept = [
        line for line in text.splitlines() if line.strip() and not line.strip().startswith("#")
    ]
    return "\n".join(kept)

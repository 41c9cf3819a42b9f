"""commit: conventional commit messages, typed or generated."""

from __future__ import annotations

import os
import shlex
import tempfile
from pathlib import Path

from githelper.core.errors import CommandError
from githelper.core.result import Err, Ok, Result

from .base import GitService, from_git
from .messages import COMMIT_TYPES, commit_template, resolve_commit_type, strip_comment_lines

__all__ = ["CommitService"]

DEFAULT_EDITOR = "vim"
OPENAI_HINT = "Set GITHELPER_OPENAI_API_KEY or openai_api_key in ~/.githelper.yaml"
EDITOR_HINT = "Set $EDITOR or editor in ~/.githelper.yaml"


class CommitService(GitService):
    def commit(
        self, *, no_edit: bool = False, commit_type: str | None = None, ai: bool = False
    ) -> Result[None, CommandError]:
        """Commit the staged changes.

        The message comes from the AI generator with `ai`, otherwise it starts
        as "<type>: ". Unless `no_edit`, it is opened in the editor first;
        comment lines and blank lines are dropped from the result.
        """
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked

        summary = self._repo.staged_summary()
        if isinstance(summary, Err):
            return Err(from_git(summary.error, "failed to get staged changes"))
        if not summary.value:
            return Err(
                CommandError.precondition(
                    "no staged changes found", hint="Use 'git add' to stage changes"
                )
            )

        first = self._first_line(commit_type, ai=ai)
        if isinstance(first, Err):
            return first
        if first.value is None:
            return self._cancelled()

        message = first.value
        if not no_edit:
            edited = self._edit(commit_template(first.value, summary.value, ai=ai))
            if isinstance(edited, Err):
                return edited
            message = edited.value

        message = strip_comment_lines(message).strip()
        if not message:
            self._console.print("Empty commit message")
            return self._cancelled()

        committed = self._live("commit", "-m", message, action="failed to commit")
        if isinstance(committed, Err):
            return committed

        self._console.success("Changes committed")
        return Ok(None)

    def _first_line(self, commit_type: str | None, *, ai: bool) -> Result[str | None, CommandError]:
        """Opening line of the message. Ok(None) if the user gave no type."""
        if ai:
            generator = self._commit_generator()
            if generator is None:
                return Err(
                    CommandError(kind="config", message="OpenAI API key not configured", hint=OPENAI_HINT)
                )
            diff = self._repo.staged_diff()
            if isinstance(diff, Err):
                return Err(from_git(diff.error, "failed to get detailed diff"))
            self._console.print("Generating commit message...")
            generated = generator.generate(diff.value)
            if isinstance(generated, Err):
                return Err(CommandError(kind="api", message=generated.error.message))
            return Ok(generated.value)

        kind = commit_type
        if not kind:
            self._console.header("Available commit types:")
            for i, (name, description) in enumerate(COMMIT_TYPES, 1):
                self._console.print(f"{i}. {name:<8} - {description}")
            kind = self._selector.ask("Enter commit type (or number)")
            if not kind:
                return Ok(None)
        return Ok(f"{resolve_commit_type(kind)}: ")

    def _editor(self) -> Result[list[str], CommandError]:
        command = self._config.editor or os.environ.get("EDITOR") or DEFAULT_EDITOR
        try:
            argv = shlex.split(command)
        except ValueError as e:
            return Err(CommandError(kind="config", message=f"invalid editor command: {e}", hint=EDITOR_HINT))
        if not argv:
            return Err(CommandError(kind="config", message="editor command is empty", hint=EDITOR_HINT))
        return Ok(argv)

    def _edit(self, text: str) -> Result[str, CommandError]:
        editor = self._editor()
        if isinstance(editor, Err):
            return editor
        with tempfile.TemporaryDirectory(prefix="githelper-commit-") as tmp:
            path = Path(tmp) / "COMMIT_EDITMSG"
            path.write_text(text, encoding="utf-8")

            opened = self._repo.runner.live([*editor.value, str(path)])
            if isinstance(opened, Err):
                if opened.error.is_missing:
                    return Err(
                        CommandError(
                            kind="tool_missing",
                            message=f"{opened.error.executable}: command not found",
                            hint=EDITOR_HINT,
                        )
                    )
                return Err(CommandError(kind="process_failed", message=f"failed to open editor: {opened.error}"))

            return Ok(path.read_text(encoding="utf-8"))

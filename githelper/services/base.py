"""Shared plumbing for command handlers.

Every handler follows the same shape: check a precondition, gather candidates
in capture mode, optionally select, confirm destructive steps, run the
effecting git commands live, print a summary. GitService holds the
collaborators and the steps that repeat across handlers.
"""

from __future__ import annotations

from typing import TypeVar

from githelper.ai.commit import CommitGenerator
from githelper.cli.selector import SelectionResult, Selector, SelectorError
from githelper.core.config import Config
from githelper.core.errors import CommandError
from githelper.core.result import Err, Ok, Result
from githelper.git.repository import GitError, Repository
from githelper.output.console import ConsoleProtocol, Style
from githelper.platform.http import HttpClient

__all__ = [
    "CANCELLED",
    "GitService",
    "from_git",
    "from_selector",
]

V = TypeVar("V")

CANCELLED = "Operation cancelled"
GIT_INSTALL_HINT = "Install git from https://git-scm.com/downloads"


def from_git(error: GitError, action: str) -> CommandError:
    """Map a git failure to a CommandError, keeping the captured stderr."""
    if error.tool_missing:
        return CommandError(kind="tool_missing", message="git: command not found", hint=GIT_INSTALL_HINT)
    return CommandError(kind="process_failed", message=f"{action}: {error.message}")


def from_selector(error: SelectorError, *, empty: str | None = None) -> CommandError:
    """Map a selector error. `empty` replaces the generic empty-list message."""
    if error.kind == "empty":
        return CommandError.precondition(empty or error.message)
    return CommandError.user_input(error.message)


class GitService:
    """Base class for handlers that operate on the current repository."""

    def __init__(
        self,
        *,
        repo: Repository,
        selector: Selector,
        console: ConsoleProtocol,
        config: Config,
        http: HttpClient | None = None,
    ) -> None:
        self._repo = repo
        self._selector = selector
        self._console = console
        self._config = config
        self._http = http

    def _commit_generator(self) -> CommitGenerator | None:
        """AI message generator, or None without an OpenAI key."""
        if self._http is None or not self._config.openai_api_key:
            return None
        return CommitGenerator(self._http, self._config.openai_api_key)

    # -- preconditions ------------------------------------------------------

    def _require_repo(self) -> Result[None, CommandError]:
        result = self._repo.is_repository()
        if isinstance(result, Err):
            return Err(from_git(result.error, "failed to inspect repository"))
        if not result.value:
            return Err(
                CommandError.precondition(
                    "not a git repository",
                    hint="Run this command inside a git work tree",
                )
            )
        return Ok(None)

    def _require_clean(self) -> Result[None, CommandError]:
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked
        dirty = self._repo.has_changes()
        if isinstance(dirty, Err):
            return Err(from_git(dirty.error, "failed to check git status"))
        if dirty.value:
            return Err(
                CommandError.precondition(
                    "you have uncommitted changes",
                    hint="Commit or stash them first",
                )
            )
        return Ok(None)

    # -- interaction --------------------------------------------------------

    def _cancelled(self) -> Result[None, CommandError]:
        self._console.print(CANCELLED, Style.DIM)
        return Ok(None)

    def _confirm(self, prompt: str = "Are you sure you want to continue?") -> bool:
        return self._selector.confirm(prompt)

    def _chosen(
        self,
        result: Result[SelectionResult[V], SelectorError],
        *,
        empty: str | None = None,
    ) -> Result[SelectionResult[V], CommandError]:
        if isinstance(result, Err):
            return Err(from_selector(result.error, empty=empty))
        return Ok(result.value)

    # -- effecting steps ----------------------------------------------------

    def _live(self, *args: str, action: str) -> Result[None, CommandError]:
        result = self._repo.live(*args)
        if isinstance(result, Err):
            return Err(from_git(result.error, action))
        return Ok(None)

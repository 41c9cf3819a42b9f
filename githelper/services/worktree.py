"""worktree subcommands: switch, create, remove, cleanup, pull."""

from __future__ import annotations

import os
from pathlib import Path

from githelper.cli.selector import SelectableItem
from githelper.core.errors import CommandError
from githelper.core.result import Err, Ok, Result
from githelper.output.console import Style

from .base import GitService, from_git

__all__ = ["WorktreeService"]

STATUS_PREVIEW = "git -C {key} status --short --branch"


class WorktreeService(GitService):
    def _pick(self, title: str) -> Result[str | None, CommandError]:
        listed = self._repo.worktrees()
        if isinstance(listed, Err):
            return Err(from_git(listed.error, "failed to list worktrees"))

        items = [SelectableItem(label=w.label, value=w.path, preview_key=w.path) for w in listed.value]
        picked = self._chosen(
            self._selector.select_one(items, title=title, preview=STATUS_PREVIEW),
            empty="no worktrees found",
        )
        if isinstance(picked, Err):
            return picked
        return Ok(picked.value.value)

    def switch(self) -> Result[None, CommandError]:
        """Change into a selected worktree.

        Only this process changes directory; the path is printed so a shell
        wrapper can `cd` to it.
        """
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked

        path = self._pick("Available worktrees:")
        if isinstance(path, Err):
            return path
        if path.value is None:
            return self._cancelled()

        self._console.print(f"Switching to worktree: {path.value}")
        try:
            os.chdir(path.value)
        except OSError as e:
            return Err(CommandError.precondition(f"failed to change directory: {e}"))

        self._console.success(f"Now in: {Path.cwd()}")
        self._console.print(f"cd {path.value}", Style.DIM)
        return Ok(None)

    def create(self, branch: str) -> Result[None, CommandError]:
        """Check out `branch` in a sibling directory named after it."""
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked

        target = Path("..") / branch
        self._console.print(f"Creating worktree for branch '{branch}'...")
        created = self._live("worktree", "add", str(target), branch, action="failed to create worktree")
        if isinstance(created, Err):
            return created

        self._console.success(f"Worktree created at: {target}")
        return Ok(None)

    def remove(self, path: str) -> Result[None, CommandError]:
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked

        self._console.print(f"Removing worktree: {path}")
        removed = self._live("worktree", "remove", path, action="failed to remove worktree")
        if isinstance(removed, Err):
            return removed

        self._console.success(f"Worktree removed: {path}")
        return Ok(None)

    def cleanup(self, *, main_branch: str | None = None) -> Result[None, CommandError]:
        """Remove worktrees whose branch is merged into the main branch.

        The list is confirmed first. Removal is best-effort: a worktree that
        cannot be removed is reported and skipped.
        """
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked
        main = main_branch or self._config.main_branch

        merged = self._repo.merged_branches(main, include_worktrees=True)
        if isinstance(merged, Err):
            return Err(from_git(merged.error, "failed to get merged branches"))
        listed = self._repo.worktrees()
        if isinstance(listed, Err):
            return Err(from_git(listed.error, "failed to list worktrees"))

        # The first entry is the main worktree and cannot be removed.
        candidates = [w for w in listed.value[1:] if w.branch in merged.value]
        if not candidates:
            self._console.print("No merged worktrees to remove")
            return Ok(None)

        self._console.header("Worktrees with merged branches:")
        for worktree in candidates:
            self._console.print(f"  {worktree.path} ({worktree.branch})")
        if not self._confirm("Remove these worktrees?"):
            return self._cancelled()

        removed = 0
        for worktree in candidates:
            self._console.print(f"Removing worktree for merged branch: {worktree.branch}")
            result = self._repo.live("worktree", "remove", worktree.path)
            if isinstance(result, Err):
                self._console.warning(f"failed to remove worktree {worktree.path}")
                continue
            removed += 1

        self._console.success(f"Cleanup complete, removed {removed} worktree(s)")
        return Ok(None)

    def pull(self) -> Result[None, CommandError]:
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked

        path = self._pick("Available worktrees:")
        if isinstance(path, Err):
            return path
        if path.value is None:
            return self._cancelled()

        self._console.print(f"Pulling updates in worktree: {path.value}")
        pulled = self._repo.live("pull", cwd=Path(path.value))
        if isinstance(pulled, Err):
            return Err(from_git(pulled.error, "failed to pull updates"))

        self._console.success("Updates pulled successfully")
        return Ok(None)

"""Branch and remote housekeeping: switch, prune, prune-remotes, rescue."""

from __future__ import annotations

from typing import Literal

from githelper.cli.selector import SelectableItem
from githelper.core.errors import CommandError
from githelper.core.result import Err, Ok, Result
from githelper.git.parsing import Branch, Remote
from githelper.output.console import Style

from .base import GitService, from_git
from .messages import branch_name_from_message

__all__ = ["BranchService", "sort_branches"]

SortKey = Literal["date", "name"]

SWITCH_PREVIEW = "git log --color=always --oneline --graph {key}"


def sort_branches(branches: list[Branch], sort: SortKey) -> list[Branch]:
    """Newest commit first for "date", alphabetical for "name".

    Branches with an unreadable date sort last.
    """
    if sort == "name":
        return sorted(branches, key=lambda b: b.name)
    dated = [b for b in branches if b.date is not None]
    undated = [b for b in branches if b.date is None]
    dated.sort(key=lambda b: b.date.timestamp() if b.date else 0.0, reverse=True)
    return dated + undated


class BranchService(GitService):
    def switch(self, *, include_remote: bool = False, sort: SortKey = "date") -> Result[None, CommandError]:
        checked = self._require_clean()
        if isinstance(checked, Err):
            return checked

        listed = self._repo.branches(include_remote=include_remote)
        if isinstance(listed, Err):
            return Err(from_git(listed.error, "failed to list branches"))

        items = [
            SelectableItem(label=b.label, value=b.name, preview_key=b.name)
            for b in sort_branches(listed.value, sort)
        ]
        picked = self._chosen(
            self._selector.select_one(items, title="Available branches:", preview=SWITCH_PREVIEW),
            empty="no branches found",
        )
        if isinstance(picked, Err):
            return picked
        if picked.value.cancelled or picked.value.value is None:
            return self._cancelled()

        name = picked.value.value
        self._console.print(f"Switching to branch '{name}'...")
        switched = self._live("checkout", name, action="failed to switch branch")
        if isinstance(switched, Err):
            return switched

        self._console.success(f"Switched to branch '{name}'")
        return Ok(None)

    def prune(self, *, main_branch: str | None = None, force: bool = False) -> Result[None, CommandError]:
        """Delete local branches already merged into the main branch."""
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked
        main = main_branch or self._config.main_branch

        self._console.print("Fetching and pruning remote branches...")
        fetched = self._live("fetch", "-p", action="failed to fetch and prune")
        if isinstance(fetched, Err):
            return fetched

        merged = self._repo.merged_branches(main)
        if isinstance(merged, Err):
            return Err(from_git(merged.error, "failed to list merged branches"))
        branches = merged.value
        if not branches:
            self._console.success("No merged branches to clean up")
            return Ok(None)

        self._console.header("Merged branches to delete:")
        for name in branches:
            self._console.print(f"- {name}")

        if not force and not self._confirm():
            return self._cancelled()

        deleted = 0
        for name in branches:
            self._console.print(f"Deleting branch '{name}'...")
            result = self._repo.live("branch", "-d", name)
            if isinstance(result, Err):
                self._console.warning(f"failed to delete branch '{name}': {result.error.message}")
                continue
            deleted += 1

        self._console.success(f"Deleted {deleted} merged branch(es)")
        return Ok(None)

    def prune_remotes(self, *, dry_run: bool = False, force: bool = False) -> Result[None, CommandError]:
        """Remove remotes that no longer answer `git ls-remote`."""
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked

        listed = self._repo.remotes()
        if isinstance(listed, Err):
            return Err(from_git(listed.error, "failed to list remotes"))
        if not listed.value:
            self._console.print("No git remotes configured.")
            return Ok(None)

        self._console.print("Checking remotes...")
        unreachable: list[Remote] = [
            r for r in listed.value if not self._repo.is_remote_reachable(r.name)
        ]
        if not unreachable:
            self._console.success("All remotes are reachable")
            return Ok(None)

        heading = "would be removed" if dry_run else "will be removed"
        self._console.header(f"The following remotes {heading}:")
        for remote in unreachable:
            self._console.print(f"- {remote.name} ({remote.url})")
        if dry_run:
            return Ok(None)

        if not force and not self._confirm():
            return self._cancelled()

        removed = 0
        for remote in unreachable:
            result = self._repo.live("remote", "remove", remote.name)
            if isinstance(result, Err):
                self._console.warning(
                    f"failed to remove remote '{remote.name}': {result.error.message}"
                )
                continue
            removed += 1
            self._console.print(f"Removed remote '{remote.name}'")

        self._console.success(f"Removed {removed} unreachable remote(s)")
        return Ok(None)

    def rescue(self, name: str | None = None) -> Result[None, CommandError]:
        """Create a branch at a detached HEAD so its commits are not lost."""
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked

        detached = self._repo.is_detached()
        if isinstance(detached, Err):
            return Err(from_git(detached.error, "failed to check HEAD state"))
        if not detached.value:
            return Err(
                CommandError.precondition(
                    "not in detached HEAD state",
                    hint="This command is only needed when HEAD is detached",
                )
            )

        recent = self._repo.log("HEAD", limit=5)
        if isinstance(recent, Err):
            return Err(from_git(recent.error, "failed to show recent commits"))
        if recent.value:
            self._console.header("Current HEAD position:")
            self._console.print(recent.value[0].label)
            self._console.header("Recent commits:")
            for commit in recent.value:
                self._console.print(commit.label, Style.DIM)

        branch = name
        if not branch:
            message = self._repo.last_commit_message()
            suggestion = branch_name_from_message(message.unwrap_or(""))
            self._console.print(f"Suggested branch name: {suggestion}")
            branch = self._selector.ask(
                "Enter branch name (or press Enter to use suggestion)", default=suggestion
            )
            if not branch:
                return self._cancelled()

        self._console.print(f"Creating new branch '{branch}' from current position...")
        created = self._live("checkout", "-b", branch, action="failed to create branch")
        if isinstance(created, Err):
            return created

        self._console.success(f"Created branch '{branch}'")
        self._console.print("You can now continue working on this branch.", Style.DIM)
        return Ok(None)

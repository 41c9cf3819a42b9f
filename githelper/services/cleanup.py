"""History cleanup: clean, purge, remove and refresh.

clean, purge and remove rewrite every commit with `git filter-branch`. They
always confirm first and never push unless asked to.
"""

from __future__ import annotations

import shlex
from pathlib import Path

from githelper.cli.selector import SelectableItem
from githelper.core.errors import CommandError
from githelper.core.result import Err, Ok, Result
from githelper.core.sizes import format_size, parse_size
from githelper.git.parsing import LargeFile
from githelper.output.console import Style

from .base import GitService, from_git

__all__ = ["CleanupService", "filter_branch_args", "select_large_files"]

FORCE_PUSH_HINT = "git push origin --force --all"


def filter_branch_args(path: str) -> tuple[str, ...]:
    """git arguments that drop `path` from every commit on every ref."""
    return (
        "filter-branch",
        "--force",
        "--index-filter",
        f"git rm --cached --ignore-unmatch {shlex.quote(path)}",
        "--prune-empty",
        "--tag-name-filter",
        "cat",
        "--",
        "--all",
    )


def select_large_files(files: list[LargeFile], *, top: int, min_size: int = 0) -> list[LargeFile]:
    """Largest first, at least min_size bytes, at most top entries."""
    kept = [f for f in files if f.size >= min_size]
    kept.sort(key=lambda f: f.size, reverse=True)
    return kept[: max(top, 0)]


class CleanupService(GitService):
    def clean(
        self, file: str | None = None, *, top: int = 10, min_size: str | None = None
    ) -> Result[None, CommandError]:
        """Remove one of the largest files from history."""
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked

        target = file
        if not target:
            threshold = 0
            if min_size:
                parsed = parse_size(min_size)
                if isinstance(parsed, Err):
                    return Err(CommandError.user_input(parsed.error, hint="Use e.g. 500KB or 100MB"))
                threshold = parsed.value

            self._console.print("Finding large files in git history...")
            found = self._repo.large_files()
            if isinstance(found, Err):
                return Err(from_git(found.error, "failed to get git objects"))

            files = select_large_files(found.value, top=top, min_size=threshold)
            items = [
                SelectableItem(label=f"{format_size(f.size):>10}  {f.path}", value=f.path, preview_key=f.path)
                for f in files
            ]
            picked = self._chosen(
                self._selector.select_one(items, title="Largest files in history:"),
                empty="no files found matching the criteria",
            )
            if isinstance(picked, Err):
                return picked
            if picked.value.value is None:
                return self._cancelled()
            target = picked.value.value

        rewritten = self._rewrite_without(target)
        if isinstance(rewritten, Err) or rewritten.value is False:
            return rewritten.map(lambda _: None)

        self._console.success("File removed from git history")
        self._console.print("To push these changes:", Style.DIM)
        self._console.print(FORCE_PUSH_HINT, Style.DIM)
        return Ok(None)

    def purge(self, file: str | None = None, *, force_push: bool = False) -> Result[None, CommandError]:
        """Remove a tracked file from history, optionally force-pushing."""
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked

        target = file
        if not target:
            tracked = self._repo.tracked_files()
            if isinstance(tracked, Err):
                return Err(from_git(tracked.error, "failed to list files"))

            if self._repo.runner.which("bat") is not None:
                preview = "bat --style=numbers --color=always {key}"
            else:
                preview = "cat {key}"
            items = [SelectableItem(label=p, value=p, preview_key=p) for p in tracked.value]
            picked = self._chosen(
                self._selector.select_one(items, title="Tracked files:", preview=preview),
                empty="no tracked files",
            )
            if isinstance(picked, Err):
                return picked
            if picked.value.value is None:
                return self._cancelled()
            target = picked.value.value

        rewritten = self._rewrite_without(target)
        if isinstance(rewritten, Err) or rewritten.value is False:
            return rewritten.map(lambda _: None)

        if force_push:
            self._console.print("Force pushing changes...")
            pushed = self._live("push", "origin", "--force", "--all", action="failed to force push")
            if isinstance(pushed, Err):
                return pushed
        else:
            self._console.warning("Changes are local only. To push them:")
            self._console.print(FORCE_PUSH_HINT, Style.DIM)

        self._console.success("File removed from git history")
        return Ok(None)

    def remove(self, file: str, *, force: bool = False) -> Result[None, CommandError]:
        """Remove an existing file from history.

        Without force only the commands are printed. With force they run,
        followed by dropping the backup refs, expiring the reflog and a gc so
        the objects are actually gone.
        """
        path = Path(file)
        if not path.exists():
            return Err(CommandError.precondition(f"file does not exist: {file}"))

        root = self._repo.root()
        if isinstance(root, Err):
            if root.error.tool_missing:
                return Err(from_git(root.error, "failed to get git root"))
            return Err(CommandError.precondition("not a git repository"))

        try:
            rel = path.resolve().relative_to(root.value.resolve()).as_posix()
        except ValueError:
            return Err(CommandError.precondition(f"{file} is outside the repository at {root.value}"))

        if not force:
            self._print_manual_removal(rel)
            return Ok(None)

        rewritten = self._rewrite_without(rel)
        if isinstance(rewritten, Err) or rewritten.value is False:
            return rewritten.map(lambda _: None)

        backups = self._repo.capture("for-each-ref", "--format=%(refname)", "refs/original/")
        if isinstance(backups, Ok):
            for ref in backups.value.split():
                self._repo.live("update-ref", "-d", ref)

        for args, action in (
            (("reflog", "expire", "--expire=now", "--all"), "failed to expire reflog"),
            (("gc", "--prune=now", "--aggressive"), "failed to garbage collect"),
        ):
            result = self._live(*args, action=action)
            if isinstance(result, Err):
                return result

        self._console.success(f"'{rel}' removed from git history")
        self._console.print("Finally, force push your changes:", Style.DIM)
        self._console.print("git push --force", Style.DIM)
        return Ok(None)

    def _print_manual_removal(self, rel: str) -> None:
        self._console.warning(f"This will permanently remove '{rel}' from git history.")
        self._console.print("This operation cannot be undone and will rewrite git history.")
        self._console.print("\nIf you're sure you want to proceed, run:")
        self._console.print(shlex.join(["git", *filter_branch_args(rel)]), Style.DIM)
        self._console.print("\nAfter the operation completes, run:")
        for line in (
            "rm -rf .git/refs/original/",
            "git reflog expire --expire=now --all",
            "git gc --prune=now --aggressive",
        ):
            self._console.print(line, Style.DIM)
        self._console.print("\nFinally, force push your changes:")
        self._console.print("git push --force", Style.DIM)
        self._console.print("\nOr run again with --force to do all of this now.")

    def _rewrite_without(self, path: str) -> Result[bool, CommandError]:
        """Confirm, then filter `path` out of history. Ok(False) if declined."""
        self._console.warning(f"This will permanently remove '{path}' from git history!")
        self._console.print("This action CANNOT be undone and will rewrite git history.")
        if not self._confirm():
            self._cancelled()
            return Ok(False)

        self._console.print(f"Removing '{path}' from history...")
        result = self._live(*filter_branch_args(path), action="failed to remove file from history")
        if isinstance(result, Err):
            return result
        return Ok(True)

    def refresh(
        self, files: list[str] | None = None, *, crlf: bool = False, clean: bool = False
    ) -> Result[None, CommandError]:
        """Reset the index and work tree to HEAD, optionally fixing line endings."""
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked

        if clean:
            dirty = self._repo.has_changes()
            if isinstance(dirty, Err):
                return Err(from_git(dirty.error, "failed to check git status"))
            if dirty.value:
                self._console.warning("This will remove all untracked files and directories!")
                if not self._confirm():
                    return self._cancelled()

        if crlf:
            self._console.print("Fixing line endings...")
            for args, action in (
                (("config", "core.autocrlf", "false"), "failed to configure line endings"),
                (("add", "--renormalize", "."), "failed to renormalize files"),
            ):
                result = self._live(*args, action=action)
                if isinstance(result, Err):
                    return result

        self._console.print("Refreshing git index...")
        targets = files or ["."]
        checkout = self._live("checkout", "--", *targets, action="failed to refresh index")
        if isinstance(checkout, Err):
            return checkout

        if clean:
            self._console.print("Removing untracked files...")
            cleaned = self._live("clean", "-fd", action="failed to clean untracked files")
            if isinstance(cleaned, Err):
                return cleaned

        reset = self._live("reset", "--hard", "HEAD", action="failed to reset to HEAD")
        if isinstance(reset, Err):
            return reset

        self._console.success("Git index refreshed")
        return Ok(None)

"""sync and sync-fork: bring the current branch up to date."""

from __future__ import annotations

from datetime import datetime

from githelper.core.errors import CommandError
from githelper.core.result import Err, Ok, Result
from githelper.git.urls import detect_upstream_url, normalize_repo_url
from githelper.output.console import Style

from .base import GitService, from_git

__all__ = ["SyncService"]


class SyncService(GitService):
    def sync(
        self,
        branch: str | None = None,
        *,
        no_stash: bool = False,
        force: bool = False,
    ) -> Result[None, CommandError]:
        """Rebase local commits onto the remote branch, stashing work around it.

        If the pull fails the stash is left in place so nothing is lost.
        """
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked

        dirty = self._repo.has_changes()
        if isinstance(dirty, Err):
            return Err(from_git(dirty.error, "failed to check git status"))

        stashed = False
        if dirty.value and not no_stash:
            self._console.print("Stashing local changes...")
            stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            result = self._live(
                "stash",
                "push",
                "--include-untracked",
                "-m",
                f"Automatic stash by githelper sync at {stamp}",
                action="failed to stash changes",
            )
            if isinstance(result, Err):
                return result
            stashed = True
        elif dirty.value:
            if not force:
                return Err(
                    CommandError.precondition(
                        "you have uncommitted changes",
                        hint="Use --force to proceed anyway, or commit/stash your changes",
                    )
                )
            self._console.warning("Proceeding with uncommitted changes (forced)")

        self._console.print("Fetching remote changes...")
        fetched = self._live("fetch", "origin", action="failed to fetch remote changes")
        if isinstance(fetched, Err):
            return fetched

        self._console.print("Pulling remote changes with rebase...")
        pulled = self._live(
            "pull", "--rebase", "origin", branch or "HEAD", action="failed to pull with rebase"
        )
        if isinstance(pulled, Err):
            if stashed:
                return Err(
                    CommandError(
                        kind=pulled.error.kind,
                        message=pulled.error.message,
                        hint="Your changes are safe in the stash. Resolve the conflicts, "
                        "then run 'git stash pop'",
                    )
                )
            return pulled

        if stashed:
            self._console.print("Restoring your local changes...")
            popped = self._repo.live("stash", "pop")
            if isinstance(popped, Err):
                self._console.warning("failed to restore stashed changes")
                self._console.print(
                    "Your changes are still in the stash. Use 'git stash pop' to restore them.",
                    Style.DIM,
                )

        self._console.success("Successfully synchronized with remote")
        return Ok(None)

    def sync_fork(
        self, *, upstream: str | None = None, branch: str = "main"
    ) -> Result[None, CommandError]:
        """Rebase the current branch onto upstream/<branch> and push to origin."""
        checked = self._require_clean()
        if isinstance(checked, Err):
            return checked

        configured = self._ensure_upstream(upstream)
        if isinstance(configured, Err):
            return configured

        self._console.print("Fetching upstream changes...")
        fetched = self._live("fetch", "upstream", action="failed to fetch upstream")
        if isinstance(fetched, Err):
            return fetched

        current = self._repo.current_branch()
        if isinstance(current, Err):
            return Err(from_git(current.error, "failed to get current branch"))

        self._console.print(f"Rebasing on upstream/{branch}...")
        rebased = self._live("rebase", f"upstream/{branch}", action="failed to rebase")
        if isinstance(rebased, Err):
            return Err(
                CommandError(
                    kind=rebased.error.kind,
                    message=rebased.error.message,
                    hint="Resolve the conflicts, then run 'git rebase --continue'",
                )
            )

        self._console.print("Pushing changes to fork...")
        pushed = self._live(
            "push",
            "origin",
            current.value,
            "--force-with-lease",
            action="failed to push changes",
        )
        if isinstance(pushed, Err):
            return pushed

        self._console.success("Successfully synced fork with upstream")
        return Ok(None)

    def _ensure_upstream(self, upstream: str | None) -> Result[None, CommandError]:
        remotes = self._repo.remotes()
        if isinstance(remotes, Err):
            return Err(from_git(remotes.error, "failed to list remotes"))
        if any(r.name == "upstream" for r in remotes.value):
            return Ok(None)

        url = normalize_repo_url(upstream) if upstream else None
        if not url:
            origin = self._repo.remote_url("origin")
            if isinstance(origin, Err):
                return Err(
                    CommandError.precondition(
                        "upstream not configured and origin URL is unavailable",
                        hint="Specify the upstream with --upstream",
                    )
                )
            url = detect_upstream_url(origin.value)
            if url is None:
                return Err(
                    CommandError.precondition(
                        "could not detect upstream repository",
                        hint="Specify the upstream with --upstream",
                    )
                )

        self._console.print(f"Adding upstream remote: {url}")
        return self._live("remote", "add", "upstream", url, action="failed to add upstream remote")

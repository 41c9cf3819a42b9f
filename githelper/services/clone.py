"""clone and copy: bring repositories down, or over to a new home on GitHub."""

from __future__ import annotations

import tempfile
from pathlib import Path

from githelper.core.errors import CommandError
from githelper.core.result import Err, Ok, Result
from githelper.core.sizes import format_size
from githelper.git.urls import (
    default_directory,
    mirror_push_url,
    normalize_repo_url,
    parse_github_url,
    split_owner_repo,
)
from githelper.github.client import DEFAULT_DESCRIPTION, GitHubClient, RepoConfig
from githelper.output.console import Style

from .base import GitService

__all__ = ["CloneService", "directory_size"]

TOKEN_HINT = "Set GITHELPER_GITHUB_TOKEN or github_token in ~/.githelper.yaml"


def directory_size(path: Path) -> int:
    """Total size in bytes of the regular files under path."""
    return sum(p.stat().st_size for p in path.rglob("*") if p.is_file() and not p.is_symlink())


class CloneService(GitService):
    def clone(
        self,
        repo: str,
        directory: str | None = None,
        *,
        depth: int = 0,
        single_branch: bool = False,
        no_tags: bool = False,
    ) -> Result[None, CommandError]:
        target = directory or default_directory(repo)
        url = normalize_repo_url(repo)

        args = ["clone"]
        if depth > 0:
            args += ["--depth", str(depth)]
        if single_branch:
            args.append("--single-branch")
        if no_tags:
            args.append("--no-tags")
        args += ["--progress", url, target]

        self._console.print(f"Cloning repository: {url}")
        if depth > 0:
            self._console.print(f"Shallow clone with depth: {depth}", Style.DIM)
        if single_branch:
            self._console.print("Cloning only the default branch", Style.DIM)
        if no_tags:
            self._console.print("Skipping tag download", Style.DIM)

        cloned = self._live(*args, action="failed to clone repository")
        if isinstance(cloned, Err):
            return cloned

        destination = (self._repo.path or Path.cwd()) / target
        if destination.is_dir():
            self._console.print(f"Repository size: {format_size(directory_size(destination))}")
        self._console.success(f"Repository cloned successfully to: {target}")
        return Ok(None)

    def copy(
        self,
        url: str,
        *,
        dest: str,
        org: bool = False,
        dry_run: bool = False,
        private: bool = True,
        description: str = "",
        topics: tuple[str, ...] = (),
        issues: bool = True,
        wiki: bool = True,
        ssh: bool | None = None,
    ) -> Result[None, CommandError]:
        """Mirror a GitHub repository, with all branches and tags, into a new one."""
        source = parse_github_url(url)
        if isinstance(source, Err):
            return Err(CommandError.user_input(source.error))
        parts = split_owner_repo(dest)
        if isinstance(parts, Err):
            return Err(CommandError.user_input(parts.error))
        owner, name = parts.value

        is_org = org or (self._config.default_org is not None and owner == self._config.default_org)
        use_ssh = self._config.use_ssh if ssh is None else ssh
        settings = RepoConfig(
            private=private,
            description=description,
            topics=tuple(t for t in topics if t),
            has_issues=issues,
            has_wiki=wiki,
        )

        if dry_run:
            self._print_plan(url, dest, settings, use_ssh=use_ssh)
            return Ok(None)

        token = self._config.github_token
        if not token:
            return Err(CommandError(kind="config", message="GitHub token not configured", hint=TOKEN_HINT))
        if self._http is None:
            return Err(CommandError(kind="config", message="no HTTP client available for the GitHub API"))

        self._console.print(f"Starting repository copy from {url} to {dest}")
        with tempfile.TemporaryDirectory(prefix="githelper-copy-") as tmp:
            mirror = Path(tmp) / "mirror.git"
            self._console.print(f"Working directory: {tmp}", Style.DIM)

            self._console.print("Cloning source repository...")
            cloned = self._live("clone", "--mirror", url, str(mirror), action="git clone failed")
            if isinstance(cloned, Err):
                return cloned

            self._console.print("Creating destination repository...")
            client = GitHubClient(self._http, token)
            created = client.create_repository(owner, name, settings, is_org=is_org)
            if isinstance(created, Err):
                return Err(
                    CommandError(
                        kind="api",
                        message=f"failed to create destination repository: {created.error.message}",
                    )
                )

            self._console.print("Pushing repository content...")
            pushed = self._repo.live("push", "--mirror", mirror_push_url(dest, use_ssh), cwd=mirror)
            if isinstance(pushed, Err):
                return Err(
                    CommandError(
                        kind="process_failed",
                        message=f"git push failed: {pushed.error.message}",
                        hint=f"The repository {dest} was created but is empty",
                    )
                )

        self._console.success(f"Successfully copied repository to {dest}")
        return Ok(None)

    def _print_plan(self, url: str, dest: str, settings: RepoConfig, *, use_ssh: bool) -> None:
        lines = [
            "1. Create temporary directory for cloning",
            f"2. Clone {url} with --mirror flag",
            f"3. Create new repository at {dest}",
            f"   - Private: {settings.private}",
            f"   - Description: {settings.description or DEFAULT_DESCRIPTION}",
        ]
        if settings.topics:
            lines.append(f"   - Topics: {', '.join(settings.topics)}")
        lines += [
            f"   - Issues enabled: {settings.has_issues}",
            f"   - Wiki enabled: {settings.has_wiki}",
            f"4. Push mirror to {mirror_push_url(dest, use_ssh)}",
            "5. Clean up temporary directory",
        ]
        self._console.header("Dry run - no changes will be made")
        self._console.print("Would perform the following actions:")
        for line in lines:
            self._console.print(line)

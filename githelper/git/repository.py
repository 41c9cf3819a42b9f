"""Git repository abstraction.

Repository wraps the git invocations shared by the command handlers. Queries
run in capture mode and return parsed records. Anything that mutates the
repository or a remote goes through `live`, which attaches git to the
terminal so the user sees progress and prompts.

Usage:
    repo = Repository(SubprocessRunner())

    match repo.branches(include_remote=True):
        case Ok(branches):
            for b in branches:
                print(b.label)
        case Err(e):
            print(f"Error: {e.message}")

    match repo.live("checkout", "dev"):
        case Err(e):
            print(f"checkout failed: {e.message}")
        case Ok(_):
            pass
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from githelper.core.result import Err, Ok, Result
from githelper.platform.process import ProcessError, ProcessRunner

from .parsing import (
    BATCH_CHECK_FORMAT,
    BRANCH_FORMAT,
    LOG_FORMAT,
    REFLOG_FORMAT,
    Branch,
    Commit,
    LargeFile,
    ReflogEntry,
    Remote,
    Worktree,
    parse_blob_sizes,
    parse_branches,
    parse_log,
    parse_merged_branches,
    parse_name_list,
    parse_reflog,
    parse_remotes,
    parse_worktrees,
)

__all__ = [
    "GitError",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed (e.g. "rebase")
        message: Error message (captured stderr when available)
        returncode: Process return code
        tool_missing: True when git itself is not installed
    """

    command: str
    message: str
    returncode: int = 1
    tool_missing: bool = False

    @classmethod
    def from_process(cls, error: ProcessError) -> GitError:
        args = error.command[1:]
        return cls(
            command=" ".join(args[:2]) if args else "git",
            message=error.detail,
            returncode=error.returncode,
            tool_missing=error.is_missing,
        )


class Repository:
    """Git repository in the current (or given) directory.

    Attributes:
        path: Directory git runs in; None means the process working directory
    """

    def __init__(self, runner: ProcessRunner, path: Path | None = None) -> None:
        self.runner = runner
        self.path = path

    # -- primitives ---------------------------------------------------------

    def capture(self, *args: str, input_text: str | None = None) -> Result[str, GitError]:
        """Run git in capture mode and return stdout."""
        result = self.runner.capture(["git", *args], cwd=self.path, input_text=input_text)
        if isinstance(result, Err):
            return Err(GitError.from_process(result.error))
        return Ok(result.value)

    def live(
        self, *args: str, cwd: Path | None = None, input_text: str | None = None
    ) -> Result[None, GitError]:
        """Run git attached to the terminal."""
        result = self.runner.live(["git", *args], cwd=cwd or self.path, input_text=input_text)
        if isinstance(result, Err):
            return Err(GitError.from_process(result.error))
        return Ok(None)

    # -- state --------------------------------------------------------------

    def is_repository(self) -> Result[bool, GitError]:
        """True inside a work tree. Err only when git is missing."""
        result = self.capture("rev-parse", "--git-dir")
        if isinstance(result, Err):
            if result.error.tool_missing:
                return result
            return Ok(False)
        return Ok(True)

    def root(self) -> Result[Path, GitError]:
        result = self.capture("rev-parse", "--show-toplevel")
        if isinstance(result, Err):
            return result
        return Ok(Path(result.value.strip()))

    def has_changes(self) -> Result[bool, GitError]:
        """True if the work tree has staged, unstaged or untracked changes."""
        result = self.capture("status", "--porcelain")
        if isinstance(result, Err):
            return result
        return Ok(result.value.strip() != "")

    def current_branch(self) -> Result[str, GitError]:
        """Current branch name, or "HEAD" when detached."""
        result = self.capture("rev-parse", "--abbrev-ref", "HEAD")
        if isinstance(result, Err):
            return result
        return Ok(result.value.strip())

    def is_detached(self) -> Result[bool, GitError]:
        """True when HEAD points at a commit rather than a branch.

        symbolic-ref fails both for a detached HEAD and for a broken repository,
        so HEAD is verified before reporting detached.
        """
        symbolic = self.capture("symbolic-ref", "-q", "HEAD")
        if isinstance(symbolic, Ok):
            return Ok(False)
        if symbolic.error.tool_missing:
            return symbolic
        verify = self.capture("rev-parse", "--verify", "HEAD")
        if isinstance(verify, Err):
            return verify
        return Ok(True)

    def head_sha(self) -> Result[str, GitError]:
        result = self.capture("rev-parse", "HEAD")
        if isinstance(result, Err):
            return result
        return Ok(result.value.strip())

    def last_commit_message(self) -> Result[str, GitError]:
        result = self.capture("log", "-1", "--pretty=%B")
        if isinstance(result, Err):
            return result
        return Ok(result.value.strip())

    # -- listings -----------------------------------------------------------

    def branches(self, *, include_remote: bool = False) -> Result[list[Branch], GitError]:
        args = ["branch", f"--format={BRANCH_FORMAT}"]
        if include_remote:
            args.insert(1, "-a")
        result = self.capture(*args)
        if isinstance(result, Err):
            return result
        return Ok(parse_branches(result.value))

    def merged_branches(
        self, main_branch: str, *, include_worktrees: bool = False
    ) -> Result[list[str], GitError]:
        result = self.capture("branch", "--merged", main_branch)
        if isinstance(result, Err):
            return result
        return Ok(
            parse_merged_branches(result.value, main_branch, include_worktrees=include_worktrees)
        )

    def remotes(self) -> Result[list[Remote], GitError]:
        result = self.capture("remote", "-v")
        if isinstance(result, Err):
            return result
        return Ok(parse_remotes(result.value))

    def remote_url(self, name: str) -> Result[str, GitError]:
        result = self.capture("remote", "get-url", name)
        if isinstance(result, Err):
            return result
        return Ok(result.value.strip())

    def is_remote_reachable(self, name: str) -> bool:
        return isinstance(self.capture("ls-remote", "--exit-code", name), Ok)

    def reflog(self, limit: int = 50) -> Result[list[ReflogEntry], GitError]:
        result = self.capture("reflog", "-n", str(limit), f"--format={REFLOG_FORMAT}")
        if isinstance(result, Err):
            return result
        return Ok(parse_reflog(result.value))

    def worktrees(self) -> Result[list[Worktree], GitError]:
        result = self.capture("worktree", "list", "--porcelain")
        if isinstance(result, Err):
            return result
        return Ok(parse_worktrees(result.value))

    def log(
        self, revision: str = "HEAD", *, limit: int | None = None, reverse: bool = False
    ) -> Result[list[Commit], GitError]:
        args = ["log", f"--format={LOG_FORMAT}"]
        if limit is not None:
            args += ["-n", str(limit)]
        if reverse:
            args.append("--reverse")
        args.append(revision)
        result = self.capture(*args)
        if isinstance(result, Err):
            return result
        return Ok(parse_log(result.value))

    def commit_messages(self, count: int) -> Result[str, GitError]:
        """Full messages of the last `count` commits, newest first."""
        return self.capture("log", "-n", str(count), "--format=%B")

    def staged_summary(self) -> Result[str, GitError]:
        result = self.capture("diff", "--cached", "--stat")
        if isinstance(result, Err):
            return result
        return Ok(result.value.strip())

    def staged_diff(self) -> Result[str, GitError]:
        return self.capture("diff", "--cached")

    def conflicted_files(self) -> Result[list[str], GitError]:
        result = self.capture("diff", "--name-only", "--diff-filter=U")
        if isinstance(result, Err):
            return result
        return Ok(parse_name_list(result.value))

    def tracked_files(self) -> Result[list[str], GitError]:
        result = self.capture("ls-files")
        if isinstance(result, Err):
            return result
        return Ok(parse_name_list(result.value))

    def large_files(self) -> Result[list[LargeFile], GitError]:
        """Every blob path in history with its largest size, biggest first."""
        objects = self.capture("rev-list", "--objects", "--all")
        if isinstance(objects, Err):
            return objects
        sizes = self.capture(
            "cat-file", f"--batch-check={BATCH_CHECK_FORMAT}", input_text=objects.value
        )
        if isinstance(sizes, Err):
            return sizes
        return Ok(parse_blob_sizes(sizes.value))

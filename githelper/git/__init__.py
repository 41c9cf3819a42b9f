"""Git operations module.

This module provides:
- Repository: typed wrappers over the git commands the handlers share
- Parsers and records for each git output shape
- GitHub URL helpers

Usage:
    from githelper.git import Repository

    repo = Repository(SubprocessRunner())
    match repo.current_branch():
        case Ok(name):
            print(f"on {name}")
        case Err(e):
            print(e.message)
"""

from githelper.git.parsing import (
    Branch,
    Commit,
    LargeFile,
    ReflogEntry,
    Remote,
    Worktree,
)
from githelper.git.repository import (
    GitError,
    Repository,
)

__all__ = [
    # Repository
    "GitError",
    "Repository",
    # Records
    "Branch",
    "Commit",
    "LargeFile",
    "ReflogEntry",
    "Remote",
    "Worktree",
]

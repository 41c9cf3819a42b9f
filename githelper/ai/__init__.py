"""AI-assisted commit messages."""

from .commit import AIError, CommitGenerator

__all__ = [
    "AIError",
    "CommitGenerator",
]

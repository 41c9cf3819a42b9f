"""Command handlers, one service per command family."""

from .base import CANCELLED, GitService
from .branches import BranchService
from .cleanup import CleanupService
from .clone import CloneService
from .commit import CommitService
from .conflicts import ConflictService
from .history import HistoryService
from .sync import SyncService
from .worktree import WorktreeService

__all__ = [
    "BranchService",
    "CANCELLED",
    "CleanupService",
    "CloneService",
    "CommitService",
    "ConflictService",
    "GitService",
    "HistoryService",
    "SyncService",
    "WorktreeService",
]

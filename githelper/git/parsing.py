"""Parsers for git command output.

One function per output shape. Each documents the exact command whose output
it expects. Lines that do not match the shape are skipped, so a malformed or
truncated listing yields fewer records instead of an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

__all__ = [
    "BRANCH_FORMAT",
    "BATCH_CHECK_FORMAT",
    "LOG_FORMAT",
    "REFLOG_FORMAT",
    "Branch",
    "Commit",
    "LargeFile",
    "ReflogEntry",
    "Remote",
    "Worktree",
    "parse_blob_sizes",
    "parse_branches",
    "parse_log",
    "parse_merged_branches",
    "parse_name_list",
    "parse_reflog",
    "parse_remotes",
    "parse_worktrees",
]

BRANCH_FORMAT = (
    "%(HEAD)%09%(refname:short)%09%(objectname:short)%09%(committerdate:iso-strict)%09%(contents:subject)"
)
REFLOG_FORMAT = "%H%x09%gd%x09%gs"
LOG_FORMAT = "%H%x09%h%x09%s"
BATCH_CHECK_FORMAT = "%(objecttype) %(objectname) %(objectsize) %(rest)"


@dataclass(frozen=True, slots=True)
class Branch:
    """A local or remote-tracking branch."""

    name: str
    sha: str
    date: datetime | None
    subject: str
    current: bool = False

    @property
    def label(self) -> str:
        day = self.date.strftime("%Y-%m-%d") if self.date else "unknown"
        marker = "* " if self.current else "  "
        return f"{marker}{self.name} ({day}) - {self.subject}"


@dataclass(frozen=True, slots=True)
class Remote:
    name: str
    url: str


@dataclass(frozen=True, slots=True)
class ReflogEntry:
    """One reflog line: the commit, its selector (HEAD@{n}) and the action."""

    sha: str
    selector: str
    action: str

    @property
    def label(self) -> str:
        return f"{self.sha[:7]} {self.selector} {self.action}"


@dataclass(frozen=True, slots=True)
class Worktree:
    path: str
    head: str
    branch: str | None
    bare: bool = False
    detached: bool = False

    @property
    def label(self) -> str:
        if self.bare:
            return f"{self.path} (bare)"
        if self.branch is None:
            return f"{self.path} (detached at {self.head[:7]})"
        return f"{self.path} [{self.branch}]"


@dataclass(frozen=True, slots=True)
class Commit:
    sha: str
    short_sha: str
    subject: str

    @property
    def label(self) -> str:
        return f"{self.short_sha} {self.subject}"


@dataclass(frozen=True, slots=True)
class LargeFile:
    """A blob in history, identified by the path it was first seen at."""

    path: str
    size: int
    sha: str = ""


def _parse_date(text: str) -> datetime | None:
    try:
        return datetime.fromisoformat(text.strip())
    except ValueError:
        return None


def parse_branches(output: str) -> list[Branch]:
    """Parse `git branch [-a] --format=BRANCH_FORMAT`.

    Each line is HEAD-marker, name, short sha, ISO-8601 committer date and
    subject separated by tabs. Symbolic refs such as origin/HEAD print
    without a date and are skipped along with lines missing fields.
    """
    branches: list[Branch] = []
    for line in output.splitlines():
        parts = line.split("\t", 4)
        if len(parts) < 5:
            continue
        head, name, sha, date, subject = parts
        name = name.strip()
        if not name or name.endswith("/HEAD") or name == "HEAD":
            continue
        if name.startswith("(") and name.endswith(")"):
            continue
        branches.append(
            Branch(
                name=name,
                sha=sha.strip(),
                date=_parse_date(date),
                subject=subject.strip(),
                current=head.strip() == "*",
            )
        )
    return branches


def parse_merged_branches(
    output: str, main_branch: str, *, include_worktrees: bool = False
) -> list[str]:
    """Parse `git branch --merged <main>`.

    Lines look like "  feature", "* current" or "+ other-worktree". The current
    branch (*) and the main branch itself are always excluded. Branches checked
    out in another worktree (+) are kept only with include_worktrees.
    """
    names: list[str] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        marker = line[:2]
        if marker.startswith("*"):
            continue
        if marker.startswith("+") and not include_worktrees:
            continue
        name = line[2:].strip() if len(line) > 2 else line.strip()
        if not name or name == main_branch or " " in name:
            continue
        names.append(name)
    return names


def parse_remotes(output: str) -> list[Remote]:
    """Parse `git remote -v`.

    Only "(fetch)" lines are used. Order of first appearance is kept.
    """
    remotes: list[Remote] = []
    seen: set[str] = set()
    for line in output.splitlines():
        fields = line.split()
        if len(fields) != 3 or fields[2] != "(fetch)":
            continue
        name, url = fields[0], fields[1]
        if name in seen:
            continue
        seen.add(name)
        remotes.append(Remote(name=name, url=url))
    return remotes


def parse_reflog(output: str) -> list[ReflogEntry]:
    """Parse `git reflog --format=REFLOG_FORMAT`.

    Each line is full sha, selector (HEAD@{n}) and subject separated by tabs.
    """
    entries: list[ReflogEntry] = []
    for line in output.splitlines():
        parts = line.split("\t", 2)
        if len(parts) < 3:
            continue
        sha, selector, action = parts
        if not _is_sha(sha):
            continue
        entries.append(ReflogEntry(sha=sha, selector=selector.strip(), action=action.strip()))
    return entries


def parse_log(output: str) -> list[Commit]:
    """Parse `git log --format=LOG_FORMAT`: full sha, short sha, subject."""
    commits: list[Commit] = []
    for line in output.splitlines():
        parts = line.split("\t", 2)
        if len(parts) < 3 or not _is_sha(parts[0]):
            continue
        commits.append(Commit(sha=parts[0], short_sha=parts[1], subject=parts[2].strip()))
    return commits


def parse_worktrees(output: str) -> list[Worktree]:
    """Parse `git worktree list --porcelain`.

    Records are blank-line separated blocks of "worktree <path>",
    "HEAD <sha>", "branch refs/heads/<name>" and the bare/detached flags.
    A block without a worktree line is skipped.
    """
    worktrees: list[Worktree] = []
    block: dict[str, str] = {}

    def flush() -> None:
        path = block.get("worktree")
        if path:
            branch = block.get("branch")
            if branch is not None:
                branch = branch.removeprefix("refs/heads/")
            worktrees.append(
                Worktree(
                    path=path,
                    head=block.get("HEAD", ""),
                    branch=branch,
                    bare="bare" in block,
                    detached="detached" in block,
                )
            )
        block.clear()

    for line in output.splitlines():
        if not line.strip():
            flush()
            continue
        key, _, value = line.partition(" ")
        block[key] = value.strip()
    flush()
    return worktrees


def parse_name_list(output: str) -> list[str]:
    """Parse one-path-per-line output (ls-files, diff --name-only)."""
    return [line.strip() for line in output.splitlines() if line.strip()]


def parse_blob_sizes(output: str) -> list[LargeFile]:
    """Parse `git cat-file --batch-check=BATCH_CHECK_FORMAT`.

    Input is fed from `git rev-list --objects --all`, so %(rest) is the path.
    Only blobs with a path are kept. When the same path appears with several
    blob versions, the largest one is reported.
    """
    largest: dict[str, LargeFile] = {}
    for line in output.splitlines():
        parts = line.split(" ", 3)
        if len(parts) < 4 or parts[0] != "blob":
            continue
        _, sha, size_text, path = parts
        path = path.strip()
        if not path or not size_text.isdecimal():
            continue
        size = int(size_text)
        current = largest.get(path)
        if current is None or size > current.size:
            largest[path] = LargeFile(path=path, size=size, sha=sha)
    return sorted(largest.values(), key=lambda f: f.size, reverse=True)


def _is_sha(text: str) -> bool:
    return len(text) >= 7 and all(c in "0123456789abcdef" for c in text)

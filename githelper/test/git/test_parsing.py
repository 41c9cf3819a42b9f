"""Tests for githelper.git.parsing module."""

from __future__ import annotations

from datetime import datetime

from githelper.git.parsing import (
    Branch,
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

SHA_A = "a" * 40
SHA_B = "b" * 40


class TestBranches:
    OUTPUT = (
        "*\tmain\t1a2b3c4\t2024-03-02T10:00:00+01:00\tMerge dev\n"
        " \tdev\t5d6e7f8\t2024-03-05T09:30:00+01:00\tAdd [wip] parser\n"
        " \torigin/HEAD\t1a2b3c4\t\t\n"
        " \t(HEAD detached at 1a2b3c4)\t1a2b3c4\t2024-03-01T00:00:00+00:00\tx\n"
        "garbage line\n"
    )

    def test_parse(self) -> None:
        branches = parse_branches(self.OUTPUT)
        assert [b.name for b in branches] == ["main", "dev"]
        main, dev = branches
        assert main.current is True
        assert dev.current is False
        assert dev.subject == "Add [wip] parser"
        assert dev.date is not None and dev.date.day == 5

    def test_label(self) -> None:
        branch = Branch("feature-x", "abc1234", datetime(2024, 1, 9), "Try it", current=True)
        assert branch.label == "* feature-x (2024-01-09) - Try it"

    def test_label_without_date(self) -> None:
        assert Branch("dev", "abc", None, "s").label == "  dev (unknown) - s"


class TestMergedBranches:
    OUTPUT = "  feature-a\n* current\n+ in-worktree\n  main\n  feature-b\n\n"

    def test_excludes_current_main_and_worktrees(self) -> None:
        assert parse_merged_branches(self.OUTPUT, "main") == ["feature-a", "feature-b"]

    def test_include_worktrees(self) -> None:
        names = parse_merged_branches(self.OUTPUT, "main", include_worktrees=True)
        assert names == ["feature-a", "in-worktree", "feature-b"]


def test_parse_remotes_keeps_fetch_lines_once() -> None:
    output = (
        "origin\tgit@github.com:me/repo.git (fetch)\n"
        "origin\tgit@github.com:me/repo.git (push)\n"
        "upstream\thttps://github.com/org/repo.git (fetch)\n"
        "upstream\thttps://github.com/org/repo.git (push)\n"
    )
    remotes = parse_remotes(output)
    assert [(r.name, r.url) for r in remotes] == [
        ("origin", "git@github.com:me/repo.git"),
        ("upstream", "https://github.com/org/repo.git"),
    ]


def test_parse_reflog() -> None:
    output = (
        f"{SHA_A}\tHEAD@{{0}}\tcheckout: moving from main to dev\n"
        f"{SHA_B}\tHEAD@{{1}}\tcommit: fix\ttabs\n"
        "nothex\tHEAD@{2}\tbogus\n"
    )
    entries = parse_reflog(output)
    assert [e.selector for e in entries] == ["HEAD@{0}", "HEAD@{1}"]
    assert entries[1].action == "commit: fix\ttabs"
    assert entries[0].label == "aaaaaaa HEAD@{0} checkout: moving from main to dev"


def test_parse_log() -> None:
    output = f"{SHA_A}\taaaaaaa\tFirst\n{SHA_B}\tbbbbbbb\tSecond one\n\n"
    commits = parse_log(output)
    assert [c.label for c in commits] == ["aaaaaaa First", "bbbbbbb Second one"]
    assert commits[0].sha == SHA_A


class TestWorktrees:
    OUTPUT = (
        "worktree /src/repo\n"
        f"HEAD {SHA_A}\n"
        "branch refs/heads/main\n"
        "\n"
        "worktree /src/feature\n"
        f"HEAD {SHA_B}\n"
        "detached\n"
        "\n"
        "worktree /src/bare.git\n"
        "bare\n"
    )

    def test_parse(self) -> None:
        worktrees = parse_worktrees(self.OUTPUT)
        assert worktrees == [
            Worktree(path="/src/repo", head=SHA_A, branch="main"),
            Worktree(path="/src/feature", head=SHA_B, branch=None, detached=True),
            Worktree(path="/src/bare.git", head="", branch=None, bare=True),
        ]

    def test_labels(self) -> None:
        labels = [w.label for w in parse_worktrees(self.OUTPUT)]
        assert labels == [
            "/src/repo [main]",
            "/src/feature (detached at bbbbbbb)",
            "/src/bare.git (bare)",
        ]


def test_parse_name_list() -> None:
    assert parse_name_list("a.txt\n\n  dir/b.py \n") == ["a.txt", "dir/b.py"]


def test_parse_blob_sizes_keeps_largest_version_per_path() -> None:
    output = (
        f"blob {SHA_A} 100 assets/logo.png\n"
        f"blob {SHA_B} 5000 assets/logo.png\n"
        f"blob {SHA_A} 300 docs/my file.md\n"
        f"tree {SHA_A} 90 assets\n"
        f"commit {SHA_B} 250 \n"
        f"blob {SHA_B} 42\n"
    )
    files = parse_blob_sizes(output)
    assert [(f.path, f.size) for f in files] == [("assets/logo.png", 5000), ("docs/my file.md", 300)]
    assert files[0].sha == SHA_B

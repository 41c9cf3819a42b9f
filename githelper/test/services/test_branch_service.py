"""Tests for githelper.services.branches module."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from githelper.cli.selector import Selector
from githelper.core.config import Config
from githelper.core.result import Err, Ok
from githelper.git.parsing import Branch
from githelper.git.repository import Repository
from githelper.output.console import MockConsole
from githelper.platform.process import MockRunner
from githelper.services.branches import BranchService, sort_branches

BRANCH_OUTPUT = (
    "*\tmain\t1111111\t2024-03-01T10:00:00+00:00\tRelease\n"
    " \tdev\t2222222\t2024-03-09T10:00:00+00:00\tWork in progress\n"
    " \tfeature-x\t3333333\t2024-03-05T10:00:00+00:00\tTry x\n"
)


def scripted(*answers: str) -> Callable[[str], str]:
    pending = list(answers)

    def read(_prompt: str) -> str:
        if not pending:
            raise EOFError
        return pending.pop(0)

    return read


def make(runner: MockRunner, *answers: str, config: Config | None = None) -> tuple[BranchService, MockConsole]:
    console = MockConsole()
    service = BranchService(
        repo=Repository(runner),
        selector=Selector(runner, console, input_fn=scripted(*answers)),
        console=console,
        config=config or Config(),
    )
    return service, console


class TestSortBranches:
    def test_by_date_newest_first_undated_last(self) -> None:
        branches = [
            Branch("old", "a", datetime(2023, 1, 1), ""),
            Branch("none", "b", None, ""),
            Branch("new", "c", datetime(2024, 1, 1), ""),
        ]
        assert [b.name for b in sort_branches(branches, "date")] == ["new", "old", "none"]

    def test_by_name(self) -> None:
        branches = [Branch("b", "", None, ""), Branch("a", "", None, "")]
        assert [b.name for b in sort_branches(branches, "name")] == ["a", "b"]


class TestSwitch:
    def test_switch_by_name_order(self) -> None:
        runner = MockRunner()
        runner.on("git", "branch", stdout=BRANCH_OUTPUT)
        service, _ = make(runner, "2")
        assert service.switch(sort="name") == Ok(None)
        assert runner.live_calls == [("git", "checkout", "feature-x")]

    def test_switch_by_date_lists_newest_first(self) -> None:
        runner = MockRunner()
        runner.on("git", "branch", stdout=BRANCH_OUTPUT)
        service, console = make(runner, "1")
        assert service.switch() == Ok(None)
        assert runner.live_calls == [("git", "checkout", "dev")]
        assert console.messages[2].startswith("1:   dev (2024-03-09)")

    def test_cancel_makes_no_changes(self) -> None:
        runner = MockRunner()
        runner.on("git", "branch", stdout=BRANCH_OUTPUT)
        service, console = make(runner, "")
        assert service.switch() == Ok(None)
        assert runner.live_calls == []
        assert console.find("Operation cancelled")

    def test_invalid_selection(self) -> None:
        runner = MockRunner()
        runner.on("git", "branch", stdout=BRANCH_OUTPUT)
        service, _ = make(runner, "9")
        result = service.switch()
        assert isinstance(result, Err)
        assert result.error.kind == "user_input"
        assert result.error.message == "invalid selection"
        assert runner.live_calls == []

    def test_include_remote(self) -> None:
        runner = MockRunner()
        service, _ = make(runner, "")
        service.switch(include_remote=True)
        assert runner.ran("git", "branch", "-a")

    def test_no_branches(self) -> None:
        runner = MockRunner()
        service, _ = make(runner)
        result = service.switch()
        assert isinstance(result, Err)
        assert result.error.kind == "precondition"
        assert result.error.message == "no branches found"

    def test_dirty_tree(self) -> None:
        runner = MockRunner()
        runner.on("git", "status", "--porcelain", stdout=" M x\n")
        service, _ = make(runner)
        result = service.switch()
        assert isinstance(result, Err)
        assert "uncommitted" in result.error.message


class TestPrune:
    MERGED = "  old-1\n* main\n  old-2\n+ elsewhere\n"

    def test_declined_makes_no_deletions(self) -> None:
        runner = MockRunner()
        runner.on("git", "branch", "--merged", stdout=self.MERGED)
        service, console = make(runner, "n")
        assert service.prune() == Ok(None)
        assert runner.live_calls == [("git", "fetch", "-p")]
        assert console.find("- old-1")
        assert not console.find("- elsewhere")

    def test_confirmed_deletes_each(self) -> None:
        runner = MockRunner()
        runner.on("git", "branch", "--merged", "main", stdout=self.MERGED)
        service, _ = make(runner, "y")
        assert service.prune() == Ok(None)
        assert runner.live_calls[1:] == [
            ("git", "branch", "-d", "old-1"),
            ("git", "branch", "-d", "old-2"),
        ]

    def test_failure_continues(self) -> None:
        runner = MockRunner()
        runner.on("git", "branch", "--merged", stdout=self.MERGED)
        runner.on("git", "branch", "-d", "old-1", returncode=1)
        service, console = make(runner)
        assert service.prune(force=True) == Ok(None)
        assert ("git", "branch", "-d", "old-2") in runner.live_calls
        assert console.has_warning()
        assert console.find("Deleted 1 merged branch(es)")

    def test_main_branch_from_config(self) -> None:
        runner = MockRunner()
        service, console = make(runner, config=Config(main_branch="trunk"))
        service.prune()
        assert runner.ran("git", "branch", "--merged", "trunk")
        assert console.find("No merged branches")


class TestPruneRemotes:
    REMOTES = (
        "origin\thttps://github.com/me/a.git (fetch)\n"
        "stale\thttps://github.com/gone/a.git (fetch)\n"
    )

    def test_dry_run_lists_only(self) -> None:
        runner = MockRunner()
        runner.on("git", "remote", "-v", stdout=self.REMOTES)
        runner.on("git", "ls-remote", "--exit-code", "stale", returncode=2)
        service, console = make(runner)
        assert service.prune_remotes(dry_run=True) == Ok(None)
        assert console.find("- stale (https://github.com/gone/a.git)")
        assert runner.live_calls == []

    def test_declined(self) -> None:
        runner = MockRunner()
        runner.on("git", "remote", "-v", stdout=self.REMOTES)
        runner.on("git", "ls-remote", "--exit-code", "stale", returncode=2)
        service, _ = make(runner, "no")
        assert service.prune_remotes() == Ok(None)
        assert runner.live_calls == []

    def test_forced_removal(self) -> None:
        runner = MockRunner()
        runner.on("git", "remote", "-v", stdout=self.REMOTES)
        runner.on("git", "ls-remote", "--exit-code", "stale", returncode=2)
        service, _ = make(runner)
        assert service.prune_remotes(force=True) == Ok(None)
        assert runner.live_calls == [("git", "remote", "remove", "stale")]

    def test_all_reachable(self) -> None:
        runner = MockRunner()
        runner.on("git", "remote", "-v", stdout=self.REMOTES)
        service, console = make(runner)
        assert service.prune_remotes() == Ok(None)
        assert console.find("All remotes are reachable")


class TestRescue:
    LOG = "a" * 40 + "\taaaaaaa\tfeat: Add OAuth login\n"

    def _detached(self) -> MockRunner:
        runner = MockRunner()
        runner.on("git", "symbolic-ref", returncode=1)
        runner.on("git", "log", stdout=self.LOG)
        runner.on("git", "log", "-1", stdout="feat: Add OAuth login\n")
        return runner

    def test_requires_detached_head(self) -> None:
        runner = MockRunner()
        service, _ = make(runner)
        result = service.rescue()
        assert isinstance(result, Err)
        assert result.error.message == "not in detached HEAD state"

    def test_suggested_name(self) -> None:
        runner = self._detached()
        service, console = make(runner, "")
        assert service.rescue() == Ok(None)
        assert console.find("Suggested branch name: add-oauth-login")
        assert runner.live_calls == [("git", "checkout", "-b", "add-oauth-login")]

    def test_given_name(self) -> None:
        runner = self._detached()
        service, _ = make(runner)
        assert service.rescue("saved-work") == Ok(None)
        assert runner.live_calls == [("git", "checkout", "-b", "saved-work")]

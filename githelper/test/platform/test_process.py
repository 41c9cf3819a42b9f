"""Tests for githelper.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from githelper.core.result import Err, Ok
from githelper.platform.process import MockRunner, ProcessError, SubprocessRunner, run, run_live, which


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(
            command=("git", "status"),
            returncode=1,
            stdout="",
            stderr="fatal: not a git repository",
        )
        assert str(error) == "git status failed (exit 1): fatal: not a git repository"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("git", "filter-branch", "--force", "--index-filter", "x"),
            returncode=128,
            stdout="",
            stderr="",
        )
        assert str(error) == "git filter-branch --force ... failed (exit 128)"

    def test_str_missing(self) -> None:
        error = ProcessError(("fzf", "--multi"), -1, "", "", kind="missing")
        assert str(error) == "fzf: command not found"
        assert error.is_missing

    def test_detail_prefers_stderr(self) -> None:
        error = ProcessError(("git", "push"), 1, "out", "rejected\n")
        assert error.detail == "rejected"
        assert ProcessError(("git", "push"), 1, "out", "").detail == "out"
        assert ProcessError(("git", "push"), 1, "", "").detail == "git push failed (exit 1)"

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hello')"], cwd=tmp_path)
        assert isinstance(result, Ok)
        assert result.value.strip() == "hello"

    def test_failure_carries_exit_code_and_stderr(self) -> None:
        code = "import sys; sys.stderr.write('broken'); sys.exit(3)"
        result = run([sys.executable, "-c", code])
        assert isinstance(result, Err)
        assert result.error.kind == "failed"
        assert result.error.returncode == 3
        assert result.error.stderr == "broken"

    def test_input_text_is_fed_to_stdin(self) -> None:
        code = "import sys; print(sys.stdin.read().upper())"
        result = run([sys.executable, "-c", code], input_text="abc")
        assert result == Ok("ABC\n")

    def test_missing_executable(self) -> None:
        result = run(["definitely-not-a-binary"])
        assert isinstance(result, Err)
        assert result.error.kind == "missing"
        assert result.error.returncode == -1

    def test_live_missing_executable(self) -> None:
        result = run_live(["definitely-not-a-binary", "--flag"])
        assert isinstance(result, Err)
        assert result.error.is_missing

    def test_live_failure(self) -> None:
        result = run_live([sys.executable, "-c", "raise SystemExit(2)"])
        assert isinstance(result, Err)
        assert result.error.returncode == 2
        assert result.error.kind == "failed"

    def test_which(self) -> None:
        assert which("definitely-not-a-binary") is None

    def test_subprocess_runner_capture(self) -> None:
        result = SubprocessRunner().capture([sys.executable, "-c", "print(1)"])
        assert result == Ok("1\n")


class TestMockRunner:
    def test_unscripted_command_succeeds_empty(self) -> None:
        runner = MockRunner()
        assert runner.capture(["git", "status"]) == Ok("")
        assert runner.commands == [("git", "status")]

    def test_longest_prefix_wins(self) -> None:
        runner = MockRunner()
        runner.on("git", "branch", stdout="generic")
        runner.on("git", "branch", "--merged", stdout="merged")
        assert runner.capture(["git", "branch", "--merged", "main"]) == Ok("merged")
        assert runner.capture(["git", "branch", "-a"]) == Ok("generic")

    def test_scripted_failure(self) -> None:
        runner = MockRunner()
        runner.on("git", "push", returncode=1, stderr="rejected")
        result = runner.capture(["git", "push"])
        assert isinstance(result, Err)
        assert result.error.stderr == "rejected"

    def test_unknown_tool_is_missing(self) -> None:
        runner = MockRunner()
        result = runner.capture(["fzf"])
        assert isinstance(result, Err)
        assert result.error.kind == "missing"
        assert runner.which("fzf") is None
        assert runner.which("git") == "/usr/bin/git"

    def test_live_calls_are_recorded_separately(self) -> None:
        runner = MockRunner()
        runner.capture(["git", "status"])
        runner.live(["git", "checkout", "dev"])
        assert runner.live_calls == [("git", "checkout", "dev")]
        assert runner.ran("git", "checkout")
        assert not runner.ran("git", "push")

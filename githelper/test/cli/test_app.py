"""Tests for the githelper command line entry point."""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

import pytest
from typer.testing import CliRunner

from githelper import __version__
from githelper.cli.app import app

runner = CliRunner()

SOURCE = "https://github.com/octo/hello"


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in ("GITHELPER_GITHUB_TOKEN", "GITHELPER_OPENAI_API_KEY", "GITHELPER_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return home


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == f"githelper {__version__}"


def test_version_command() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for name in ("sync-fork", "prune-remotes", "cherry-pick", "worktree", "copy"):
        assert name in result.output


def test_missing_argument_is_usage_error() -> None:
    result = runner.invoke(app, ["remove"])
    assert result.exit_code == 2


def test_unknown_config_file() -> None:
    result = runner.invoke(app, ["--config", "nope.yaml", "copy", SOURCE, "--dest", "me/hello"])
    assert result.exit_code == 1
    assert "error:" in result.output


def test_copy_dry_run() -> None:
    result = runner.invoke(app, ["copy", SOURCE, "--dest", "me/hello", "--dry-run", "--https"])
    assert result.exit_code == 0
    assert "Dry run - no changes will be made" in result.output
    assert "https://github.com/me/hello.git" in result.output


def test_copy_without_token_reports_hint() -> None:
    result = runner.invoke(app, ["copy", SOURCE, "--dest", "me/hello"])
    assert result.exit_code == 1
    assert "error: GitHub token not configured" in result.output
    assert "hint:" in result.output


def test_debug_prints_config(tmp_path: Path) -> None:
    config = tmp_path / "githelper.yaml"
    config.write_text("main_branch: trunk\nuse_ssh: false\n", encoding="utf-8")
    result = runner.invoke(
        app, ["--config", str(config), "--debug", "copy", SOURCE, "--dest", "me/hello", "--dry-run"]
    )
    assert result.exit_code == 0
    assert "debug: main branch: trunk" in result.output
    assert "https://github.com/me/hello.git" in result.output


@pytest.fixture
def git_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    repo = tmp_path / "repo"
    repo.mkdir()
    env = {
        **os.environ,
        "GIT_AUTHOR_NAME": "Test",
        "GIT_AUTHOR_EMAIL": "test@example.com",
        "GIT_COMMITTER_NAME": "Test",
        "GIT_COMMITTER_EMAIL": "test@example.com",
    }
    for args in (
        ["init", "-q"],
        ["commit", "-q", "--allow-empty", "-m", "First"],
        ["commit", "-q", "--allow-empty", "-m", "Second"],
    ):
        subprocess.run(["git", *args], cwd=repo, env=env, check=True, capture_output=True)
    monkeypatch.chdir(repo)
    return repo


def _head(repo: Path) -> str:
    proc = subprocess.run(
        ["git", "rev-parse", "HEAD"], cwd=repo, check=True, capture_output=True, text=True
    )
    return proc.stdout.strip()


def test_declined_confirmation_exits_zero(git_repo: Path) -> None:
    before = _head(git_repo)
    result = runner.invoke(app, ["--no-fzf", "recover"], input="2\nn\n")
    assert result.exit_code == 0
    assert "Operation cancelled" in result.stdout
    assert _head(git_repo) == before


def test_invalid_selection_exits_one_on_stderr(git_repo: Path) -> None:
    before = _head(git_repo)
    result = runner.invoke(app, ["--no-fzf", "recover"], input="9\n")
    assert result.exit_code == 1
    assert "error: invalid selection" in result.stderr
    assert "error:" not in result.stdout
    assert _head(git_repo) == before

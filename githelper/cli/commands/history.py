"""History commands: restore, recover, squash, undo, cherry-pick, bisect, blame."""

from __future__ import annotations

import typer

from githelper.cli.context import build_context
from githelper.services.history import HistoryService

from ._helpers import exit_on_error


def restore(ctx: typer.Context) -> None:
    """Create a branch at a commit picked from the reflog."""
    cli = build_context(ctx)
    exit_on_error(cli.service(HistoryService).restore(), cli)


def recover(ctx: typer.Context) -> None:
    """Reset the current branch to a commit picked from the reflog."""
    cli = build_context(ctx)
    exit_on_error(cli.service(HistoryService).recover(), cli)


def squash(
    ctx: typer.Context,
    count: int = typer.Argument(..., help="Number of commits to squash"),
    message: str | None = typer.Option(None, "--message", "-m", help="Commit message"),
    ai: bool = typer.Option(False, "--ai", "-a", help="Generate the message with AI"),
) -> None:
    """Squash the last N commits into one."""
    cli = build_context(ctx)
    exit_on_error(cli.service(HistoryService).squash(count, message=message, ai=ai), cli)


def undo(
    ctx: typer.Context,
    count: int = typer.Option(1, "--number", "-n", help="Number of commits to undo"),
    hard: bool = typer.Option(False, "--hard", help="Discard the changes too"),
) -> None:
    """Undo the last commit(s) and force-push."""
    cli = build_context(ctx)
    exit_on_error(cli.service(HistoryService).undo(count=count, hard=hard), cli)


def cherry_pick(
    ctx: typer.Context,
    pr: int = typer.Argument(..., help="Pull request number"),
) -> None:
    """Cherry-pick commits from a pull request."""
    cli = build_context(ctx)
    exit_on_error(cli.service(HistoryService).cherry_pick(pr), cli)


def bisect(ctx: typer.Context) -> None:
    """Start git bisect between a picked good and bad commit."""
    cli = build_context(ctx)
    exit_on_error(cli.service(HistoryService).bisect(), cli)


def blame(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="File to inspect"),
    line: int = typer.Argument(..., help="Line number"),
) -> None:
    """Show the history of one line of a file."""
    cli = build_context(ctx)
    exit_on_error(cli.service(HistoryService).blame(file, line), cli)

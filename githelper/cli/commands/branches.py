"""Branch and remote commands: switch, prune, prune-remotes, rescue."""

from __future__ import annotations

from enum import StrEnum

import typer

from githelper.cli.context import build_context
from githelper.services.branches import BranchService

from ._helpers import exit_on_error


class BranchSort(StrEnum):
    date = "date"
    name = "name"


def switch(
    ctx: typer.Context,
    all_branches: bool = typer.Option(False, "--all", "-a", help="Include remote branches"),
    sort: BranchSort = typer.Option(BranchSort.date, "--sort", "-s", help="Sort by date or name"),
) -> None:
    """Interactively switch to another branch."""
    cli = build_context(ctx)
    result = cli.service(BranchService).switch(include_remote=all_branches, sort=sort.value)
    exit_on_error(result, cli)


def prune(
    ctx: typer.Context,
    main: str | None = typer.Option(None, "--main", "-m", help="Main branch (default from config)"),
    force: bool = typer.Option(False, "--force", "-f", help="Delete without confirmation"),
) -> None:
    """Delete local branches already merged into the main branch."""
    cli = build_context(ctx)
    result = cli.service(BranchService).prune(main_branch=main, force=force)
    exit_on_error(result, cli)


def prune_remotes(
    ctx: typer.Context,
    dry: bool = typer.Option(False, "--dry", "-d", help="Only list unreachable remotes"),
    force: bool = typer.Option(False, "--force", "-f", help="Remove without confirmation"),
) -> None:
    """Remove remotes that can no longer be reached."""
    cli = build_context(ctx)
    result = cli.service(BranchService).prune_remotes(dry_run=dry, force=force)
    exit_on_error(result, cli)


def rescue(
    ctx: typer.Context,
    name: str | None = typer.Argument(None, help="Name for the new branch"),
) -> None:
    """Create a branch from a detached HEAD."""
    cli = build_context(ctx)
    result = cli.service(BranchService).rescue(name)
    exit_on_error(result, cli)

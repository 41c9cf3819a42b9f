"""worktree sub-app."""

from __future__ import annotations

import typer

from githelper.cli.context import build_context
from githelper.services.worktree import WorktreeService

from ._helpers import exit_on_error

worktree_app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Manage git worktrees.",
)


@worktree_app.command("switch")
def switch(ctx: typer.Context) -> None:
    """Switch to another worktree."""
    cli = build_context(ctx)
    exit_on_error(cli.service(WorktreeService).switch(), cli)


@worktree_app.command("create")
def create(
    ctx: typer.Context,
    branch: str = typer.Argument(..., help="Branch to check out"),
) -> None:
    """Create a worktree for a branch next to this repository."""
    cli = build_context(ctx)
    exit_on_error(cli.service(WorktreeService).create(branch), cli)


@worktree_app.command("remove")
def remove(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Worktree path"),
) -> None:
    """Remove a worktree."""
    cli = build_context(ctx)
    exit_on_error(cli.service(WorktreeService).remove(path), cli)


@worktree_app.command("cleanup")
def cleanup(
    ctx: typer.Context,
    main: str | None = typer.Option(None, "--main", "-m", help="Main branch (default from config)"),
) -> None:
    """Remove worktrees whose branch is merged."""
    cli = build_context(ctx)
    exit_on_error(cli.service(WorktreeService).cleanup(main_branch=main), cli)


@worktree_app.command("pull")
def pull(ctx: typer.Context) -> None:
    """Pull updates in a selected worktree."""
    cli = build_context(ctx)
    exit_on_error(cli.service(WorktreeService).pull(), cli)

"""sync and sync-fork commands."""

from __future__ import annotations

import typer

from githelper.cli.context import build_context
from githelper.services.sync import SyncService

from ._helpers import exit_on_error


def sync(
    ctx: typer.Context,
    branch: str | None = typer.Argument(None, help="Remote branch to rebase onto (default: HEAD)"),
    no_stash: bool = typer.Option(False, "--no-stash", help="Don't stash local changes"),
    force: bool = typer.Option(False, "--force", "-f", help="Proceed with uncommitted changes"),
) -> None:
    """Fetch and rebase onto the remote, stashing local changes around it."""
    cli = build_context(ctx)
    result = cli.service(SyncService).sync(branch, no_stash=no_stash, force=force)
    exit_on_error(result, cli)


def sync_fork(
    ctx: typer.Context,
    upstream: str | None = typer.Option(
        None, "--upstream", "-u", help="Upstream repository (URL or org/repo)"
    ),
    branch: str = typer.Option("main", "--branch", "-b", help="Upstream branch to rebase onto"),
) -> None:
    """Rebase the current branch onto the upstream repository and push to the fork."""
    cli = build_context(ctx)
    result = cli.service(SyncService).sync_fork(upstream=upstream, branch=branch)
    exit_on_error(result, cli)

"""History cleanup commands: clean, purge, remove, refresh, resolve."""

from __future__ import annotations

import typer

from githelper.cli.context import build_context
from githelper.services.cleanup import CleanupService
from githelper.services.conflicts import ConflictService

from ._helpers import exit_on_error


def clean(
    ctx: typer.Context,
    file: str | None = typer.Argument(None, help="File to remove from history"),
    top: int = typer.Option(10, "--top", "-n", help="Number of largest files to list"),
    min_size: str | None = typer.Option(None, "--min", help="Minimum size (e.g. 500KB, 10MB)"),
) -> None:
    """Remove a large file from the whole history."""
    cli = build_context(ctx)
    exit_on_error(cli.service(CleanupService).clean(file, top=top, min_size=min_size), cli)


def purge(
    ctx: typer.Context,
    file: str | None = typer.Argument(None, help="File to remove from history"),
    force_push: bool = typer.Option(False, "--force-push", help="Force-push all branches afterwards"),
) -> None:
    """Remove a tracked file from the whole history."""
    cli = build_context(ctx)
    exit_on_error(cli.service(CleanupService).purge(file, force_push=force_push), cli)


def remove(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="File to remove from history"),
    force: bool = typer.Option(False, "--force", "-f", help="Run the removal instead of printing it"),
) -> None:
    """Remove a file from history and garbage-collect it."""
    cli = build_context(ctx)
    exit_on_error(cli.service(CleanupService).remove(file, force=force), cli)


def refresh(
    ctx: typer.Context,
    files: list[str] | None = typer.Argument(None, help="Files to refresh (default: all)"),
    crlf: bool = typer.Option(False, "--crlf", help="Fix line endings"),
    clean_untracked: bool = typer.Option(False, "--clean", help="Remove untracked files"),
) -> None:
    """Reset the index and work tree to HEAD."""
    cli = build_context(ctx)
    result = cli.service(CleanupService).refresh(files or [], crlf=crlf, clean=clean_untracked)
    exit_on_error(result, cli)


def resolve(
    ctx: typer.Context,
    file: str | None = typer.Argument(None, help="Conflicted file"),
) -> None:
    """Resolve a merge conflict by keeping ours or theirs."""
    cli = build_context(ctx)
    exit_on_error(cli.service(ConflictService).resolve(file), cli)

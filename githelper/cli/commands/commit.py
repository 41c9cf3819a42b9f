"""commit command."""

from __future__ import annotations

import typer

from githelper.cli.context import build_context
from githelper.services.commit import CommitService

from ._helpers import exit_on_error


def commit(
    ctx: typer.Context,
    no_edit: bool = typer.Option(False, "--no-edit", "-n", help="Skip editing the message"),
    commit_type: str | None = typer.Option(None, "--type", "-t", help="Commit type (feat, fix, ...)"),
    ai: bool = typer.Option(False, "--ai", "-a", help="Generate the message with AI"),
) -> None:
    """Make a conventional commit from the staged changes."""
    cli = build_context(ctx)
    result = cli.service(CommitService).commit(no_edit=no_edit, commit_type=commit_type, ai=ai)
    exit_on_error(result, cli)

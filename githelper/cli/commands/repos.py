"""clone and copy commands."""

from __future__ import annotations

import typer

from githelper.cli.context import build_context
from githelper.services.clone import CloneService

from ._helpers import exit_on_error


def clone(
    ctx: typer.Context,
    repo: str = typer.Argument(..., help="Repository URL or org/repo"),
    directory: str | None = typer.Argument(None, help="Target directory"),
    depth: int = typer.Option(0, "--depth", "-d", help="Shallow clone depth"),
    single_branch: bool = typer.Option(False, "--single-branch", help="Clone only the default branch"),
    no_tags: bool = typer.Option(False, "--no-tags", help="Don't download tags"),
) -> None:
    """Clone a repository, optionally shallow."""
    cli = build_context(ctx)
    result = cli.service(CloneService).clone(
        repo, directory, depth=depth, single_branch=single_branch, no_tags=no_tags
    )
    exit_on_error(result, cli)


def copy(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Source GitHub repository URL"),
    dest: str = typer.Option(..., "--dest", "-d", help="Destination (owner/repo)"),
    org: bool = typer.Option(False, "--org", "-o", help="Destination owner is an organisation"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the plan only"),
    private: bool = typer.Option(True, "--private/--public", help="Repository visibility"),
    description: str = typer.Option("", "--description", help="Repository description"),
    topics: str = typer.Option("", "--topics", help="Comma-separated repository topics"),
    issues: bool = typer.Option(True, "--issues/--no-issues", help="Enable issues"),
    wiki: bool = typer.Option(True, "--wiki/--no-wiki", help="Enable the wiki"),
    ssh: bool | None = typer.Option(None, "--ssh/--https", help="Push over SSH or HTTPS"),
) -> None:
    """Copy a GitHub repository with all branches and tags."""
    cli = build_context(ctx)
    result = cli.service(CloneService).copy(
        url,
        dest=dest,
        org=org,
        dry_run=dry_run,
        private=private,
        description=description,
        topics=tuple(t.strip() for t in topics.split(",") if t.strip()),
        issues=issues,
        wiki=wiki,
        ssh=ssh,
    )
    exit_on_error(result, cli)

from __future__ import annotations

from pathlib import Path

import typer

from githelper import __version__
from githelper.cli.commands.branches import prune, prune_remotes, rescue, switch
from githelper.cli.commands.cleanup import clean, purge, refresh, remove, resolve
from githelper.cli.commands.commit import commit
from githelper.cli.commands.history import (
    bisect,
    blame,
    cherry_pick,
    recover,
    restore,
    squash,
    undo,
)
from githelper.cli.commands.repos import clone, copy
from githelper.cli.commands.sync import sync, sync_fork
from githelper.cli.commands.worktree import worktree_app
from githelper.core.config import GlobalOptions


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Shortcuts for everyday git and GitHub chores.",
)


# Commands
app.command()(sync)
app.command("sync-fork")(sync_fork)
app.command()(switch)
app.command()(prune)
app.command("prune-remotes")(prune_remotes)
app.command()(rescue)
app.command()(restore)
app.command()(recover)
app.command()(squash)
app.command()(undo)
app.command("cherry-pick")(cherry_pick)
app.command()(bisect)
app.command()(blame)
app.command()(clean)
app.command()(purge)
app.command()(remove)
app.command()(refresh)
app.command()(resolve)
app.command()(clone)
app.command()(copy)
app.command()(commit)

# Sub-apps
app.add_typer(worktree_app, name="worktree")


@app.command()
def version() -> None:
    """Print the version."""
    typer.echo(f"githelper {__version__}")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"githelper {__version__}")
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Show version and exit."
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: ~/.githelper.yaml)",
    ),
    debug: bool = typer.Option(False, "--debug", help="Print configuration details."),
    no_fzf: bool = typer.Option(False, "--no-fzf", help="Use a numbered list instead of fzf."),
) -> None:
    ctx.obj = GlobalOptions(
        config_path=config.expanduser() if config is not None else None,
        debug=debug,
        no_fzf=no_fzf,
    )


def main() -> None:
    app()

"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import typer

from githelper.core.errors import CommandError, ErrorCode
from githelper.core.result import Err, Result

if TYPE_CHECKING:
    from githelper.cli.context import CLIContext

T = TypeVar("T")


def exit_on_error(
    result: Result[T, CommandError],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.ERROR,
) -> None:
    """Exit with error if result is Err, otherwise return.

    Replaces the pattern every command would otherwise repeat:
        match result:
            case Err(e):
                ctx.console.error(e.message)
                if e.hint:
                    ctx.console.hint(e.hint)
                raise typer.Exit(code=1)
            case Ok(_):
                pass
    """
    if isinstance(result, Err):
        error = result.error
        ctx.console.error(error.message)
        if error.hint:
            ctx.console.hint(error.hint)
        raise typer.Exit(code=int(error_code))

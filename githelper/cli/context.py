from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

import typer

from githelper.core.config import Config, GlobalOptions, load_config
from githelper.core.errors import ErrorCode
from githelper.core.result import Err
from githelper.git.repository import Repository
from githelper.output.console import ConsoleProtocol, RichConsole, Style
from githelper.platform.http import HttpClient, RealHttpClient
from githelper.platform.process import ProcessRunner, SubprocessRunner
from githelper.services.base import GitService

from .selector import Selector

S = TypeVar("S", bound=GitService)


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol
    runner: ProcessRunner
    selector: Selector
    repo: Repository
    http: HttpClient

    def service(self, cls: type[S]) -> S:
        return cls(
            repo=self.repo,
            selector=self.selector,
            console=self.console,
            config=self.config,
            http=self.http,
        )


def build_context(ctx: typer.Context | None = None) -> CLIContext:
    options = GlobalOptions()
    if ctx is not None:
        root = ctx.find_root()
        if isinstance(root.obj, GlobalOptions):
            options = root.obj

    console = RichConsole()
    loaded = load_config(options.config_path)
    if isinstance(loaded, Err):
        console.error(loaded.error.message)
        raise typer.Exit(code=int(ErrorCode.ERROR))

    config = loaded.value.with_options(options)
    if config.debug:
        for line in config.describe():
            console.print(f"debug: {line}", Style.DIM)

    runner = SubprocessRunner()
    return CLIContext(
        config=config,
        console=console,
        runner=runner,
        selector=Selector(runner, console, use_fuzzy=not config.no_fzf),
        repo=Repository(runner),
        http=RealHttpClient(),
    )

"""Typed configuration loading.

Configuration comes from three sources, highest precedence first:
1. Command-line flags (GlobalOptions and per-command flags)
2. Environment variables prefixed with GITHELPER_ (e.g. GITHELPER_GITHUB_TOKEN)
3. The YAML file (~/.githelper.yaml by default, or --config PATH)

Missing sources are fine; a missing --config file or malformed YAML is not.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

import yaml

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, parse_bool

__all__ = [
    "CONFIG_FILENAME",
    "Config",
    "ConfigError",
    "ENV_PREFIX",
    "GlobalOptions",
    "default_config_path",
    "load_config",
]

CONFIG_FILENAME = ".githelper.yaml"
ENV_PREFIX = "GITHELPER_"

_STR_KEYS = ("github_token", "openai_api_key", "default_org", "main_branch", "editor")
_BOOL_KEYS = ("debug", "use_ssh", "no_fzf")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Options given before the subcommand (githelper --debug squash 3)."""

    config_path: Path | None = None
    debug: bool = False
    no_fzf: bool = False


@dataclass(frozen=True, slots=True)
class Config:
    """Resolved configuration for one command invocation.

    Attributes:
        github_token: Token for the GitHub REST API (copy)
        openai_api_key: Key for AI commit messages (commit --ai, squash --ai)
        default_org: Organisation used when none is given
        debug: Print where configuration came from
        use_ssh: Push mirrors over SSH instead of HTTPS
        no_fzf: Never use fzf, always fall back to a numbered list
        main_branch: Branch that "merged" is measured against
        editor: Editor for commit messages; falls back to $EDITOR, then vim
        source: Config file that was read, if any
    """

    github_token: str | None = None
    openai_api_key: str | None = None
    default_org: str | None = None
    debug: bool = False
    use_ssh: bool = True
    no_fzf: bool = False
    main_branch: str = "main"
    editor: str | None = None
    source: Path | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, source: Path | None = None) -> Config:
        """Create Config from a mapping (parsed YAML or environment)."""
        defaults = cls()
        return cls(
            github_token=get_str(data, "github_token"),
            openai_api_key=get_str(data, "openai_api_key"),
            default_org=get_str(data, "default_org"),
            debug=_or(get_bool(data, "debug"), defaults.debug),
            use_ssh=_or(get_bool(data, "use_ssh"), defaults.use_ssh),
            no_fzf=_or(get_bool(data, "no_fzf"), defaults.no_fzf),
            main_branch=get_str(data, "main_branch") or defaults.main_branch,
            editor=get_str(data, "editor"),
            source=source,
        )

    def with_options(self, options: GlobalOptions) -> Config:
        """Apply global flags on top of file and environment values.

        Flags can only switch debug/no_fzf on; absence keeps the loaded value.
        """
        return replace(
            self,
            debug=self.debug or options.debug,
            no_fzf=self.no_fzf or options.no_fzf,
        )

    def describe(self) -> list[str]:
        """Debug lines describing the configuration, secrets redacted."""
        return [
            f"config file: {self.source if self.source else '(none)'}",
            f"github token present: {self.github_token is not None}",
            f"openai api key present: {self.openai_api_key is not None}",
            f"main branch: {self.main_branch}",
            f"fzf disabled: {self.no_fzf}",
            f"push over ssh: {self.use_ssh}",
        ]


def _or(value: bool | None, default: bool) -> bool:
    return default if value is None else value


def default_config_path() -> Path:
    return Path.home() / CONFIG_FILENAME


def _parse_yaml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a YAML file, mapping I/O and syntax errors to ConfigError."""
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    try:
        data_obj: object = yaml.safe_load(content)
    except yaml.YAMLError as e:
        return Err(ConfigError(f"Invalid YAML syntax: {e}", path=path))

    if data_obj is None:
        return Ok({})
    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a YAML mapping", path=path))
    return Ok(data)


def _env_values(env: Mapping[str, str]) -> StrDict:
    values: StrDict = {}
    for key in (*_STR_KEYS, *_BOOL_KEYS):
        raw = env.get(ENV_PREFIX + key.upper())
        if raw is None or not raw.strip():
            continue
        if key in _BOOL_KEYS and parse_bool(raw) is None:
            continue
        values[key] = raw
    return values


def load_config(
    path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> Result[Config, ConfigError]:
    """Load configuration from the YAML file and the environment.

    Args:
        path: Explicit config file (--config). Must exist when given.
            When None, ~/.githelper.yaml is read if present.
        env: Environment mapping (defaults to os.environ)

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    environ = os.environ if env is None else env

    data: StrDict = {}
    source: Path | None = None
    if path is not None:
        parsed = _parse_yaml(path)
        if isinstance(parsed, Err):
            return parsed
        data, source = parsed.value, path
    else:
        candidate = default_config_path()
        if candidate.is_file():
            parsed = _parse_yaml(candidate)
            if isinstance(parsed, Err):
                return parsed
            data, source = parsed.value, candidate

    merged: StrDict = {**data, **_env_values(environ)}
    return Ok(Config.from_dict(merged, source=source))

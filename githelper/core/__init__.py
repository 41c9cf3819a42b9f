"""Core types shared by every layer: config, errors, results."""

from .config import Config, ConfigError, GlobalOptions, load_config
from .errors import CommandError, ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "Config",
    "ConfigError",
    "GlobalOptions",
    "load_config",
    # errors
    "CommandError",
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]

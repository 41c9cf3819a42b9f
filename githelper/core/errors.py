"""Error taxonomy and exit codes.

Every command handler reports failure as a CommandError. The CLI layer prints
it to stderr and exits with ErrorCode.ERROR; cancellations are not errors and
exit with ErrorCode.OK.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Literal

__all__ = ["CommandError", "ErrorCode", "ErrorKind"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success, including a user cancelling a prompt
    - 1: Any reported error (precondition, missing tool, failed command, bad input)
    - 2: Usage error (missing argument, unknown option), raised by click
    """

    OK = 0
    ERROR = 1
    USAGE_ERROR = 2

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK


ErrorKind = Literal[
    "precondition",
    "tool_missing",
    "process_failed",
    "user_input",
    "config",
    "api",
]


@dataclass(frozen=True, slots=True)
class CommandError:
    """A failure reported by a command handler.

    Attributes:
        kind: Which remediation applies (see ErrorKind)
        message: One-line description shown after "error:"
        hint: Optional follow-up shown dimmed after "hint:"
    """

    kind: ErrorKind
    message: str
    hint: str | None = None

    def __str__(self) -> str:
        return self.message

    @classmethod
    def precondition(cls, message: str, hint: str | None = None) -> CommandError:
        return cls(kind="precondition", message=message, hint=hint)

    @classmethod
    def user_input(cls, message: str, hint: str | None = None) -> CommandError:
        return cls(kind="user_input", message=message, hint=hint)

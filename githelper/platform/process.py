"""Subprocess execution with Result-based error handling.

Two modes:
- capture: output is collected and returned as text (for parsing)
- live: the child inherits the terminal and the caller blocks until it exits
  (for clone, rebase, filter-branch and anything the user should watch)

A missing executable is reported with kind="missing" so callers can suggest
installing the tool instead of echoing a generic failure.

Usage:
    result = run(["git", "rev-parse", "--show-toplevel"])
    match result:
        case Ok(stdout):
            print(stdout.strip())
        case Err(error) if error.is_missing:
            print("git is not installed")
        case Err(error):
            print(f"Failed: {error.detail}")
"""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Protocol

from githelper.core.result import Err, Ok, Result

__all__ = [
    "MockRunner",
    "ProcessError",
    "ProcessRunner",
    "RecordedCall",
    "SubprocessRunner",
    "run",
    "run_live",
    "which",
]

ProcessErrorKind = Literal["missing", "failed"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process (-1 if it never started).
        stdout: Standard output (may be empty).
        stderr: Standard error (empty in live mode, where it went to the terminal).
        kind: "missing" if the executable was not found, "failed" otherwise.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str
    kind: ProcessErrorKind = "failed"

    def __str__(self) -> str:
        """Format error for display."""
        if self.is_missing:
            return f"{self.executable}: command not found"
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        summary = f"{cmd_str} failed (exit {self.returncode})"
        if self.stderr.strip():
            summary += f": {self.stderr.strip()}"
        return summary

    @property
    def is_missing(self) -> bool:
        return self.kind == "missing"

    @property
    def executable(self) -> str:
        return self.command[0] if self.command else ""

    @property
    def detail(self) -> str:
        """Best text to show the user: stderr, then stdout, then the summary."""
        return self.stderr.strip() or self.stdout.strip() or str(self)


def _missing(cmd: list[str], e: OSError) -> ProcessError:
    return ProcessError(
        command=tuple(cmd),
        returncode=-1,
        stdout="",
        stderr=str(e),
        kind="missing",
    )


def run(
    cmd: list[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
    *,
    input_text: str | None = None,
    capture_stderr: bool = True,
) -> Result[str, ProcessError]:
    """Execute a command and return its stdout or an error.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory (current directory if None).
        env: Environment variables (uses current env if None).
        input_text: Text written to the command's stdin.
        capture_stderr: When False, stderr goes straight to the terminal.
            fzf needs this to draw its interface.

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            env=env,
            input=input_text,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE if capture_stderr else None,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        return Err(_missing(cmd, e))
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=str(e),
            )
        )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout or "",
                stderr=proc.stderr or "",
            )
        )

    return Ok(proc.stdout or "")


def run_live(
    cmd: list[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
    *,
    input_text: str | None = None,
) -> Result[None, ProcessError]:
    """Execute a command attached to the terminal.

    Output streams to the user as it is produced. Nothing is captured, so a
    failure carries only the command and exit code.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory (current directory if None).
        env: Environment variables (uses current env if None).
        input_text: Optional text written to stdin (e.g. a diff piped into bat).

    Returns:
        Ok(None) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            env=env,
            input=input_text,
            text=input_text is not None,
            check=False,
        )
    except FileNotFoundError as e:
        return Err(_missing(cmd, e))
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=str(e),
            )
        )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout="",
                stderr="",
            )
        )

    return Ok(None)


def which(name: str) -> str | None:
    """Return the full path of an executable on PATH, or None."""
    return shutil.which(name)


class ProcessRunner(Protocol):
    """Protocol for running external commands.

    Services depend on this rather than on subprocess so tests can script
    responses and count the commands that would have mutated a repository.
    """

    def capture(
        self,
        cmd: list[str],
        *,
        cwd: Path | None = None,
        input_text: str | None = None,
        capture_stderr: bool = True,
    ) -> Result[str, ProcessError]:
        """Run cmd and return its stdout."""
        ...

    def live(
        self,
        cmd: list[str],
        *,
        cwd: Path | None = None,
        input_text: str | None = None,
    ) -> Result[None, ProcessError]:
        """Run cmd attached to the terminal."""
        ...

    def which(self, name: str) -> str | None:
        """Locate an executable on PATH."""
        ...


class SubprocessRunner:
    """Production runner backed by subprocess."""

    def capture(
        self,
        cmd: list[str],
        *,
        cwd: Path | None = None,
        input_text: str | None = None,
        capture_stderr: bool = True,
    ) -> Result[str, ProcessError]:
        return run(cmd, cwd, input_text=input_text, capture_stderr=capture_stderr)

    def live(
        self,
        cmd: list[str],
        *,
        cwd: Path | None = None,
        input_text: str | None = None,
    ) -> Result[None, ProcessError]:
        return run_live(cmd, cwd, input_text=input_text)

    def which(self, name: str) -> str | None:
        return which(name)


@dataclass(frozen=True, slots=True)
class RecordedCall:
    """A command seen by MockRunner."""

    cmd: tuple[str, ...]
    mode: Literal["capture", "live"]
    cwd: Path | None = None
    input_text: str | None = None


@dataclass(frozen=True, slots=True)
class _Scripted:
    prefix: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


def _empty_calls() -> list[RecordedCall]:
    return []


def _empty_script() -> list[_Scripted]:
    return []


@dataclass
class MockRunner:
    """Runner that answers from a script and records every call.

    Responses are matched by the longest registered command prefix. Commands
    with no scripted response succeed with empty output, unless their
    executable is not in `tools`, in which case they fail as missing.

    Usage:
        runner = MockRunner()
        runner.on("git", "branch", "--merged", stdout="  old\\n* main\\n")
        runner.on("git", "push", returncode=1, stderr="rejected")
        ...
        assert runner.live_calls == []
    """

    tools: set[str] = field(default_factory=lambda: {"git"})
    calls: list[RecordedCall] = field(default_factory=_empty_calls)
    _script: list[_Scripted] = field(default_factory=_empty_script)

    def on(self, *prefix: str, stdout: str = "", stderr: str = "", returncode: int = 0) -> None:
        """Script the response for commands starting with prefix."""
        self._script.append(_Scripted(tuple(prefix), returncode, stdout, stderr))

    def _respond(self, cmd: list[str]) -> Result[str, ProcessError]:
        key = tuple(cmd)
        if cmd and cmd[0] not in self.tools:
            return Err(
                ProcessError(
                    command=key,
                    returncode=-1,
                    stdout="",
                    stderr=f"No such file or directory: '{cmd[0]}'",
                    kind="missing",
                )
            )

        best: _Scripted | None = None
        for entry in self._script:
            if key[: len(entry.prefix)] != entry.prefix:
                continue
            if best is None or len(entry.prefix) >= len(best.prefix):
                best = entry

        if best is None:
            return Ok("")
        if best.returncode != 0:
            return Err(
                ProcessError(
                    command=key,
                    returncode=best.returncode,
                    stdout=best.stdout,
                    stderr=best.stderr,
                )
            )
        return Ok(best.stdout)

    def capture(
        self,
        cmd: list[str],
        *,
        cwd: Path | None = None,
        input_text: str | None = None,
        capture_stderr: bool = True,
    ) -> Result[str, ProcessError]:
        self.calls.append(RecordedCall(tuple(cmd), "capture", cwd, input_text))
        return self._respond(cmd)

    def live(
        self,
        cmd: list[str],
        *,
        cwd: Path | None = None,
        input_text: str | None = None,
    ) -> Result[None, ProcessError]:
        self.calls.append(RecordedCall(tuple(cmd), "live", cwd, input_text))
        result = self._respond(cmd)
        if isinstance(result, Err):
            return Err(
                ProcessError(
                    command=result.error.command,
                    returncode=result.error.returncode,
                    stdout="",
                    stderr="",
                    kind=result.error.kind,
                )
            )
        return Ok(None)

    def which(self, name: str) -> str | None:
        return f"/usr/bin/{name}" if name in self.tools else None

    # Test helper methods

    @property
    def commands(self) -> list[tuple[str, ...]]:
        """All commands in call order."""
        return [c.cmd for c in self.calls]

    @property
    def live_calls(self) -> list[tuple[str, ...]]:
        """Commands run in live mode (the effecting ones)."""
        return [c.cmd for c in self.calls if c.mode == "live"]

    def ran(self, *prefix: str) -> bool:
        """True if any command started with prefix."""
        return any(c.cmd[: len(prefix)] == prefix for c in self.calls)

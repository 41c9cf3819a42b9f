"""Interactive selection with fzf or a numbered list.

When fzf is on PATH (and not disabled with --no-fzf) items are piped into it,
one line per item. Otherwise the items are printed as a numbered list and a
line is read from stdin.

Both strategies map "the user backed out" to a cancellation, which is a normal
result, and a bad answer to a SelectorError. Callers treat a cancellation as
success with nothing done.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

from githelper.core.result import Err, Ok, Result
from githelper.output.console import ConsoleProtocol, Style
from githelper.platform.process import ProcessRunner

__all__ = [
    "SelectableItem",
    "SelectionResult",
    "Selector",
    "SelectorError",
]

_LIST_PROMPT = "Select number (or press Enter to cancel): "
_MULTI_PROMPT = "Select numbers separated by commas or spaces (or press Enter to cancel): "
_SEPARATORS = re.compile(r"[,\s]+")

T = TypeVar("T")
V = TypeVar("V")


@dataclass(frozen=True, slots=True)
class SelectableItem(Generic[T]):
    """One row in a selection.

    Attributes:
        label: Text shown to the user, never truncated
        value: Returned when the row is chosen
        preview_key: Substituted for {key} in the fzf preview command
    """

    label: str
    value: T
    preview_key: str | None = None


@dataclass(frozen=True, slots=True)
class SelectionResult(Generic[T]):
    """Outcome of a selection: chosen values, or a cancellation with none."""

    action: Literal["select", "cancel"]
    values: tuple[T, ...] = ()

    def __post_init__(self) -> None:
        if self.action == "cancel" and self.values:
            raise ValueError("a cancelled selection cannot carry values")
        if self.action == "select" and not self.values:
            raise ValueError("a selection must carry at least one value")

    @classmethod
    def selected(cls, *values: T) -> SelectionResult[T]:
        return cls(action="select", values=tuple(values))

    @classmethod
    def cancel(cls) -> SelectionResult[T]:
        return cls(action="cancel")

    @property
    def cancelled(self) -> bool:
        return self.action == "cancel"

    @property
    def value(self) -> T | None:
        """First chosen value (the only one for select_one)."""
        return self.values[0] if self.values else None


@dataclass(frozen=True, slots=True)
class SelectorError:
    """A selection that could not produce a result.

    Attributes:
        kind: "empty" when there was nothing to choose from,
            "invalid_selection" when the typed answer was not a listed number
        message: Text for the user
    """

    kind: Literal["empty", "invalid_selection"]
    message: str

    def __str__(self) -> str:
        return self.message


class Selector:
    """Picks items with fzf when available, else from a numbered list.

    Args:
        runner: Used to locate and run fzf
        console: Where the numbered list is printed
        use_fuzzy: False forces the numbered list (--no-fzf)
        input_fn: Line reader; `input` in production, scripted in tests
    """

    def __init__(
        self,
        runner: ProcessRunner,
        console: ConsoleProtocol,
        *,
        use_fuzzy: bool = True,
        input_fn: Callable[[str], str] = input,
    ) -> None:
        self._runner = runner
        self._console = console
        self._use_fuzzy = use_fuzzy
        self._input = input_fn

    @property
    def fuzzy_available(self) -> bool:
        return self._use_fuzzy and self._runner.which("fzf") is not None

    def select_one(
        self,
        items: Sequence[SelectableItem[V]],
        *,
        title: str,
        preview: str | None = None,
    ) -> Result[SelectionResult[V], SelectorError]:
        """Choose exactly one item.

        Args:
            items: Rows in display order
            title: Heading for the numbered list
            preview: fzf preview command; {key} is replaced by each item's
                preview_key
        """
        return self._select(items, title=title, preview=preview, multi=False)

    def select_many(
        self,
        items: Sequence[SelectableItem[V]],
        *,
        title: str,
        preview: str | None = None,
    ) -> Result[SelectionResult[V], SelectorError]:
        """Choose one or more items, returned in the order they were picked."""
        return self._select(items, title=title, preview=preview, multi=True)

    def _select(
        self,
        items: Sequence[SelectableItem[V]],
        *,
        title: str,
        preview: str | None,
        multi: bool,
    ) -> Result[SelectionResult[V], SelectorError]:
        if not items:
            return Err(SelectorError("empty", "nothing to select from"))

        if self.fuzzy_available:
            fuzzy = self._select_fuzzy(items, preview=preview, multi=multi)
            if fuzzy is not None:
                return Ok(fuzzy)

        return self._select_list(items, title=title, multi=multi)

    # -- fzf ----------------------------------------------------------------

    def _select_fuzzy(
        self,
        items: Sequence[SelectableItem[V]],
        *,
        preview: str | None,
        multi: bool,
    ) -> SelectionResult[V] | None:
        """Run fzf. Returns None if fzf could not be started."""
        lines: list[str] = []
        for index, item in enumerate(items):
            key = item.preview_key if item.preview_key is not None else item.label
            lines.append(f"{index}\t{_one_field(key)}\t{_one_field(item.label)}")

        cmd = ["fzf", "--height", "50%", "--reverse", "--delimiter", "\t", "--with-nth", "3.."]
        if multi:
            cmd.append("--multi")
        if preview:
            cmd += ["--preview", preview.replace("{key}", "{2}"), "--preview-window", "right:50%"]

        result = self._runner.capture(
            cmd, input_text="\n".join(lines) + "\n", capture_stderr=False
        )
        if isinstance(result, Err):
            if result.error.is_missing:
                return None
            return SelectionResult.cancel()

        chosen: list[V] = []
        for line in result.value.splitlines():
            head = line.split("\t", 1)[0].strip()
            if head.isdecimal() and int(head) < len(items):
                chosen.append(items[int(head)].value)
        if not chosen:
            return SelectionResult.cancel()
        if not multi:
            chosen = chosen[:1]
        return SelectionResult.selected(*chosen)

    # -- numbered list ------------------------------------------------------

    def _select_list(
        self,
        items: Sequence[SelectableItem[V]],
        *,
        title: str,
        multi: bool,
    ) -> Result[SelectionResult[V], SelectorError]:
        self._console.newline()
        self._console.print(title, Style.BOLD)
        for number, item in enumerate(items, start=1):
            self._console.print(f"{number}: {item.label}")
        self._console.newline()

        answer = self._read(_MULTI_PROMPT if multi else _LIST_PROMPT)
        if answer is None or not answer.strip():
            return Ok(SelectionResult.cancel())

        tokens = [t for t in _SEPARATORS.split(answer.strip()) if t]
        if not multi and len(tokens) != 1:
            return Err(SelectorError("invalid_selection", "invalid selection"))

        picked: list[int] = []
        for token in tokens:
            if not token.isdecimal():
                return Err(SelectorError("invalid_selection", "invalid selection"))
            number = int(token)
            if number < 1 or number > len(items):
                return Err(SelectorError("invalid_selection", "invalid selection"))
            if number not in picked:
                picked.append(number)

        return Ok(SelectionResult.selected(*(items[n - 1].value for n in picked)))

    # -- prompts ------------------------------------------------------------

    def _read(self, prompt: str) -> str | None:
        """Read one line; None on EOF."""
        try:
            return self._input(prompt)
        except EOFError:
            return None

    def confirm(self, prompt: str = "Are you sure you want to continue?") -> bool:
        """Ask a yes/no question. Only "y" or "yes" consent; EOF means no."""
        answer = self._read(f"{prompt} [y/N]: ")
        if answer is None:
            return False
        return answer.strip().lower() in ("y", "yes")

    def ask(self, prompt: str, default: str | None = None) -> str:
        """Read free text. Empty input (or EOF) yields default, or ""."""
        suffix = f" [{default}]" if default else ""
        answer = self._read(f"{prompt}{suffix}: ")
        if answer is None or not answer.strip():
            return default or ""
        return answer.strip()


def _one_field(text: str) -> str:
    return text.replace("\t", " ").replace("\n", " ")

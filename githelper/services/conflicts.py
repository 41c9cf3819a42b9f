"""resolve: settle a merge conflict by keeping one whole side."""

from __future__ import annotations

from githelper.cli.selector import SelectableItem
from githelper.core.errors import CommandError
from githelper.core.result import Err, Ok, Result

from .base import GitService, from_git

__all__ = ["ConflictService"]

_SIDES = {"o": "--ours", "ours": "--ours", "t": "--theirs", "theirs": "--theirs"}


class ConflictService(GitService):
    def _has_bat(self) -> bool:
        return self._repo.runner.which("bat") is not None

    def resolve(self, file: str | None = None) -> Result[None, CommandError]:
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked

        conflicted = self._repo.conflicted_files()
        if isinstance(conflicted, Err):
            return Err(from_git(conflicted.error, "failed to list conflicted files"))
        if not conflicted.value:
            return Err(CommandError.precondition("no conflicts found"))

        target = file
        if target:
            if target not in conflicted.value:
                return Err(CommandError.precondition(f"{target} has no conflicts"))
        else:
            if self._has_bat():
                preview = "git diff {key} | bat --language=diff --color=always"
            else:
                preview = "git diff --color=always {key}"
            items = [SelectableItem(label=p, value=p, preview_key=p) for p in conflicted.value]
            picked = self._chosen(
                self._selector.select_one(items, title="Conflicted files:", preview=preview),
                empty="no conflicts found",
            )
            if isinstance(picked, Err):
                return picked
            if picked.value.value is None:
                return self._cancelled()
            target = picked.value.value

        self._show_diff(target)

        answer = self._selector.ask("Choose version to keep: (o)urs/(t)heirs").strip().lower()
        if not answer:
            return self._cancelled()
        side = _SIDES.get(answer)
        if side is None:
            return Err(CommandError.user_input(f"invalid choice: {answer}", hint="Answer o or t"))

        chosen = self._live("checkout", side, "--", target, action=f"failed to checkout {side[2:]} version")
        if isinstance(chosen, Err):
            return chosen
        added = self._live("add", "--", target, action="failed to stage resolved file")
        if isinstance(added, Err):
            return added

        self._console.success(f"Resolved {target} using {side[2:]} version")
        return Ok(None)

    def _show_diff(self, path: str) -> None:
        self._console.header(f"Conflicts in {path}:")
        if not self._has_bat():
            self._repo.live("diff", "--", path)
            return
        diff = self._repo.capture("diff", "--", path)
        if isinstance(diff, Err):
            self._console.warning(f"failed to show diff: {diff.error.message}")
            return
        shown = self._repo.runner.live(
            ["bat", "--language=diff", "--paging=never"], input_text=diff.value
        )
        if isinstance(shown, Err):
            self._console.print(diff.value)

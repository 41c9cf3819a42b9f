"""History handlers: restore, recover, squash, undo, cherry-pick, bisect, blame."""

from __future__ import annotations

from pathlib import Path

from githelper.cli.selector import SelectableItem
from githelper.core.errors import CommandError
from githelper.core.result import Err, Ok, Result
from githelper.git.parsing import Commit, ReflogEntry
from githelper.output.console import Style

from .base import GitService, from_git
from .messages import default_squash_summary

__all__ = ["HistoryService"]

SHOW_PREVIEW = "git show --color=always {key}"
BISECT_CANDIDATES = 50

_BISECT_HELP = (
    "Instructions:",
    "1. Git will checkout different commits for you to test",
    "2. Test if the bug exists in each commit",
    "3. Mark each commit using:",
    "   - git bisect good  (if the bug is NOT present)",
    "   - git bisect bad   (if the bug IS present)",
    "",
    "Automation tip: with a test script, run 'git bisect run ./test.sh'",
    "To abort the bisect process: git bisect reset",
)


def _reflog_items(entries: list[ReflogEntry]) -> list[SelectableItem[str]]:
    return [SelectableItem(label=e.label, value=e.sha, preview_key=e.sha) for e in entries]


def _commit_items(commits: list[Commit]) -> list[SelectableItem[str]]:
    return [SelectableItem(label=c.label, value=c.sha, preview_key=c.sha) for c in commits]


class HistoryService(GitService):
    # -- reflog -------------------------------------------------------------

    def _pick_reflog(self, title: str) -> Result[str | None, CommandError]:
        """Select a reflog entry. Ok(None) means the user cancelled."""
        self._console.print("Searching git history...")
        entries = self._repo.reflog()
        if isinstance(entries, Err):
            return Err(from_git(entries.error, "failed to read reflog"))

        picked = self._chosen(
            self._selector.select_one(
                _reflog_items(entries.value), title=title, preview=SHOW_PREVIEW
            ),
            empty="no git history found",
        )
        if isinstance(picked, Err):
            return picked
        return Ok(picked.value.value)

    def restore(self) -> Result[None, CommandError]:
        """Create a branch at a commit chosen from the reflog."""
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked

        sha = self._pick_reflog("Recent git actions:")
        if isinstance(sha, Err):
            return sha
        if sha.value is None:
            return self._cancelled()

        name = self._selector.ask("Enter new branch name")
        if not name:
            return self._cancelled()

        created = self._live("checkout", "-b", name, sha.value, action="failed to create branch")
        if isinstance(created, Err):
            return created

        self._console.success(f"Branch '{name}' restored")
        return Ok(None)

    def recover(self) -> Result[None, CommandError]:
        """Hard-reset the current branch to a commit chosen from the reflog."""
        checked = self._require_clean()
        if isinstance(checked, Err):
            return checked

        sha = self._pick_reflog("Recent git actions:")
        if isinstance(sha, Err):
            return sha
        if sha.value is None:
            return self._cancelled()

        self._console.warning(f"This will reset your branch to commit: {sha.value}")
        if not self._confirm():
            return self._cancelled()

        self._console.print(f"Resetting to commit: {sha.value}")
        reset = self._live("reset", "--hard", sha.value, action="failed to reset to commit")
        if isinstance(reset, Err):
            return reset

        self._console.success("Reset to selected commit")
        return Ok(None)

    # -- rewriting ----------------------------------------------------------

    def squash(
        self, count: int, *, message: str | None = None, ai: bool = False
    ) -> Result[None, CommandError]:
        """Squash the last `count` commits into one."""
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked
        if count < 2:
            return Err(
                CommandError.user_input("please provide a valid number of commits (minimum 2)")
            )

        commits = self._repo.log("HEAD", limit=count)
        if isinstance(commits, Err):
            return Err(from_git(commits.error, "failed to show commits"))
        if len(commits.value) < count:
            return Err(
                CommandError.precondition(
                    f"only {len(commits.value)} commit(s) on this branch, cannot squash {count}"
                )
            )

        self._console.header(f"Last {count} commits to be squashed:")
        for commit in commits.value:
            self._console.print(commit.label)
        self._console.warning(f"This will squash the above {count} commits into one")
        if not self._confirm():
            return self._cancelled()

        final = message
        if not final:
            texts = self._repo.commit_messages(count)
            if isinstance(texts, Err):
                return Err(from_git(texts.error, "failed to get commit messages"))
            final = self._squash_message(texts.value, ai=ai)

        self._console.print(f"Resetting last {count} commits...")
        reset = self._live("reset", "--soft", f"HEAD~{count}", action="failed to reset commits")
        if isinstance(reset, Err):
            return reset

        self._console.print("Creating new squashed commit...")
        committed = self._live("commit", "-m", final, action="failed to create squashed commit")
        if isinstance(committed, Err):
            return committed

        self._console.success(f"Squashed {count} commits")
        return Ok(None)

    def _squash_message(self, messages: str, *, ai: bool) -> str:
        summary = default_squash_summary(messages)
        if not ai:
            return f"squash: {summary}"

        generator = self._commit_generator()
        if generator is None:
            self._console.warning("OpenAI API key not configured, using default message")
            return summary
        generated = generator.generate(messages)
        if isinstance(generated, Err):
            self._console.warning(f"{generated.error.message}, using default message")
            return summary
        return generated.value

    def undo(self, *, count: int = 1, hard: bool = False) -> Result[None, CommandError]:
        """Reset the last `count` commits and force-push the result."""
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked
        if count < 1:
            return Err(CommandError.user_input("number of commits must be at least 1"))

        effect = "and remove all changes" if hard else "but keep changes locally"
        self._console.warning(f"This will undo the last {count} commit(s) {effect}")
        if not self._confirm():
            return self._cancelled()

        mode = "--hard" if hard else "--soft"
        reset = self._live("reset", mode, f"HEAD~{count}", action="failed to reset commits")
        if isinstance(reset, Err):
            return reset

        pushed = self._live(
            "push", "origin", "HEAD", "--force-with-lease", action="failed to force push"
        )
        if isinstance(pushed, Err):
            return pushed

        if hard:
            self._console.success(f"Removed last {count} commit(s) and pushed changes")
        else:
            self._console.success(f"Undid last {count} commit(s) while keeping changes locally")
        return Ok(None)

    # -- picking ------------------------------------------------------------

    def cherry_pick(self, pr: int) -> Result[None, CommandError]:
        """Fetch a pull request and cherry-pick chosen commits from it."""
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked
        if pr < 1:
            return Err(CommandError.user_input(f"invalid PR number: {pr}"))

        ref = f"pr-{pr}"
        self._console.print(f"Fetching PR #{pr}...")
        fetched = self._live("fetch", "origin", f"pull/{pr}/head:{ref}", action="failed to fetch PR")
        if isinstance(fetched, Err):
            return fetched

        commits = self._repo.log(ref, reverse=True)
        if isinstance(commits, Err):
            return Err(from_git(commits.error, "failed to get commit log"))

        picked = self._chosen(
            self._selector.select_many(
                _commit_items(commits.value), title=f"Commits in PR #{pr}:", preview=SHOW_PREVIEW
            ),
            empty=f"no commits found in PR #{pr}",
        )
        if isinstance(picked, Err):
            return picked
        if picked.value.cancelled:
            return self._cancelled()

        for sha in picked.value.values:
            self._console.print(f"Cherry-picking commit {sha[:8]}...")
            result = self._live("cherry-pick", sha, action=f"failed to cherry-pick commit {sha[:8]}")
            if isinstance(result, Err):
                return result

        self._console.success(f"Cherry-picked {len(picked.value.values)} commit(s)")
        return Ok(None)

    def bisect(self) -> Result[None, CommandError]:
        """Pick a good and a bad commit, then start git bisect between them.

        Both picks happen before `bisect start`, so cancelling either one
        leaves the repository untouched.
        """
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked

        commits = self._repo.log("HEAD", limit=BISECT_CANDIDATES)
        if isinstance(commits, Err):
            return Err(from_git(commits.error, "failed to get git log"))
        items = _commit_items(commits.value)

        good = self._chosen(
            self._selector.select_one(
                items,
                title="Select a known GOOD commit (where everything worked):",
                preview=SHOW_PREVIEW,
            ),
            empty="no commits found",
        )
        if isinstance(good, Err):
            return good
        if good.value.value is None:
            return self._cancelled()

        bad = self._chosen(
            self._selector.select_one(
                items,
                title="Select a known BAD commit (where the bug exists):",
                preview=SHOW_PREVIEW,
            ),
            empty="no commits found",
        )
        if isinstance(bad, Err):
            return bad
        if bad.value.value is None:
            return self._cancelled()

        self._console.print("Starting git bisect...")
        for args, action in (
            (("bisect", "start"), "failed to start git bisect"),
            (("bisect", "good", good.value.value), "failed to mark good commit"),
            (("bisect", "bad", bad.value.value), "failed to mark bad commit"),
        ):
            result = self._live(*args, action=action)
            if isinstance(result, Err):
                return result

        self._console.header("Git bisect is now running")
        for line in _BISECT_HELP:
            self._console.print(line, Style.DIM)
        return Ok(None)

    def blame(self, file: str, line: int) -> Result[None, CommandError]:
        """Show the history of a single line."""
        checked = self._require_repo()
        if isinstance(checked, Err):
            return checked
        if line < 1:
            return Err(CommandError.user_input(f"invalid line number: {line}"))
        if not Path(file).exists():
            return Err(CommandError.precondition(f"file not found: {file}"))

        self._console.header(f"History for {file} line {line}:")
        return self._live("log", "-L", f"{line},{line}:{file}", action="failed to get line history")

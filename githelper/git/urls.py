"""GitHub URL helpers for clone, copy and sync-fork."""

from __future__ import annotations

from githelper.core.result import Err, Ok, Result

__all__ = [
    "default_directory",
    "detect_upstream_url",
    "mirror_push_url",
    "normalize_repo_url",
    "parse_github_url",
    "split_owner_repo",
]

_SSH_PREFIX = "git@github.com:"
_HTTPS_PREFIX = "https://github.com/"


def parse_github_url(url: str) -> Result[str, str]:
    """Extract "owner/repo" from an HTTPS or SSH GitHub URL.

    >>> parse_github_url("git@github.com:octo/hello.git")
    Ok('octo/hello')
    """
    text = url.strip()
    if text.startswith(_SSH_PREFIX):
        path = text.removeprefix(_SSH_PREFIX)
    elif text.startswith(_HTTPS_PREFIX):
        path = text.removeprefix(_HTTPS_PREFIX)
    else:
        return Err(
            "invalid GitHub URL format. Use HTTPS (https://github.com/user/repo) "
            "or SSH (git@github.com:user/repo)"
        )

    path = path.rstrip("/").removesuffix(".git")
    owner, sep, repo = path.partition("/")
    if not sep or not owner or not repo or "/" in repo:
        return Err(f"invalid GitHub repository path: {path or url}")
    return Ok(path)


def split_owner_repo(dest: str) -> Result[tuple[str, str], str]:
    """Split "owner/repo" into its parts."""
    owner, sep, repo = dest.strip().partition("/")
    if not sep or not owner or not repo or "/" in repo:
        return Err("invalid destination format. Use 'owner/repo'")
    return Ok((owner, repo))


def normalize_repo_url(repo: str) -> str:
    """Expand the "org/repo" shorthand to an HTTPS clone URL.

    Anything that already looks like a URL (has a scheme or an @) is returned
    unchanged.
    """
    if "://" in repo or "@" in repo:
        return repo
    if not repo.endswith(".git"):
        repo += ".git"
    return _HTTPS_PREFIX + repo


def default_directory(repo: str) -> str:
    """Directory git would clone into: the last path segment without .git."""
    trimmed = repo.rstrip("/").removesuffix(".git")
    tail = trimmed.rsplit("/", 1)[-1]
    return tail.rsplit(":", 1)[-1]


def detect_upstream_url(origin_url: str) -> str | None:
    """Guess an upstream fetch URL from the origin URL.

    The origin path is reused over HTTPS, so a fork cloned over SSH can fetch
    without credentials. Returns None when origin is not a GitHub URL.
    """
    parsed = parse_github_url(origin_url)
    if isinstance(parsed, Err):
        return None
    return f"{_HTTPS_PREFIX}{parsed.value}.git"


def mirror_push_url(dest: str, use_ssh: bool) -> str:
    if use_ssh:
        return f"{_SSH_PREFIX}{dest}.git"
    return f"{_HTTPS_PREFIX}{dest}.git"

"""GitHub API access."""

from .client import GitHubClient, GitHubError, RepoConfig

__all__ = [
    "GitHubClient",
    "GitHubError",
    "RepoConfig",
]

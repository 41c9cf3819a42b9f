"""GitHub REST API calls used by `githelper copy`.

All functions take an HttpClient so tests can run against MockHttpClient.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from githelper.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from githelper.platform.http import HttpClient, HttpError

__all__ = [
    "API_URL",
    "DEFAULT_DESCRIPTION",
    "GitHubClient",
    "GitHubError",
    "RepoConfig",
]

API_URL = "https://api.github.com"
DEFAULT_DESCRIPTION = "Repository copied using GitHelper"


@dataclass(frozen=True, slots=True)
class GitHubError:
    """A failed GitHub API call.

    Attributes:
        message: What went wrong, in user terms
        status: HTTP status (0 for network errors)
    """

    message: str
    status: int = 0

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class RepoConfig:
    """Settings for a newly created repository."""

    private: bool = True
    description: str = ""
    topics: tuple[str, ...] = field(default_factory=tuple)
    has_issues: bool = True
    has_wiki: bool = True

    def payload(self, name: str) -> dict[str, Any]:
        return {
            "name": name,
            "private": self.private,
            "description": self.description or DEFAULT_DESCRIPTION,
            "has_issues": self.has_issues,
            "has_wiki": self.has_wiki,
        }


def _map_error(error: HttpError) -> GitHubError:
    match error.status:
        case 401:
            return GitHubError("unauthorized: check your GitHub token", 401)
        case 422:
            return GitHubError("repository already exists or name is invalid", 422)
        case 0:
            return GitHubError(f"GitHub API unreachable: {error.message}")
        case status:
            return GitHubError(f"GitHub API error {status}: {error.message}", status)


class GitHubClient:
    """Authenticated GitHub API client."""

    def __init__(self, http: HttpClient, token: str, *, api_url: str = API_URL) -> None:
        self._http = http
        self._token = token
        self._api_url = api_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def create_repository(
        self, owner: str, name: str, config: RepoConfig, *, is_org: bool = False
    ) -> Result[dict[str, Any], GitHubError]:
        """Create owner/name, then set its topics if any were given.

        For a user account the repository is created under the token's owner;
        `owner` is only used in the URL for organisations and for topics.
        """
        if is_org:
            url = f"{self._api_url}/orgs/{owner}/repos"
        else:
            url = f"{self._api_url}/user/repos"

        created = self._http.post_json(url, config.payload(name), headers=self._headers())
        if isinstance(created, Err):
            return Err(_map_error(created.error))

        if config.topics:
            topics = self.replace_topics(owner, name, config.topics)
            if isinstance(topics, Err):
                return topics

        return Ok(created.value)

    def replace_topics(
        self, owner: str, name: str, topics: tuple[str, ...]
    ) -> Result[None, GitHubError]:
        url = f"{self._api_url}/repos/{owner}/{name}/topics"
        result = self._http.put_json(url, {"names": list(topics)}, headers=self._headers())
        if isinstance(result, Err):
            return Err(_map_error(result.error))
        return Ok(None)

"""HTTP client abstraction for the GitHub and OpenAI REST APIs.

This module provides:
- HttpClient: Protocol for JSON requests (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Protocol, cast, runtime_checkable

from githelper import __version__
from githelper.core.result import Err, Ok, Result
from githelper.core.structured import as_str_dict

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
]

JsonBody = dict[str, Any] | list[Any]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
        body: Response body, when the server sent one
    """

    url: str
    status: int
    message: str
    body: str = ""

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for JSON-over-HTTP operations.

    This abstraction allows injecting mock clients for testing,
    avoiding real network calls in unit tests.
    """

    def get_json(
        self, url: str, *, headers: dict[str, str] | None = None
    ) -> Result[dict[str, Any], HttpError]:
        """Fetch URL and parse the response as a JSON object."""
        ...

    def post_json(
        self, url: str, body: JsonBody, *, headers: dict[str, str] | None = None
    ) -> Result[dict[str, Any], HttpError]:
        """POST a JSON body and parse the response as a JSON object."""
        ...

    def put_json(
        self, url: str, body: JsonBody, *, headers: dict[str, str] | None = None
    ) -> Result[dict[str, Any], HttpError]:
        """PUT a JSON body and parse the response as a JSON object."""
        ...


class RealHttpClient:
    """Real HTTP client using urllib.

    Handles:
    - HTTPS with system certificates
    - JSON encoding of request bodies and decoding of responses
    - Timeout handling
    """

    def __init__(
        self, timeout: float = 60.0, user_agent: str = f"githelper/{__version__}"
    ) -> None:
        """Initialize HTTP client.

        Args:
            timeout: Request timeout in seconds
            user_agent: User-Agent header value
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def _request(
        self,
        method: str,
        url: str,
        body: JsonBody | None,
        headers: dict[str, str] | None,
    ) -> Result[bytes, HttpError]:
        all_headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        data: bytes | None = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            all_headers["Content-Type"] = "application/json"
        if headers:
            all_headers.update(headers)

        try:
            req = urllib.request.Request(url, data=data, headers=all_headers, method=method)
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                return Ok(response.read())
        except urllib.error.HTTPError as e:
            detail = e.read().decode("utf-8", errors="replace")
            return Err(HttpError(url=url, status=e.code, message=str(e.reason), body=detail))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

    def _json(
        self,
        method: str,
        url: str,
        body: JsonBody | None,
        headers: dict[str, str] | None,
    ) -> Result[dict[str, Any], HttpError]:
        result = self._request(method, url, body, headers)
        if isinstance(result, Err):
            return result

        raw = result.value.strip()
        if not raw:
            return Ok({})
        try:
            data_obj: object = json.loads(raw.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))

        data = as_str_dict(data_obj)
        if data is None:
            return Err(HttpError(url=url, status=0, message="Expected JSON object"))
        # Values are dynamic; preserve as Any for callers.
        return Ok(cast(dict[str, Any], data))

    def get_json(
        self, url: str, *, headers: dict[str, str] | None = None
    ) -> Result[dict[str, Any], HttpError]:
        return self._json("GET", url, None, headers)

    def post_json(
        self, url: str, body: JsonBody, *, headers: dict[str, str] | None = None
    ) -> Result[dict[str, Any], HttpError]:
        return self._json("POST", url, body, headers)

    def put_json(
        self, url: str, body: JsonBody, *, headers: dict[str, str] | None = None
    ) -> Result[dict[str, Any], HttpError]:
        return self._json("PUT", url, body, headers)


@dataclass(frozen=True, slots=True)
class RecordedRequest:
    """A request seen by MockHttpClient."""

    method: str
    url: str
    body: JsonBody | None
    headers: dict[str, str]


class MockHttpClient:
    """Mock HTTP client for testing.

    Responses are keyed by (method, url). Unknown requests get a 404.

    Usage:
        client = MockHttpClient()
        client.set_json("POST", "https://api.github.com/user/repos", {"id": 1})
        result = client.post_json("https://api.github.com/user/repos", {"name": "x"})
        assert result == Ok({"id": 1})
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, str], dict[str, Any] | HttpError] = {}
        self.requests: list[RecordedRequest] = []

    def set_json(self, method: str, url: str, response: dict[str, Any] | HttpError) -> None:
        """Set the response for a method and URL."""
        self._responses[(method.upper(), url)] = response

    def _respond(
        self,
        method: str,
        url: str,
        body: JsonBody | None,
        headers: dict[str, str] | None,
    ) -> Result[dict[str, Any], HttpError]:
        self.requests.append(RecordedRequest(method, url, body, dict(headers or {})))

        response = self._responses.get((method, url))
        if response is None:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def get_json(
        self, url: str, *, headers: dict[str, str] | None = None
    ) -> Result[dict[str, Any], HttpError]:
        return self._respond("GET", url, None, headers)

    def post_json(
        self, url: str, body: JsonBody, *, headers: dict[str, str] | None = None
    ) -> Result[dict[str, Any], HttpError]:
        return self._respond("POST", url, body, headers)

    def put_json(
        self, url: str, body: JsonBody, *, headers: dict[str, str] | None = None
    ) -> Result[dict[str, Any], HttpError]:
        return self._respond("PUT", url, body, headers)

    @property
    def calls(self) -> list[tuple[str, str]]:
        """(method, url) pairs in call order."""
        return [(r.method, r.url) for r in self.requests]

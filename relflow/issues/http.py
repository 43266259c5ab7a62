"""JSON-over-HTTP client used by the issue trackers.

- HttpClient: protocol, injectable for tests
- RealHttpClient: urllib implementation
- MockHttpClient: canned responses keyed by (method, url)
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from relflow import __version__
from relflow.core.result import Err, Ok, Result

__all__ = ["HttpClient", "HttpError", "MockHttpClient", "RealHttpClient"]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP failure.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    @property
    def is_auth(self) -> bool:
        return self.status in (401, 403)

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    def request_json(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        body: object | None = None,
    ) -> Result[object, HttpError]:
        """Send a request and decode the JSON response.

        An empty response body (e.g. 204 No Content) decodes to None.
        """
        ...


class RealHttpClient:
    def __init__(self, timeout: float = 30.0, user_agent: str = f"relflow/{__version__}") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def request_json(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        body: object | None = None,
    ) -> Result[object, HttpError]:
        all_headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        all_headers.update(headers or {})
        data: bytes | None = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            all_headers["Content-Type"] = "application/json"

        try:
            req = urllib.request.Request(url, data=data, headers=all_headers, method=method)
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                raw: bytes = response.read()
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

        if not raw.strip():
            return Ok(None)
        try:
            return Ok(json.loads(raw.decode("utf-8")))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))


class MockHttpClient:
    """Usage:
    client = MockHttpClient()
    client.set("GET", "https://api.example.com/x", {"key": "value"})
    assert client.request_json("GET", "https://api.example.com/x") == Ok({"key": "value"})
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, str], object | HttpError] = {}
        self.calls: list[tuple[str, str, object | None]] = []

    def set(self, method: str, url: str, response: object | HttpError) -> None:
        self._responses[(method, url)] = response

    def request_json(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        body: object | None = None,
    ) -> Result[object, HttpError]:
        self.calls.append((method, url, body))

        key = (method, url)
        if key not in self._responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._responses[key]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

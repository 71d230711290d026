"""
HTTP transport used by the Confluence client and Slack webhooks.

The pipeline only sees HttpTransport.request(); which implementation backs
it depends on where the notifier is deployed:

- RequestsTransport: long-running hosts (connection pooling via requests.Session)
- UrllibTransport: serverless hosts, no third-party HTTP stack required
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

import requests

from .errors import TransportError


@dataclass
class HttpResponse:
    """Normalized HTTP response.

    Attributes:
        status: HTTP status code
        body: Raw response body, decoded as text
        headers: Response headers
    """

    status: int
    body: str = ""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def reason(self) -> str:
        """Short description of the status, for error messages."""
        return self.body.strip()[:200] or f"HTTP {self.status}"

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            TransportError: If the body is not valid JSON
        """
        try:
            return json.loads(self.body)
        except json.JSONDecodeError as e:
            raise TransportError(f"Response is not valid JSON: {e}") from e


class HttpTransport(ABC):
    """Performs one HTTP request and returns a normalized response.

    Implementations return non-2xx responses as HttpResponse objects and
    raise TransportError only when no response was received.
    """

    @abstractmethod
    def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
        timeout: float = 30,
    ) -> HttpResponse:
        """Send a request.

        Args:
            method: HTTP method (GET, POST)
            url: Absolute URL
            headers: Request headers
            json_body: Payload serialized as JSON (sets Content-Type)
            timeout: Seconds before giving up

        Returns:
            HttpResponse for any status code

        Raises:
            TransportError: On connection failures and timeouts
        """

    def close(self) -> None:
        """Release pooled connections, if any."""


class RequestsTransport(HttpTransport):
    """Transport backed by a requests.Session."""

    def __init__(self, session: requests.Session | None = None):
        self.session = session or requests.Session()

    def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
        timeout: float = 30,
    ) -> HttpResponse:
        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                json=json_body,
                timeout=timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        return HttpResponse(
            status=response.status_code,
            body=response.text,
            headers=dict(response.headers),
        )

    def close(self) -> None:
        self.session.close()


class UrllibTransport(HttpTransport):
    """Transport backed by urllib.request."""

    def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
        timeout: float = 30,
    ) -> HttpResponse:
        headers = dict(headers or {})
        data = None
        if json_body is not None:
            data = json.dumps(json_body).encode()
            headers.setdefault("Content-Type", "application/json")

        request = Request(url, data=data, headers=headers, method=method)

        try:
            with urlopen(request, timeout=timeout) as response:
                return HttpResponse(
                    status=response.status,
                    body=response.read().decode(),
                    headers=dict(response.headers.items()),
                )
        except HTTPError as e:
            # Non-2xx still carries a response worth returning
            return HttpResponse(
                status=e.code,
                body=e.read().decode(errors="replace"),
                headers=dict(e.headers.items()) if e.headers else {},
            )
        except (URLError, TimeoutError, OSError) as e:
            raise TransportError(f"{method} {url} failed: {e}") from e


def create_transport(name: str) -> HttpTransport:
    """Build a transport by name ("requests" or "urllib").

    Raises:
        ValueError: For an unknown transport name
    """
    if name == "requests":
        return RequestsTransport()
    if name == "urllib":
        return UrllibTransport()
    raise ValueError(f"Unknown transport '{name}' (expected 'requests' or 'urllib')")

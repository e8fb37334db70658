"""HTTP transport used by the OAuth flow and the Admin API clients."""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

from shopify_auth.core.exceptions import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Status, raw body and decoded JSON body of an HTTP exchange."""

    status: int
    raw_body: bytes
    parsed_body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)

    def header(self, name: str) -> str:
        """Case-insensitive header lookup; empty string if absent."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return ""


class Transport(Protocol):
    """Sends one HTTP request and returns the decoded response.

    Implementations raise ``TransportError`` on network or protocol failure
    and must keep ``raw_body`` byte-for-byte as received.
    """

    def call(
        self,
        base_url: str,
        method: str,
        path: str,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> TransportResponse: ...


class HttpxTransport:
    """``Transport`` backed by a synchronous ``httpx.Client``.

    Non-2xx responses raise ``TransportError`` carrying the status code.
    Bodies are sent as JSON.
    """

    def __init__(self, client: httpx.Client | None = None, timeout: float = 30.0) -> None:
        self._client = client or httpx.Client(timeout=timeout)

    def call(
        self,
        base_url: str,
        method: str,
        path: str,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> TransportResponse:
        url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
        try:
            response = self._client.request(
                method,
                url,
                params=dict(query or {}),
                headers=dict(headers or {}),
                json=body,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning("%s %s failed: %s", method, url, exc.response.status_code)
            raise TransportError(
                f"{method} {url} returned {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        raw_body = response.content
        try:
            parsed_body = json.loads(raw_body) if raw_body else None
        except ValueError as exc:
            raise TransportError(
                f"{method} {url} returned a non-JSON body",
                status_code=response.status_code,
            ) from exc

        return TransportResponse(
            status=response.status_code,
            raw_body=raw_body,
            parsed_body=parsed_body,
            headers=dict(response.headers),
        )

    def close(self) -> None:
        self._client.close()

"""Transport protocol and the default httpx-backed implementation."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Status line and raw body of one HTTP exchange."""

    status_code: int
    reason: str
    content: bytes


@runtime_checkable
class Transport(Protocol):
    """Minimal transport protocol: a single JSON POST."""

    async def post(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        content: bytes,
    ) -> TransportResponse:
        """POST *content* to *url* and return the raw response."""
        ...


class HttpxTransport:
    """``httpx.AsyncClient`` transport.

    No timeout is applied: a hung request hangs the call. Wrap ``send`` in
    ``asyncio.timeout`` if you need one. Network failures surface as
    ``httpx.HTTPError`` subclasses.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        """Use *client* when given, otherwise create one on first request."""
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Lazy-initialize the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=None)
        return self._client

    async def post(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        content: bytes,
    ) -> TransportResponse:
        """POST *content* to *url*."""
        client = self._get_client()
        response = await client.post(url, headers=dict(headers), content=content)
        logger.debug(
            "POST %s -> %d (%d bytes)",
            redact_url(url),
            response.status_code,
            len(response.content),
        )
        return TransportResponse(
            status_code=response.status_code,
            reason=response.reason_phrase,
            content=response.content,
        )

    async def aclose(self) -> None:
        """Close the client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


def redact_url(url: str) -> str:
    """Strip the query string, which carries the API key for direct calls."""
    return url.split("?", 1)[0]

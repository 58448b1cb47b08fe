"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: it exists to prevent test suites from
growing lots of one-off transport classes as coverage expands.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import TYPE_CHECKING, Any

from clarion.transport import TransportResponse

if TYPE_CHECKING:
    from collections.abc import Mapping


def json_response(
    body: Any, *, status_code: int = 200, reason: str = "OK"
) -> TransportResponse:
    """Build a TransportResponse carrying *body* as JSON."""
    return TransportResponse(
        status_code=status_code,
        reason=reason,
        content=json.dumps(body).encode("utf-8"),
    )


def text_answer(*texts: str) -> TransportResponse:
    """A 200 response whose first candidate holds *texts* as parts."""
    return json_response(
        {"candidates": [{"content": {"parts": [{"text": t} for t in texts]}}]}
    )


@dataclass
class RecordedRequest:
    url: str
    headers: dict[str, str]
    body: dict[str, Any]


@dataclass
class ScriptedTransport:
    """Transport that returns a scripted sequence of responses/exceptions.

    Every POST is recorded with its decoded JSON body for assertions.
    """

    script: list[TransportResponse | BaseException] = field(default_factory=list)
    requests: list[RecordedRequest] = field(default_factory=list)
    closed: bool = False

    async def post(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        content: bytes,
    ) -> TransportResponse:
        self.requests.append(
            RecordedRequest(url=url, headers=dict(headers), body=json.loads(content))
        )
        if not self.script:
            return text_answer("ok")
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    async def aclose(self) -> None:
        self.closed = True

"""Request pipeline: clarification call, then the final request."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Any

from clarion.clarify import clarify
from clarion.errors import APIError, CommunicationError, ResponseDecodeError
from clarion.messages import normalize_conversation
from clarion.payload import build_payload
from clarion.response import extract
from clarion.transport import HttpxTransport, redact_url

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from clarion.config import Config
    from clarion.messages import Conversation, Message
    from clarion.response import Outcome
    from clarion.transport import Transport

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}


@dataclass(frozen=True)
class Endpoint:
    """Where and how to POST for one connection method."""

    url: str
    headers: dict[str, str] = field(default_factory=lambda: dict(_JSON_HEADERS))


def resolve_endpoint(config: Config) -> Endpoint:
    """Build the request URL and headers for *config*.

    ``direct`` puts the API key in the query string of the public endpoint.
    ``proxy`` posts to the gateway with the key and model as headers.
    """
    if config.connection_method == "proxy":
        return Endpoint(
            url=str(config.proxy_url),
            headers={
                **_JSON_HEADERS,
                "x-api-key": str(config.gateway_key),
                "X-Model-Name": config.model,
            },
        )
    return Endpoint(
        url=f"{config.base_url}{config.model}:generateContent?key={config.api_key}",
    )


async def exchange(
    conversation: Conversation,
    *,
    config: Config,
    endpoint: Endpoint,
    transport: Transport,
    mime_type: str | None = None,
    phase: str = "generate",
) -> Outcome:
    """Run one build, POST, extract round trip.

    Raises:
        EmptyConversationError: If the conversation has no sendable turn.
        APIError: If the provider answers with an error status.
        ResponseDecodeError: If the response body is not JSON.
    """
    payload = build_payload(
        conversation,
        model=config.model,
        mime_type=mime_type,
        connection_method=config.connection_method,
        thinking_models=config.thinking_models,
    )
    logger.debug(
        "%s: POST %s via %s (%d turn(s))",
        phase,
        redact_url(endpoint.url),
        config.connection_method,
        len(payload.contents),
    )
    response = await transport.post(
        endpoint.url, headers=endpoint.headers, content=payload.to_json()
    )
    outcome = extract(
        response.status_code,
        response.reason,
        response.content,
        connection_method=config.connection_method,
    )

    if outcome.kind == "provider_error":
        raise APIError(
            outcome.text,
            status_code=response.status_code,
            connection_method=config.connection_method,
            phase=phase,
        )
    if outcome.kind == "unparseable":
        raise ResponseDecodeError(
            outcome.text, status_code=response.status_code, phase=phase
        )
    if outcome.kind != "answer":
        logger.debug("%s: degraded outcome (%s)", phase, outcome.kind)
    return outcome


async def send(
    messages: Sequence[Message | Mapping[str, Any]],
    *,
    config: Config,
    mime_type: str | None = None,
    transport: Transport | None = None,
) -> str:
    """Clarify the first user request, send the conversation, return the text.

    Args:
        messages: Conversation in turn order, as ``Message`` objects or dicts.
        config: Connection settings and model.
        mime_type: MIME type applied to every image in the conversation.
        transport: Optional transport; an ``HttpxTransport`` is created (and
            closed) when omitted.

    Returns:
        The extracted answer, or a descriptive notice when the provider
        blocked the request or stopped early.

    Raises:
        ConfigurationError: If the conversation input is invalid.
        APIError: If the provider answered with an error status, during
            clarification or the final request.
        CommunicationError: For any other failure, with the original
            exception as ``__cause__``.
    """
    conversation = normalize_conversation(messages)
    endpoint = resolve_endpoint(config)
    method = config.connection_method

    owned = transport is None
    active: Transport = HttpxTransport() if transport is None else transport

    async def _exchange(conv: Conversation, *, phase: str) -> Outcome:
        return await exchange(
            conv,
            config=config,
            endpoint=endpoint,
            transport=active,
            mime_type=mime_type,
            phase=phase,
        )

    try:
        final_conversation = await clarify(
            conversation,
            exchange=lambda conv: _exchange(conv, phase="clarify"),
            prompt=config.clarification_prompt,
        )
        outcome = await _exchange(final_conversation, phase="generate")
        return outcome.text
    except asyncio.CancelledError:
        raise
    except APIError:
        raise
    except Exception as e:
        raise CommunicationError(
            f"Failed to communicate with {method} endpoint or process response: {e}",
            connection_method=method,
        ) from e
    finally:
        if owned:
            aclose = getattr(active, "aclose", None)
            if callable(aclose):
                try:
                    await aclose()
                except asyncio.CancelledError:
                    raise
                except Exception as exc:
                    # Cleanup should never mask the primary failure.
                    logger.warning("Transport cleanup failed: %s", exc)

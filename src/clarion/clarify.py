"""Clarification pass: rewrite the first user request before sending it.

One extra provider call turns the first non-blank user message into a single
concrete imperative instruction. The clarified text replaces that message's
content in a new conversation; the caller's conversation is left untouched.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from clarion.constants import CLARIFICATION_PREFIX, DEFAULT_CLARIFICATION_PROMPT
from clarion.messages import Message

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from clarion.messages import Conversation
    from clarion.response import Outcome

    Exchange = Callable[[Conversation], Awaitable[Outcome]]

logger = logging.getLogger(__name__)


def find_clarification_target(conversation: Conversation) -> int | None:
    """Return the index of the first user message with non-blank content."""
    for idx, message in enumerate(conversation):
        if message.role == "user" and message.content and message.content.strip():
            return idx
    return None


def build_clarification_request(
    text: str, *, prompt: str = DEFAULT_CLARIFICATION_PROMPT
) -> Conversation:
    """Wrap *text* in the rewriting instruction conversation."""
    return (
        Message(role="system", content=prompt),
        Message(role="user", content=f"{CLARIFICATION_PREFIX}{text}"),
    )


async def clarify(
    conversation: Conversation,
    *,
    exchange: Exchange,
    prompt: str = DEFAULT_CLARIFICATION_PROMPT,
) -> Conversation:
    """Return *conversation* with its first user request clarified.

    Returns the conversation unchanged when no user message qualifies or the
    provider returns blank text. Errors from *exchange* propagate.
    """
    target = find_clarification_target(conversation)
    if target is None:
        logger.debug("No user message to clarify; sending conversation as-is")
        return conversation

    original = conversation[target].content or ""
    outcome = await exchange(build_clarification_request(original, prompt=prompt))

    if not outcome.text.strip():
        logger.debug("Clarification returned blank text; keeping original request")
        return conversation

    logger.debug(
        "Clarified message %d (%s): %d -> %d chars",
        target,
        outcome.kind,
        len(original),
        len(outcome.text),
    )
    return tuple(
        message.with_content(outcome.text) if idx == target else message
        for idx, message in enumerate(conversation)
    )

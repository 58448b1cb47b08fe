"""Conversation to Gemini ``generateContent`` request body."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from typing import TYPE_CHECKING, Any, Literal

from clarion.constants import THINKING_MODELS, UNBOUNDED_THINKING_BUDGET
from clarion.errors import EmptyConversationError

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from clarion.config import ConnectionMethod
    from clarion.messages import Message

logger = logging.getLogger(__name__)

WireRole = Literal["user", "model"]


@dataclass(frozen=True)
class Turn:
    """One entry of the wire ``contents`` list."""

    role: WireRole
    parts: tuple[dict[str, Any], ...]

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, "parts": [dict(p) for p in self.parts]}


@dataclass(frozen=True)
class WirePayload:
    """A ready-to-send request body.

    ``contents`` is never empty and never opens with a ``model`` turn;
    ``build_payload`` is the only supported way to create one.
    """

    contents: tuple[Turn, ...]
    system_instruction: str | None = None
    generation_config: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"contents": [t.to_dict() for t in self.contents]}
        if self.system_instruction:
            body["systemInstruction"] = {"parts": [{"text": self.system_instruction}]}
        if self.generation_config is not None:
            body["generationConfig"] = self.generation_config
        return body

    def to_json(self) -> bytes:
        """Serialize to compact UTF-8 JSON."""
        return json.dumps(
            self.to_dict(), ensure_ascii=False, separators=(",", ":")
        ).encode("utf-8")


def build_payload(
    conversation: Sequence[Message],
    *,
    model: str,
    mime_type: str | None = None,
    connection_method: ConnectionMethod = "direct",
    thinking_models: Collection[str] = THINKING_MODELS,
) -> WirePayload:
    """Translate a conversation into the provider wire format.

    A leading system message becomes ``systemInstruction``; assistant turns
    become ``model`` turns and everything else is sent as ``user``. Images are
    attached to user turns only. Turns without parts are dropped, as is a
    leading ``model`` turn.

    Raises:
        EmptyConversationError: If no sendable turn remains.
    """
    system_instruction: str | None = None
    contents: list[Turn] = []

    for idx, message in enumerate(conversation):
        if idx == 0 and message.role == "system":
            system_instruction = message.content or None
            continue

        role: WireRole = "model" if message.role == "assistant" else "user"
        parts: list[dict[str, Any]] = []
        if message.content:
            parts.append({"text": message.content})
        if role == "user":
            parts.extend(_inline_image(data, mime_type) for data in message.images)

        if not parts:
            logger.debug("Dropping empty %s turn at index %d", message.role, idx)
            continue
        if not contents and role == "model":
            logger.debug("Dropping leading model turn at index %d", idx)
            continue
        contents.append(Turn(role=role, parts=tuple(parts)))

    if not contents:
        raise EmptyConversationError(
            f"Cannot send empty request to Gemini via {connection_method} method.",
            hint="Include at least one user message with text or images.",
            connection_method=connection_method,
        )

    generation_config: dict[str, Any] | None = None
    if model in thinking_models:
        generation_config = {
            "thinkingConfig": {"thinkingBudget": UNBOUNDED_THINKING_BUDGET}
        }

    return WirePayload(
        contents=tuple(contents),
        system_instruction=system_instruction,
        generation_config=generation_config,
    )


def _inline_image(data: str, mime_type: str | None) -> dict[str, Any]:
    inline: dict[str, str] = {"data": data}
    if mime_type:
        inline = {"mime_type": mime_type, "data": data}
    return {"inline_data": inline}

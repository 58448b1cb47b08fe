"""Conversation messages and input normalization."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any, Literal, get_args

from clarion.errors import ConfigurationError

Role = Literal["system", "user", "assistant"]
_ROLES: frozenset[str] = frozenset(get_args(Role))


@dataclass(frozen=True, slots=True)
class Message:
    """A single role-tagged conversational turn.

    ``images`` holds base64 image payloads and is only sent for user turns.
    """

    role: Role
    content: str | None = None
    images: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Message:
        """Create a Message from a ``{"role", "content", "images"}`` mapping."""
        role = data.get("role")
        if role not in _ROLES:
            raise ConfigurationError(
                f"Unknown message role: {role!r}",
                hint="Use one of 'system', 'user' or 'assistant'.",
            )
        content = data.get("content")
        if content is not None and not isinstance(content, str):
            raise ConfigurationError(
                f"Message content must be a string, got {type(content).__name__}",
            )
        images = data.get("images") or ()
        if (
            not isinstance(images, Sequence)
            or isinstance(images, str)
            or not all(isinstance(i, str) for i in images)
        ):
            raise ConfigurationError(
                "Message images must be a sequence of base64 strings",
                hint="Pass images=['<base64>', ...].",
            )
        return cls(role=role, content=content, images=tuple(images))

    def with_content(self, content: str) -> Message:
        """Return a copy of this message with *content* replaced."""
        return replace(self, content=content)


Conversation = tuple[Message, ...]


def normalize_conversation(
    messages: Sequence[Message | Mapping[str, Any]] | None,
) -> Conversation:
    """Validate caller input and return an immutable conversation.

    Accepts ``Message`` instances or plain mappings, in turn order.

    Raises:
        ConfigurationError: If an item is neither a Message nor a mapping,
            or a mapping has an unknown role.
    """
    if messages is None:
        return ()

    normalized: list[Message] = []
    for i, item in enumerate(messages):
        if isinstance(item, Message):
            if item.role not in _ROLES:
                raise ConfigurationError(f"messages[{i}] has unknown role {item.role!r}")
            normalized.append(item)
        elif isinstance(item, Mapping):
            normalized.append(Message.from_dict(item))
        else:
            raise ConfigurationError(
                f"messages[{i}]: expected Message or mapping, got {type(item).__name__}",
                hint="Pass Message(role='user', content='...') or a dict.",
            )
    return tuple(normalized)

"""Clarion: clarified single-shot requests to the Gemini API.

Public API:
    - send(): Clarify the first user request, then send the conversation
    - Config: Connection settings (direct key or gateway proxy)
    - Message: One conversational turn
"""

from __future__ import annotations

import logging

from clarion.config import Config, ConnectionMethod
from clarion.errors import (
    APIError,
    ClarionError,
    CommunicationError,
    ConfigurationError,
    EmptyConversationError,
    ResponseDecodeError,
)
from clarion.messages import Message
from clarion.pipeline import send
from clarion.response import Outcome
from clarion.transport import HttpxTransport, Transport, TransportResponse

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("clarion-gemini")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("clarion").addHandler(logging.NullHandler())

__all__ = [
    "APIError",
    "ClarionError",
    "CommunicationError",
    "Config",
    "ConfigurationError",
    "ConnectionMethod",
    "EmptyConversationError",
    "HttpxTransport",
    "Message",
    "Outcome",
    "ResponseDecodeError",
    "Transport",
    "TransportResponse",
    "send",
]

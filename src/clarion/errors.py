"""Exception hierarchy for Clarion."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clarion.config import ConnectionMethod


class ClarionError(Exception):
    """Base exception for all Clarion errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(ClarionError):
    """Configuration validation or resolution failed."""


class EmptyConversationError(ClarionError):
    """Payload construction produced no sendable turns."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        connection_method: ConnectionMethod | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.connection_method = connection_method


class APIError(ClarionError):
    """The provider answered with an error status.

    Carries structured metadata so the request boundary can tell provider
    failures apart from everything else without inspecting the message.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        status_code: int | None = None,
        connection_method: ConnectionMethod | None = None,
        phase: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code = status_code
        self.connection_method = connection_method
        self.phase = phase


class ResponseDecodeError(ClarionError):
    """The provider response body could not be decoded."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        status_code: int | None = None,
        phase: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code = status_code
        self.phase = phase


class CommunicationError(ClarionError):
    """Any non-provider failure while talking to the endpoint.

    The original exception is always available as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        connection_method: ConnectionMethod | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.connection_method = connection_method

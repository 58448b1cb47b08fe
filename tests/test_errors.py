from __future__ import annotations

import pytest

from clarion.errors import (
    APIError,
    ClarionError,
    CommunicationError,
    ConfigurationError,
    EmptyConversationError,
    ResponseDecodeError,
)

pytestmark = pytest.mark.unit


def test_api_error_structured_metadata() -> None:
    err = APIError(
        "API Error via proxy (500 Internal Server Error): overloaded",
        hint="retry later",
        status_code=500,
        connection_method="proxy",
        phase="clarify",
    )

    assert str(err).startswith("API Error via proxy")
    assert err.hint == "retry later"
    assert err.status_code == 500
    assert err.connection_method == "proxy"
    assert err.phase == "clarify"


def test_api_error_defaults_to_none() -> None:
    err = APIError("fail")
    assert err.hint is None
    assert err.status_code is None
    assert err.connection_method is None
    assert err.phase is None


@pytest.mark.parametrize(
    "cls",
    [
        APIError,
        CommunicationError,
        ConfigurationError,
        EmptyConversationError,
        ResponseDecodeError,
    ],
)
def test_subclass_hierarchy(cls: type[ClarionError]) -> None:
    """Every library error is catchable as ClarionError."""
    assert issubclass(cls, ClarionError)
    assert issubclass(cls, Exception)


def test_communication_error_is_not_an_api_error() -> None:
    """Boundary re-raise vs wrap is a type check, so the two must not overlap."""
    assert not issubclass(CommunicationError, APIError)
    assert not issubclass(ResponseDecodeError, APIError)

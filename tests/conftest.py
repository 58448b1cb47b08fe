"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration, marker registration,
and automatic API test skipping. All fixtures here are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
import logging
import os

import pytest

from clarion.config import Config

GEMINI_MODEL = "gemini-2.5-flash"
PLAIN_MODEL = "gemini-2.0-flash"

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_provider_env(request, monkeypatch):
    """Ensure a clean connection environment for each test.

    Clears GEMINI_* and CLARION_* env vars to prevent test pollution.
    Opt-out: @pytest.mark.allow_env_pollution or @pytest.mark.api
    """
    if request.node.get_closest_marker("allow_env_pollution") or (
        "api" in request.node.keywords
    ):
        return

    for key in list(os.environ.keys()):
        if key.startswith(("GEMINI_", "CLARION_")):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# =============================================================================
# Pytest Hooks
# =============================================================================

API_TESTS_REASON = "API tests require ENABLE_API_TESTS=1"


def _api_tests_enabled() -> bool:
    return bool(os.getenv("ENABLE_API_TESTS"))


def pytest_collection_modifyitems(items):
    """Automatically skip API tests when not explicitly enabled."""
    if _api_tests_enabled():
        return
    skip_api = pytest.mark.skip(reason=API_TESTS_REASON)
    for item in items:
        if "api" in item.keywords:
            item.add_marker(skip_api)


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def gemini_model() -> str:
    """A model that receives the unbounded thinking config."""
    return GEMINI_MODEL


@pytest.fixture
def direct_config() -> Config:
    """Direct-connection config with an explicit test key."""
    return Config(model=GEMINI_MODEL, api_key="test-key")


@pytest.fixture
def proxy_config() -> Config:
    """Gateway-connection config with explicit test credentials."""
    return Config(
        model=GEMINI_MODEL,
        connection_method="proxy",
        proxy_url="https://gateway.test/generate",
        gateway_key="gw-key",
    )


# =============================================================================
# API Test Configuration
# =============================================================================

# Chosen for cost efficiency; the clarification call doubles the request count.
_GEMINI_TEST_MODEL = "gemini-2.5-flash-lite"


@pytest.fixture
def gemini_api_key():
    """Return GEMINI_API_KEY or skip the test if unavailable."""
    key = os.getenv("GEMINI_API_KEY")
    if not key:
        pytest.skip("GEMINI_API_KEY not set")
    return key


@pytest.fixture
def gemini_test_model():
    """Return the model to use for Gemini API tests."""
    return _GEMINI_TEST_MODEL

"""Configuration: Frozen Config with explicit connection requirements."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Literal

from dotenv import load_dotenv

from clarion.constants import (
    DEFAULT_CLARIFICATION_PROMPT,
    GEMINI_BASE_URL,
    THINKING_MODELS,
)
from clarion.errors import ConfigurationError

load_dotenv()

ConnectionMethod = Literal["direct", "proxy"]

_API_KEY_ENV_VAR = "GEMINI_API_KEY"
_PROXY_URL_ENV_VAR = "CLARION_PROXY_URL"
_GATEWAY_KEY_ENV_VAR = "CLARION_GATEWAY_KEY"


@dataclass(frozen=True)
class Config:
    """Immutable connection settings for one Clarion call.

    ``direct`` sends the API key as a query parameter to the public endpoint.
    ``proxy`` posts to a gateway that holds the real key and routes by the
    ``X-Model-Name`` header.

    Example:
        config = Config(model="gemini-2.5-flash")
        # api_key is resolved from GEMINI_API_KEY

        config = Config(
            model="gemini-2.5-flash",
            connection_method="proxy",
            proxy_url="https://gateway.example.com/generate",
            gateway_key="...",
        )
    """

    model: str
    connection_method: ConnectionMethod = "direct"
    #: Auto-resolved from ``GEMINI_API_KEY`` when *None* (direct only).
    api_key: str | None = None
    #: Auto-resolved from ``CLARION_PROXY_URL`` when *None* (proxy only).
    proxy_url: str | None = None
    #: Auto-resolved from ``CLARION_GATEWAY_KEY`` when *None* (proxy only).
    gateway_key: str | None = None
    base_url: str = GEMINI_BASE_URL
    thinking_models: frozenset[str] = THINKING_MODELS
    clarification_prompt: str = DEFAULT_CLARIFICATION_PROMPT

    def __post_init__(self) -> None:
        """Resolve credentials from the environment and validate."""
        if self.connection_method not in ("direct", "proxy"):
            raise ConfigurationError(
                f"Unknown connection method: {self.connection_method!r}",
                hint="Supported connection methods: 'direct', 'proxy'",
            )

        if not isinstance(self.model, str) or not self.model.strip():
            raise ConfigurationError(
                "Cloud Gemini model name not set.",
                hint="Pass Config(model='gemini-2.5-flash') or another model id.",
            )

        if not isinstance(self.thinking_models, frozenset):
            object.__setattr__(self, "thinking_models", frozenset(self.thinking_models))

        if self.connection_method == "proxy":
            self._resolve_from_env("proxy_url", _PROXY_URL_ENV_VAR)
            self._resolve_from_env("gateway_key", _GATEWAY_KEY_ENV_VAR)
            if not self.proxy_url:
                raise ConfigurationError(
                    "API Gateway endpoint not configured for proxy method.",
                    hint=f"Set {_PROXY_URL_ENV_VAR} or pass proxy_url=...",
                )
            if not self.gateway_key:
                raise ConfigurationError(
                    "Gateway API key not configured for proxy method.",
                    hint=f"Set {_GATEWAY_KEY_ENV_VAR} or pass gateway_key=...",
                )
            return

        self._resolve_from_env("api_key", _API_KEY_ENV_VAR)
        if not self.api_key:
            raise ConfigurationError(
                "Cloud Gemini API key not configured.",
                hint=f"Set {_API_KEY_ENV_VAR} environment variable or pass api_key=...",
            )

    def _resolve_from_env(self, attr: str, env_var: str) -> None:
        if getattr(self, attr) is None:
            object.__setattr__(self, attr, os.environ.get(env_var))

    def __str__(self) -> str:
        """Return a redacted, developer-friendly representation."""
        return (
            f"Config(model={self.model!r}, "
            f"connection_method={self.connection_method!r}, "
            f"api_key={'[REDACTED]' if self.api_key else None}, "
            f"proxy_url={self.proxy_url!r}, "
            f"gateway_key={'[REDACTED]' if self.gateway_key else None})"
        )

    __repr__ = __str__

"""Configuration management for the scrape.do client.

This module provides **load_config()**, a factory that creates a
ClientConfig with environment-based defaults and user overrides.

The API token is resolved in this order:
1. Explicitly passed ``token`` override
2. ``SCRAPEDO_TOKEN`` environment variable

If no token is found, calls that need one raise ``ConfigError`` at call
time rather than at config creation time (see ``require_token()``).
"""

from __future__ import annotations

from typing import Any

from scrapedo.exceptions import ConfigError
from scrapedo.models import TOKEN_ENV_VAR, ClientConfig

__all__ = [
    "load_config",
    "require_token",
]


def load_config(**overrides: Any) -> ClientConfig:
    """Create a ClientConfig with sensible defaults and optional overrides.

    Args:
        **overrides: Keyword arguments matching ClientConfig field names.
                     For example: ``load_config(token="abc", request_timeout=30)``.

    Returns:
        A fully initialized ClientConfig.

    Raises:
        ConfigError: If an override key does not match any config field.

    Examples:
        >>> config = load_config(base_url="https://api.scrape.do/")
        >>> config.base_url
        'https://api.scrape.do'
    """
    valid_fields = set(ClientConfig.model_fields.keys())
    invalid = set(overrides.keys()) - valid_fields
    if invalid:
        raise ConfigError(
            f"Unknown config fields: {sorted(invalid)}. "
            f"Valid fields: {sorted(valid_fields)}"
        )

    return ClientConfig(**overrides)


def require_token(config: ClientConfig) -> str:
    """Return the configured token.

    Raises:
        ConfigError: If no token was passed and ``SCRAPEDO_TOKEN`` is unset.
    """
    if not config.token:
        raise ConfigError(
            f"No API token available. Set the {TOKEN_ENV_VAR} environment "
            "variable or pass token to the client."
        )
    return config.token

"""Configuration settings for freepik_seedream.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: per-session config blob > env vars
> defaults.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from freepik_seedream.errors import ConfigurationError

logger = logging.getLogger(__name__)

FREEPIK_API_BASE = "https://api.freepik.com"

# Key looked up in the base64 JSON config blob
CONFIG_BLOB_KEY = "freepikApiKey"


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the FREEPIK_ prefix
    (``FREEPIK_API_KEY``, ``FREEPIK_POLL_INTERVAL`` ...). The listening port
    also honours the plain ``PORT`` variable set by container platforms.
    """

    model_config = SettingsConfigDict(
        env_prefix="FREEPIK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Vendor
    api_key: SecretStr | None = Field(
        default=None,
        description="Freepik API key sent as x-freepik-api-key",
    )
    base_url: str = Field(
        default=FREEPIK_API_BASE,
        description="Freepik API base URL",
    )
    request_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for a single vendor request (seconds)",
    )

    # Polling
    poll_interval: float = Field(
        default=2.0,
        ge=0,
        description="Seconds to wait before each task status check",
    )
    poll_max_attempts: int = Field(
        default=60,
        ge=1,
        description="Status checks before giving up on a task",
    )

    # HTTP transport
    host: str = Field(
        default="0.0.0.0",
        description="Bind address for the HTTP transports",
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("FREEPIK_PORT", "PORT", "port"),
        description="Listening port for the HTTP transports",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    def api_key_value(self) -> str | None:
        """Return the plain API key, or None if unset or blank."""
        if self.api_key is None:
            return None
        value = self.api_key.get_secret_value().strip()
        return value or None


def get_settings() -> Settings:
    """Get the application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON with the API key masked.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


def decode_config_blob(blob: str) -> dict[str, object]:
    """Decode a base64-encoded JSON configuration blob.

    Both the standard and the URL-safe alphabets are accepted, with or
    without padding.

    Args:
        blob: Base64 text as passed in the ``config`` query parameter.

    Returns:
        Decoded configuration mapping.

    Raises:
        ConfigurationError: If the blob is not base64 JSON object text.
    """
    # Query string decoding turns an unescaped "+" into a space
    text = blob.strip().replace(" ", "+")
    padded = text + "=" * (-len(text) % 4)
    try:
        if "-" in padded or "_" in padded:
            raw = base64.urlsafe_b64decode(padded)
        else:
            raw = base64.b64decode(padded, validate=True)
        decoded = json.loads(raw.decode("utf-8"))
    except (binascii.Error, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration blob: {e}") from e

    if not isinstance(decoded, dict):
        raise ConfigurationError("Invalid configuration blob: expected a JSON object")
    return decoded


def resolve_api_key(settings: Settings, config_blob: str | None = None) -> str:
    """Resolve the API key for a session.

    A key inside the config blob takes precedence over ``FREEPIK_API_KEY``.

    Args:
        settings: Effective settings.
        config_blob: Optional base64 JSON blob from the session request.

    Returns:
        The API key.

    Raises:
        ConfigurationError: If the blob is malformed or no key is configured.
    """
    api_key = settings.api_key_value()

    if config_blob:
        decoded = decode_config_blob(config_blob)
        blob_key = decoded.get(CONFIG_BLOB_KEY)
        if isinstance(blob_key, str) and blob_key.strip():
            logger.debug("Using API key from session config blob")
            api_key = blob_key.strip()

    if not api_key:
        raise ConfigurationError("No Freepik API key configured")
    return api_key


__all__ = [
    "CONFIG_BLOB_KEY",
    "FREEPIK_API_BASE",
    "Settings",
    "decode_config_blob",
    "get_settings",
    "print_settings_json",
    "resolve_api_key",
]

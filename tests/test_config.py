"""Tests for configuration module."""

import base64
import json
import os
from unittest.mock import patch

import pytest

from freepik_seedream.config import (
    CONFIG_BLOB_KEY,
    FREEPIK_API_BASE,
    Settings,
    decode_config_blob,
    get_settings,
    print_settings_json,
    resolve_api_key,
)
from freepik_seedream.errors import ConfigurationError


def encode_blob(payload: object, urlsafe: bool = False) -> str:
    raw = json.dumps(payload).encode("utf-8")
    if urlsafe:
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")
    return base64.b64encode(raw).decode("ascii")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the host environment out of every test."""
    for name in ("FREEPIK_API_KEY", "FREEPIK_PORT", "PORT", "FREEPIK_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(os.path.dirname(__file__))


class TestSettings:
    """Test Settings class."""

    def test_default_settings(self) -> None:
        """Settings should have sensible defaults."""
        settings = Settings()

        assert settings.api_key is None
        assert settings.base_url == FREEPIK_API_BASE
        assert settings.poll_interval == 2.0
        assert settings.poll_max_attempts == 60
        assert settings.port == 3000
        assert settings.log_level == "INFO"

    def test_settings_from_env(self) -> None:
        """Settings should be loadable from environment variables."""
        with patch.dict(
            os.environ,
            {
                "FREEPIK_API_KEY": "fpk-env",
                "FREEPIK_POLL_INTERVAL": "0.5",
                "FREEPIK_POLL_MAX_ATTEMPTS": "45",
                "FREEPIK_LOG_LEVEL": "DEBUG",
            },
        ):
            settings = Settings()
            assert settings.api_key_value() == "fpk-env"
            assert settings.poll_interval == 0.5
            assert settings.poll_max_attempts == 45
            assert settings.log_level == "DEBUG"

    def test_plain_port_variable(self) -> None:
        """The PORT variable set by container platforms should be honoured."""
        with patch.dict(os.environ, {"PORT": "8080"}):
            assert Settings().port == 8080

    def test_blank_api_key_is_unset(self) -> None:
        """A whitespace-only key counts as missing."""
        settings = Settings(api_key="   ")
        assert settings.api_key_value() is None

    def test_invalid_poll_attempts_rejected(self) -> None:
        """At least one status check is required."""
        with pytest.raises(ValueError):
            Settings(poll_max_attempts=0)


class TestGetSettings:
    """Test get_settings function."""

    def test_get_settings_returns_settings(self) -> None:
        assert isinstance(get_settings(), Settings)


class TestPrintSettingsJson:
    """Test print_settings_json function."""

    def test_output_is_valid_json(self) -> None:
        output = print_settings_json(Settings())
        parsed = json.loads(output)
        assert parsed["base_url"] == FREEPIK_API_BASE
        assert parsed["poll_max_attempts"] == 60

    def test_api_key_is_masked(self) -> None:
        """The key must never be printed in clear."""
        output = print_settings_json(Settings(api_key="fpk-secret"))
        assert "fpk-secret" not in output


class TestDecodeConfigBlob:
    """Test decode_config_blob function."""

    def test_standard_base64(self) -> None:
        blob = encode_blob({CONFIG_BLOB_KEY: "fpk-blob"})
        assert decode_config_blob(blob) == {CONFIG_BLOB_KEY: "fpk-blob"}

    def test_urlsafe_without_padding(self) -> None:
        blob = encode_blob({CONFIG_BLOB_KEY: "fpk-blob>>??"}, urlsafe=True)
        assert decode_config_blob(blob)[CONFIG_BLOB_KEY] == "fpk-blob>>??"

    def test_not_base64(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid configuration blob"):
            decode_config_blob("!!!not-base64!!!")

    def test_not_json(self) -> None:
        blob = base64.b64encode(b"not json").decode("ascii")
        with pytest.raises(ConfigurationError):
            decode_config_blob(blob)

    def test_not_an_object(self) -> None:
        with pytest.raises(ConfigurationError, match="JSON object"):
            decode_config_blob(encode_blob(["fpk"]))


class TestResolveApiKey:
    """Test resolve_api_key function."""

    def test_env_key(self) -> None:
        assert resolve_api_key(Settings(api_key="fpk-env")) == "fpk-env"

    def test_blob_wins_over_env(self) -> None:
        blob = encode_blob({CONFIG_BLOB_KEY: "fpk-blob"})
        assert resolve_api_key(Settings(api_key="fpk-env"), blob) == "fpk-blob"

    def test_blob_without_key_falls_back(self) -> None:
        blob = encode_blob({"other": "value"})
        assert resolve_api_key(Settings(api_key="fpk-env"), blob) == "fpk-env"

    def test_missing_key(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_api_key(Settings())
        assert exc_info.value.code == "configuration"

    def test_invalid_blob_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            resolve_api_key(Settings(api_key="fpk-env"), "%%%")

    def test_plus_decoded_as_space(self) -> None:
        """A blob passed unescaped in a query string survives '+' to ' '."""
        blob = encode_blob({CONFIG_BLOB_KEY: "fpk>>>"})
        assert decode_config_blob(blob.replace("+", " "))[CONFIG_BLOB_KEY] == "fpk>>>"

"""Smoke tests for the CLI.

These tests verify basic CLI functionality without network access; vendor
calls are mocked with respx.
"""

import json
import os

import httpx
import pytest
import respx
from typer.testing import CliRunner

from freepik_seedream import __version__
from freepik_seedream.cli import app
from freepik_seedream.client import RESOURCES_ENDPOINT, SEEDREAM_ENDPOINT
from freepik_seedream.config import FREEPIK_API_BASE

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_env(monkeypatch):
    monkeypatch.setenv("FREEPIK_API_KEY", "fpk-cli")
    monkeypatch.setenv("FREEPIK_POLL_INTERVAL", "0")


@pytest.fixture
def api():
    with respx.mock(base_url=FREEPIK_API_BASE, assert_all_called=False) as router:
        yield router


class TestCLIHelp:
    """Test CLI help and version commands."""

    def test_help_returns_zero(self) -> None:
        """CLI --help should return exit code 0."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Freepik Seedream MCP" in result.stdout

    def test_version_flag(self) -> None:
        """CLI --version should print version and exit 0."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_short_version_flag(self) -> None:
        """CLI -V should print version and exit 0."""
        result = runner.invoke(app, ["-V"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_no_args_shows_help(self) -> None:
        """CLI with no args should show help."""
        result = runner.invoke(app, [])
        assert "Usage:" in result.stdout

    def test_serve_help(self) -> None:
        result = runner.invoke(app, ["serve", "--help"])
        assert result.exit_code == 0
        assert "--transport" in result.stdout


class TestCLIConfig:
    """Test CLI config command."""

    def test_config_command(self) -> None:
        """CLI config should show configuration without the key."""
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "Vendor:" in result.stdout
        assert "Polling:" in result.stdout
        assert "HTTP transport:" in result.stdout
        assert "(set)" in result.stdout
        assert "fpk-cli" not in result.stdout

    def test_config_json(self) -> None:
        """CLI config --json should output JSON with the key masked."""
        result = runner.invoke(app, ["config", "--json"])
        assert result.exit_code == 0
        config_data = json.loads(result.stdout)
        for key in ("api_key", "base_url", "poll_interval", "poll_max_attempts", "port"):
            assert key in config_data, f"Missing key: {key}"
        assert "fpk-cli" not in result.stdout


class TestCLIVendorCommands:
    """Test the one-shot vendor commands."""

    def test_generate_waits(self, api) -> None:
        api.post(SEEDREAM_ENDPOINT).mock(
            return_value=httpx.Response(200, json={"data": {"task_id": "t1", "status": "CREATED"}})
        )
        api.get(f"{SEEDREAM_ENDPOINT}/t1").mock(
            return_value=httpx.Response(
                200,
                json={
                    "data": {
                        "task_id": "t1",
                        "status": "COMPLETED",
                        "generated": ["https://img.example/cli.png"],
                    }
                },
            )
        )

        result = runner.invoke(app, ["generate", "a lighthouse"])

        assert result.exit_code == 0, result.stdout
        assert "t1" in result.stdout
        assert "https://img.example/cli.png" in result.stdout

    def test_generate_no_wait(self, api) -> None:
        api.post(SEEDREAM_ENDPOINT).mock(
            return_value=httpx.Response(200, json={"data": {"task_id": "t1", "status": "CREATED"}})
        )
        status_route = api.get(f"{SEEDREAM_ENDPOINT}/t1")

        result = runner.invoke(app, ["generate", "a lighthouse", "--no-wait"])

        assert result.exit_code == 0
        assert not status_route.called

    def test_generate_rejects_guidance_scale(self) -> None:
        result = runner.invoke(app, ["generate", "x", "--guidance-scale", "11"])
        assert result.exit_code != 0

    def test_status(self, api) -> None:
        api.get(f"{SEEDREAM_ENDPOINT}/abc").mock(
            return_value=httpx.Response(
                200, json={"data": {"task_id": "abc", "status": "IN_PROGRESS"}}
            )
        )
        result = runner.invoke(app, ["status", "abc"])
        assert result.exit_code == 0
        assert "IN_PROGRESS" in result.stdout

    def test_search_json(self, api) -> None:
        api.get(RESOURCES_ENDPOINT).mock(
            return_value=httpx.Response(
                200,
                json={
                    "data": [{"id": 1, "title": "Cat"}],
                    "meta": {"pagination": {"total": 12}},
                },
            )
        )
        result = runner.invoke(app, ["search", "cat", "--limit", "1", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["total"] == 12
        assert data["resources"][0]["id"] == 1

    def test_vendor_error_exit_code(self, api) -> None:
        api.get(f"{SEEDREAM_ENDPOINT}/abc").mock(return_value=httpx.Response(500, text="boom"))
        result = runner.invoke(app, ["status", "abc"])
        assert result.exit_code == 1

    def test_missing_key(self, api, monkeypatch) -> None:
        monkeypatch.delenv("FREEPIK_API_KEY")
        monkeypatch.chdir(os.path.dirname(__file__))
        result = runner.invoke(app, ["status", "abc"])
        assert result.exit_code == 2
        assert not api.calls

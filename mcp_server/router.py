"""Transport-agnostic tool router.

The router maps a tool call (name + raw arguments + session API key) onto a
registered tool: validate, dispatch to the Freepik client, optionally poll,
and format the outcome as an MCP CallToolResult. All failures except an
unknown tool name come back as error-flagged results; nothing escapes to
the transport.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from mcp import types
from pydantic import ValidationError

from freepik_seedream.client import FreepikClient
from freepik_seedream.config import Settings, get_settings
from freepik_seedream.errors import ConfigurationError, FreepikError
from mcp_server.errors import (
    MCPError,
    UnknownToolError,
    configuration_error,
    from_exception,
    from_validation_error,
)
from mcp_server.tools import TOOLS, PollPolicy, ToolSpec

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], FreepikClient]


def success_result(text: str) -> types.CallToolResult:
    """Wrap success text as a tool result."""
    return types.CallToolResult(content=[types.TextContent(type="text", text=text)])


def error_result(error: MCPError) -> types.CallToolResult:
    """Wrap a structured error as an error-flagged tool result."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=error.to_text())],
        structuredContent={"error": error.to_dict()},
        isError=True,
    )


class ToolRouter:
    """Validates and dispatches tool calls.

    Args:
        settings: Effective settings; supplies poll policy and client defaults.
        client_factory: Builds a FreepikClient for an API key. Defaults to a
            client owning its own HTTP connection pool.
        tools: Tool registry, defaults to every registered tool.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client_factory: ClientFactory | None = None,
        tools: dict[str, ToolSpec[Any]] | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._client_factory = client_factory or self._default_client
        self._tools = tools if tools is not None else TOOLS
        self.poll_policy = PollPolicy(
            max_attempts=self.settings.poll_max_attempts,
            interval=self.settings.poll_interval,
        )

    def _default_client(self, api_key: str) -> FreepikClient:
        return FreepikClient(
            api_key,
            base_url=self.settings.base_url,
            timeout=self.settings.request_timeout,
        )

    def list_tools(self) -> list[types.Tool]:
        """Describe every registered tool."""
        return [spec.to_tool() for spec in self._tools.values()]

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    async def call_tool(
        self,
        name: str,
        arguments: dict[str, Any] | None,
        *,
        api_key: str | None,
        config_error: str | None = None,
    ) -> types.CallToolResult:
        """Run one tool call.

        Args:
            name: Tool name.
            arguments: Raw JSON arguments.
            api_key: API key bound to the calling session.
            config_error: Configuration problem recorded for the session;
                when set, the call fails without contacting the vendor.

        Returns:
            CallToolResult, error-flagged on failure.

        Raises:
            UnknownToolError: If no tool is registered under name.
        """
        spec = self._tools.get(name)
        if spec is None:
            logger.warning("Unknown tool requested: %s", name)
            raise UnknownToolError(name)

        if config_error or not api_key:
            return error_result(
                configuration_error(config_error or "No Freepik API key configured")
            )

        try:
            args = spec.arguments.model_validate(arguments or {})
        except ValidationError as e:
            logger.info("Rejected arguments for %s: %d error(s)", name, e.error_count())
            return error_result(from_validation_error(name, e))

        logger.info("Calling tool %s", name)
        try:
            async with self._client_factory(api_key) as client:
                text = await spec.handler(client, args, self.poll_policy)
        except ConfigurationError as e:
            return error_result(configuration_error(str(e)))
        except FreepikError as e:
            logger.warning("Tool %s failed: %s", name, e)
            return error_result(from_exception(e))
        except Exception as e:
            logger.exception("Unexpected error in tool %s", name)
            return error_result(from_exception(e))

        return success_result(text)


__all__ = [
    "ClientFactory",
    "ToolRouter",
    "error_result",
    "success_result",
]

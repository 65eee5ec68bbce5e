"""MCP server implementation for the stdio transport.

This module builds an MCP SDK low-level server whose tools/list and
tools/call handlers delegate to the shared ToolRouter, and runs it over
standard input/output. The HTTP transports live in the web package.
"""

from __future__ import annotations

import logging
from typing import Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from freepik_seedream import __version__
from freepik_seedream.config import Settings, get_settings
from mcp_server.router import ToolRouter
from mcp_server.rpc import SERVER_NAME
from mcp_server.session import Session, TransportKind, configure_session

logger = logging.getLogger(__name__)


class ToolCallError(Exception):
    """Carries the text of an error result through the SDK server.

    The SDK reports exceptions raised by a call_tool handler as results with
    ``isError`` set and the exception text as content.
    """


def stdio_session(settings: Settings) -> Session:
    """Build the single session served over stdio."""
    session = Session(session_id="stdio", transport=TransportKind.STDIO)
    return configure_session(session, settings)


def create_server(router: ToolRouter, session: Session) -> Server:
    """Create an SDK server bound to one session.

    Args:
        router: Tool router shared with the other transports.
        session: Session carrying the API key.

    Returns:
        Configured low-level Server.
    """
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return router.list_tools()

    # Arguments are validated by the router so errors keep their codes
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        result = await router.call_tool(
            name,
            arguments,
            api_key=session.api_key,
            config_error=session.config_error,
        )
        texts = [c for c in result.content if isinstance(c, types.TextContent)]
        if result.isError:
            raise ToolCallError("\n".join(t.text for t in texts))
        return texts

    return server


async def run_stdio(settings: Settings | None = None) -> None:
    """Serve MCP over stdin/stdout until the client disconnects."""
    settings = settings or get_settings()
    router = ToolRouter(settings)
    session = stdio_session(settings)
    server = create_server(router, session)

    logger.info("Serving %s %s over stdio", SERVER_NAME, __version__)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


__all__ = [
    "ToolCallError",
    "create_server",
    "run_stdio",
    "stdio_session",
]

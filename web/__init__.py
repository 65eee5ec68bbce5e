"""FastAPI web application for the Freepik Seedream MCP adapter.

This module provides the HTTP transports (streamable HTTP and SSE) plus
health and configuration endpoints.

All tool logic is delegated to the mcp_server router.
"""

from web.app import app, create_app

__all__ = ["app", "create_app"]

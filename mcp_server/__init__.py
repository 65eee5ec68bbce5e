"""MCP server exposing the Freepik Seedream tools.

This package implements the Model Context Protocol side of the adapter:
the tool registry, the transport-agnostic router, the JSON-RPC dispatcher
used by the HTTP transports, the session registry, and the stdio runtime.

MCP tools:
- Validate arguments before any vendor call
- Return error-flagged results with stable codes
- Map directly to FreepikClient operations
"""

from mcp_server.router import ToolRouter
from mcp_server.session import SessionRegistry

__all__ = ["SessionRegistry", "ToolRouter"]

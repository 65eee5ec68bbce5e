"""JSON-RPC message handling for the HTTP transports.

Both the SSE and the streamable HTTP endpoints hand decoded JSON-RPC
messages to ``handle_message`` together with the calling session, and send
back whatever it returns. Notifications produce no response.
"""

from __future__ import annotations

import logging
from typing import Any

from mcp import types
from mcp.shared.version import SUPPORTED_PROTOCOL_VERSIONS

from freepik_seedream import __version__
from mcp_server.errors import UnknownToolError
from mcp_server.router import ToolRouter
from mcp_server.session import Session

logger = logging.getLogger(__name__)

SERVER_NAME = "freepik-seedream-mcp"

JSONRPC_VERSION = "2.0"

# Server-defined JSON-RPC error code for unknown sessions
SESSION_NOT_FOUND = -32001


def error_response(
    request_id: Any, code: int, message: str, data: Any = None
) -> dict[str, Any]:
    """Build a JSON-RPC error envelope."""
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}


def result_response(request_id: Any, result: Any) -> dict[str, Any]:
    """Build a JSON-RPC result envelope from a dict or an MCP result model."""
    if hasattr(result, "model_dump"):
        result = result.model_dump(mode="json", by_alias=True, exclude_none=True)
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def is_initialize(message: Any) -> bool:
    return isinstance(message, dict) and message.get("method") == "initialize"


def negotiate_protocol_version(requested: Any) -> str:
    """Echo the client's protocol version if supported, else the latest."""
    if isinstance(requested, str) and requested in SUPPORTED_PROTOCOL_VERSIONS:
        return requested
    return types.LATEST_PROTOCOL_VERSION


def initialize_result(session: Session, params: dict[str, Any]) -> types.InitializeResult:
    """Record client details on the session and describe this server."""
    session.protocol_version = negotiate_protocol_version(params.get("protocolVersion"))
    client_info = params.get("clientInfo")
    session.client_info = client_info if isinstance(client_info, dict) else None

    instructions = None
    if session.config_error:
        instructions = (
            f"Configuration error: {session.config_error}. "
            "Tool calls will fail until a Freepik API key is supplied."
        )

    return types.InitializeResult(
        protocolVersion=session.protocol_version,
        capabilities=types.ServerCapabilities(
            tools=types.ToolsCapability(listChanged=False)
        ),
        serverInfo=types.Implementation(name=SERVER_NAME, version=__version__),
        instructions=instructions,
    )


async def handle_message(
    message: Any, session: Session, router: ToolRouter
) -> dict[str, Any] | None:
    """Dispatch one JSON-RPC message.

    Args:
        message: Decoded JSON body.
        session: Session the message belongs to.
        router: Tool router.

    Returns:
        The response envelope, or None for notifications and responses.
    """
    if not isinstance(message, dict) or message.get("jsonrpc") != JSONRPC_VERSION:
        request_id = message.get("id") if isinstance(message, dict) else None
        return error_response(request_id, types.INVALID_REQUEST, "Invalid Request")

    method = message.get("method")
    request_id = message.get("id")

    if method is None:
        # A client response to a server request; this server sends none
        return None
    if not isinstance(method, str):
        return error_response(request_id, types.INVALID_REQUEST, "Invalid Request")
    if "id" not in message:
        logger.debug("Notification %s on session %s", method, session.session_id)
        return None

    params = message.get("params")
    if params is None:
        params = {}
    if not isinstance(params, dict):
        return error_response(request_id, types.INVALID_PARAMS, "params must be an object")

    if method == "initialize":
        return result_response(request_id, initialize_result(session, params))

    if method == "ping":
        return result_response(request_id, {})

    if method == "tools/list":
        return result_response(
            request_id, types.ListToolsResult(tools=router.list_tools())
        )

    if method == "tools/call":
        name = params.get("name")
        arguments = params.get("arguments")
        if not isinstance(name, str) or not name:
            return error_response(request_id, types.INVALID_PARAMS, "Missing tool name")
        if arguments is not None and not isinstance(arguments, dict):
            return error_response(
                request_id, types.INVALID_PARAMS, "arguments must be an object"
            )
        try:
            result = await router.call_tool(
                name,
                arguments,
                api_key=session.api_key,
                config_error=session.config_error,
            )
        except UnknownToolError as e:
            return error_response(request_id, types.METHOD_NOT_FOUND, str(e))
        return result_response(request_id, result)

    return error_response(
        request_id, types.METHOD_NOT_FOUND, f"Unknown method: {method}"
    )


__all__ = [
    "JSONRPC_VERSION",
    "SERVER_NAME",
    "SESSION_NOT_FOUND",
    "error_response",
    "handle_message",
    "initialize_result",
    "is_initialize",
    "negotiate_protocol_version",
    "result_response",
]

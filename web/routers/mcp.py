"""Streamable HTTP transport endpoints.

- POST /mcp - JSON-RPC message; ``initialize`` without a session header
  opens a session and returns its id in the ``Mcp-Session-Id`` header
- DELETE /mcp - Close the session named by the header

Responses are plain JSON; the server never opens a stream on this endpoint.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Header, Query, Request, Response
from fastapi import status as http_status
from fastapi.responses import JSONResponse
from mcp import types

from freepik_seedream.config import Settings
from mcp_server.router import ToolRouter
from mcp_server.rpc import (
    SESSION_NOT_FOUND,
    error_response,
    handle_message,
    is_initialize,
)
from mcp_server.session import (
    SessionNotFoundError,
    SessionRegistry,
    TransportKind,
    configure_session,
)
from web.deps import get_app_settings, get_sessions, get_tool_router

logger = logging.getLogger(__name__)

MCP_SESSION_HEADER = "Mcp-Session-Id"

router = APIRouter()


def _request_id(message: Any) -> Any:
    return message.get("id") if isinstance(message, dict) else None


@router.post("")
async def post_message(
    request: Request,
    config: str | None = Query(None, description="Base64 JSON session configuration"),
    session_id: str | None = Header(None, alias=MCP_SESSION_HEADER),
    settings: Settings = Depends(get_app_settings),
    tool_router: ToolRouter = Depends(get_tool_router),
    sessions: SessionRegistry = Depends(get_sessions),
) -> Response:
    """Handle one JSON-RPC message."""
    try:
        message = json.loads(await request.body())
    except ValueError:
        return JSONResponse(
            error_response(None, types.PARSE_ERROR, "Parse error"),
            status_code=http_status.HTTP_400_BAD_REQUEST,
        )

    request_id = _request_id(message)

    if session_id:
        try:
            session = sessions.get(session_id)
        except SessionNotFoundError as e:
            return JSONResponse(
                error_response(request_id, SESSION_NOT_FOUND, str(e)),
                status_code=http_status.HTTP_404_NOT_FOUND,
            )
    elif is_initialize(message):
        session = sessions.create(TransportKind.STREAMABLE_HTTP)
        configure_session(session, settings, config)
    else:
        return JSONResponse(
            error_response(
                request_id,
                types.INVALID_REQUEST,
                "Bad Request: No valid session ID provided",
            ),
            status_code=http_status.HTTP_400_BAD_REQUEST,
        )

    headers = {MCP_SESSION_HEADER: session.session_id}
    try:
        reply = await handle_message(message, session, tool_router)
    except Exception as e:
        logger.exception("Unhandled error on session %s", session.session_id)
        return JSONResponse(
            error_response(request_id, types.INTERNAL_ERROR, "Internal error", str(e)),
            status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
            headers=headers,
        )

    if reply is None:
        return Response(status_code=http_status.HTTP_202_ACCEPTED, headers=headers)
    return JSONResponse(reply, headers=headers)


@router.delete("")
def delete_session(
    session_id: str | None = Header(None, alias=MCP_SESSION_HEADER),
    sessions: SessionRegistry = Depends(get_sessions),
) -> Response:
    """Terminate a session."""
    if not session_id:
        return JSONResponse(
            error_response(None, types.INVALID_REQUEST, "Missing Mcp-Session-Id header"),
            status_code=http_status.HTTP_400_BAD_REQUEST,
        )
    if not sessions.close(session_id):
        return JSONResponse(
            error_response(None, SESSION_NOT_FOUND, f"Session not found: {session_id}"),
            status_code=http_status.HTTP_404_NOT_FOUND,
        )
    return Response(status_code=http_status.HTTP_204_NO_CONTENT)

"""Server-Sent Events transport endpoints.

- GET /sse - Open an event stream; the first ``endpoint`` event names the
  message URL carrying the session token
- POST /messages?session_id=... - Submit a JSON-RPC message; the reply is
  pushed on the session's stream as a ``message`` event

Closing the stream removes the session. A tool call still running when that
happens completes normally and its reply is dropped.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, Response
from fastapi import status as http_status
from fastapi.responses import JSONResponse, StreamingResponse
from mcp import types

from freepik_seedream.config import Settings
from mcp_server.router import ToolRouter
from mcp_server.rpc import SESSION_NOT_FOUND, error_response, handle_message
from mcp_server.session import (
    Session,
    SessionNotFoundError,
    SessionRegistry,
    TransportKind,
    configure_session,
)
from web.deps import get_app_settings, get_sessions, get_tool_router

logger = logging.getLogger(__name__)

MESSAGES_PATH = "/messages"

# Seconds of silence before a keepalive comment is sent
KEEPALIVE_INTERVAL = 15.0

router = APIRouter()


def format_event(event: str, data: str) -> str:
    """Encode one SSE event."""
    return f"event: {event}\ndata: {data}\n\n"


async def event_stream(
    session: Session,
    sessions: SessionRegistry,
    keepalive: float = KEEPALIVE_INTERVAL,
) -> AsyncIterator[str]:
    """Yield the SSE frames of one session until it is closed."""
    assert session.outbox is not None
    try:
        yield format_event(
            "endpoint", f"{MESSAGES_PATH}?session_id={session.session_id}"
        )
        while True:
            try:
                message = await asyncio.wait_for(session.outbox.get(), timeout=keepalive)
            except asyncio.TimeoutError:
                yield ": keepalive\n\n"
                continue
            if message is None:
                break
            yield format_event("message", json.dumps(message, ensure_ascii=False))
    finally:
        sessions.close(session.session_id)


async def deliver(message: Any, session: Session, tool_router: ToolRouter) -> None:
    """Handle a message and push the reply onto the session stream."""
    try:
        reply = await handle_message(message, session, tool_router)
    except Exception as e:
        logger.exception("Unhandled error on session %s", session.session_id)
        request_id = message.get("id") if isinstance(message, dict) else None
        reply = error_response(request_id, types.INTERNAL_ERROR, "Internal error", str(e))

    if reply is not None and not session.send(reply):
        logger.info(
            "Session %s closed before its reply could be delivered",
            session.session_id,
        )


@router.get("/sse")
async def open_stream(
    config: str | None = Query(None, description="Base64 JSON session configuration"),
    settings: Settings = Depends(get_app_settings),
    sessions: SessionRegistry = Depends(get_sessions),
) -> StreamingResponse:
    """Open an SSE session."""
    session = sessions.create(TransportKind.SSE)
    configure_session(session, settings, config)
    return StreamingResponse(
        event_stream(session, sessions),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.post(MESSAGES_PATH)
async def post_message(
    request: Request,
    background_tasks: BackgroundTasks,
    session_id: str | None = Query(None),
    session_id_camel: str | None = Query(None, alias="sessionId"),
    tool_router: ToolRouter = Depends(get_tool_router),
    sessions: SessionRegistry = Depends(get_sessions),
) -> Response:
    """Accept a JSON-RPC message for an SSE session."""
    sid = session_id or session_id_camel
    if not sid:
        return JSONResponse(
            error_response(None, types.INVALID_REQUEST, "Missing session_id"),
            status_code=http_status.HTTP_400_BAD_REQUEST,
        )
    try:
        session = sessions.get(sid)
    except SessionNotFoundError as e:
        return JSONResponse(
            error_response(None, SESSION_NOT_FOUND, str(e)),
            status_code=http_status.HTTP_404_NOT_FOUND,
        )

    try:
        message = json.loads(await request.body())
    except ValueError:
        return JSONResponse(
            error_response(None, types.PARSE_ERROR, "Parse error"),
            status_code=http_status.HTTP_400_BAD_REQUEST,
        )

    background_tasks.add_task(deliver, message, session, tool_router)
    return Response("Accepted", status_code=http_status.HTTP_202_ACCEPTED)

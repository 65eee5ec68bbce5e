"""Session registry for the HTTP transports.

A session binds one MCP client connection to its API key and, for SSE, to
the queue feeding its event stream. The registry is an explicit object owned
by the transport (stored on the web app state) rather than a module-level
singleton. Everything runs on one event loop, so no locking is needed.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from freepik_seedream.config import Settings, resolve_api_key
from freepik_seedream.errors import ConfigurationError

logger = logging.getLogger(__name__)


class TransportKind(str, Enum):
    """Wire transport a session arrived on."""

    STDIO = "stdio"
    SSE = "sse"
    STREAMABLE_HTTP = "streamable-http"


class SessionNotFoundError(KeyError):
    """Raised when a request names a session that does not exist."""

    def __init__(self, session_id: str) -> None:
        super().__init__(session_id)
        self.session_id = session_id
        self.code = "session_not_found"

    def __str__(self) -> str:
        return f"Session not found: {self.session_id}"


@dataclass
class Session:
    """One client connection."""

    session_id: str
    transport: TransportKind
    api_key: str | None = None
    config_error: str | None = None
    protocol_version: str | None = None
    client_info: dict[str, Any] | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    closed: bool = False
    # SSE only: outgoing JSON-RPC messages, None ends the stream
    outbox: asyncio.Queue[dict[str, Any] | None] | None = None

    def send(self, message: dict[str, Any]) -> bool:
        """Queue a message for the SSE stream.

        Returns:
            False if the session has no stream or is closed; the message is
            dropped in that case.
        """
        if self.closed or self.outbox is None:
            return False
        self.outbox.put_nowait(message)
        return True


def configure_session(
    session: Session, settings: Settings, config_blob: str | None = None
) -> Session:
    """Bind the API key for a session, or record why there is none.

    A configuration problem does not prevent the session from opening; it is
    reported on every tool call instead.
    """
    try:
        session.api_key = resolve_api_key(settings, config_blob)
        session.config_error = None
    except ConfigurationError as e:
        logger.warning("Session %s: %s", session.session_id, e)
        session.api_key = None
        session.config_error = str(e)
    return session


class SessionRegistry:
    """Session-id to session mapping for the lifetime of a server."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def create(
        self,
        transport: TransportKind,
        *,
        api_key: str | None = None,
        config_error: str | None = None,
    ) -> Session:
        """Register a new session with a fresh id."""
        session = Session(
            session_id=uuid.uuid4().hex,
            transport=transport,
            api_key=api_key,
            config_error=config_error,
        )
        if transport is TransportKind.SSE:
            session.outbox = asyncio.Queue()
        self._sessions[session.session_id] = session
        logger.info(
            "Opened %s session %s (%d active)",
            transport.value,
            session.session_id,
            len(self._sessions),
        )
        return session

    def get(self, session_id: str) -> Session:
        """Look up a session.

        Raises:
            SessionNotFoundError: If the id is unknown or already closed.
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def close(self, session_id: str) -> bool:
        """Remove a session and end its stream.

        Returns:
            True if a session was removed.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.closed = True
        if session.outbox is not None:
            session.outbox.put_nowait(None)
        logger.info(
            "Closed session %s (%d active)", session_id, len(self._sessions)
        )
        return True

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)


__all__ = [
    "Session",
    "SessionNotFoundError",
    "SessionRegistry",
    "TransportKind",
    "configure_session",
]

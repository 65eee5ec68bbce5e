"""Dependencies for FastAPI route handlers.

The settings, the tool router, and the session registry are created once in
the application lifespan and stored on ``app.state``; these helpers hand
them to route handlers via dependency injection.
"""

from __future__ import annotations

from fastapi import Request

from freepik_seedream.config import Settings
from mcp_server.router import ToolRouter
from mcp_server.session import SessionRegistry


def get_app_settings(request: Request) -> Settings:
    """Get settings from app state."""
    settings: Settings = request.app.state.settings
    return settings


def get_tool_router(request: Request) -> ToolRouter:
    """Get the tool router from app state."""
    router: ToolRouter = request.app.state.tool_router
    return router


def get_sessions(request: Request) -> SessionRegistry:
    """Get the session registry from app state."""
    registry: SessionRegistry = request.app.state.sessions
    return registry

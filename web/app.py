"""FastAPI application factory and main app.

This module creates the FastAPI application with the MCP HTTP transports,
health and configuration routers, and the shared state they depend on.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from freepik_seedream import __version__
from freepik_seedream.client import FreepikClient
from freepik_seedream.config import Settings, get_settings
from mcp_server.router import ClientFactory, ToolRouter
from mcp_server.session import SessionRegistry
from web.routers import config, health, mcp, sse
from web.routers.mcp import MCP_SESSION_HEADER


def create_app(
    settings: Settings | None = None,
    client_factory: ClientFactory | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; loaded from the environment if omitted.
        client_factory: Optional FreepikClient factory. By default all
            sessions share one pooled httpx.AsyncClient.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Create the shared HTTP client and session registry."""
        http_client: httpx.AsyncClient | None = None
        factory = client_factory
        if factory is None:
            http_client = httpx.AsyncClient(timeout=settings.request_timeout)
            shared = http_client

            def shared_client(api_key: str) -> FreepikClient:
                return FreepikClient(
                    api_key,
                    base_url=settings.base_url,
                    timeout=settings.request_timeout,
                    http_client=shared,
                )

            factory = shared_client

        app.state.settings = settings
        app.state.tool_router = ToolRouter(settings, client_factory=factory)
        app.state.sessions = SessionRegistry()
        try:
            yield
        finally:
            app.state.sessions.close_all()
            if http_client is not None:
                await http_client.aclose()

    application = FastAPI(
        title="Freepik Seedream MCP",
        description="MCP adapter for Freepik Seedream 4 generation, editing "
        "and stock search",
        version=__version__,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[MCP_SESSION_HEADER],
    )

    # Include routers
    application.include_router(health.router, tags=["health"])
    application.include_router(config.router, prefix="/config", tags=["config"])
    application.include_router(mcp.router, prefix="/mcp", tags=["mcp"])
    application.include_router(sse.router, tags=["sse"])

    return application


# Create the default application instance
app = create_app()

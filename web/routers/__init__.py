"""Router modules for the FastAPI web app."""

from web.routers import config, health, mcp, sse

__all__ = ["config", "health", "mcp", "sse"]

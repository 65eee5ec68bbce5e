"""Health check endpoints."""

from fastapi import APIRouter

from freepik_seedream import __version__
from mcp_server.rpc import SERVER_NAME

router = APIRouter()


@router.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint.

    Returns:
        Health status with service name and version.
    """
    return {"status": "ok", "service": SERVER_NAME, "version": __version__}


@router.get("/")
def root() -> dict[str, str]:
    """Root endpoint, same document as /health."""
    return health()

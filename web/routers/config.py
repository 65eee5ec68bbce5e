"""Configuration endpoints."""

from typing import Any

from fastapi import APIRouter, Depends

from freepik_seedream.config import Settings
from web.deps import get_app_settings

router = APIRouter()


@router.get("")
def get_config(settings: Settings = Depends(get_app_settings)) -> dict[str, Any]:
    """Get effective configuration.

    Returns:
        Current configuration as JSON; the API key is reported only as set
        or unset.
    """
    return {
        "api_key_configured": settings.api_key_value() is not None,
        "base_url": settings.base_url,
        "request_timeout": settings.request_timeout,
        "poll_interval": settings.poll_interval,
        "poll_max_attempts": settings.poll_max_attempts,
        "host": settings.host,
        "port": settings.port,
        "log_level": settings.log_level,
    }

"""Health check router with real dependency connectivity checks."""

import asyncio
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from config.settings import Settings, get_settings
from core.dependencies import get_song_store, get_youtube_service
from core.exceptions import ConfigurationError
from youtube.service import YouTubeService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

CHECK_TIMEOUT = 3.0
CORE_SERVICES = {"song_store"}


async def _check_song_store(settings: Settings) -> str:
    """Ping the song table, reporting a missing connection config separately."""
    try:
        store = get_song_store(settings)
    except ConfigurationError:
        return "unconfigured"
    return "ok" if await store.check_api() else "error"


async def _check_youtube_api(youtube: YouTubeService) -> str:
    """Ping the YouTube API; without a key titles degrade rather than fail."""
    if not youtube.api_key:
        return "unavailable"
    return "ok" if await youtube.check_api() else "error"


async def _run_check(coro) -> str:
    """Run a single health check with a timeout."""
    try:
        return await asyncio.wait_for(coro, timeout=CHECK_TIMEOUT)
    except TimeoutError:
        return "timeout"


@router.get(
    "/health",
    summary="Health check",
    responses={
        200: {"description": "Service is healthy or degraded"},
        503: {"description": "Service is unhealthy (song store down or unconfigured)"},
    },
)
async def health_check(
    settings: Settings = Depends(get_settings),
    youtube: YouTubeService = Depends(get_youtube_service),
):
    """Health check with real connectivity probes for every dependency."""
    results = await asyncio.gather(
        _run_check(_check_song_store(settings)),
        _run_check(_check_youtube_api(youtube)),
    )

    services = {
        "song_store": results[0],
        "youtube_api": results[1],
    }

    core_ok = all(services[s] == "ok" for s in CORE_SERVICES)
    all_configured_ok = all(v in ("ok", "unavailable") for v in services.values())

    if core_ok and all_configured_ok:
        status = "healthy"
    elif core_ok:
        status = "degraded"
    else:
        status = "unhealthy"

    body = {
        "status": status,
        "version": settings.app_version,
        "services": services,
    }

    status_code = 200 if status in ("healthy", "degraded") else 503
    return JSONResponse(content=body, status_code=status_code)

"""Main application entry point for the Morning Song Board service."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request

from board.router import router as board_router
from config.settings import get_settings
from core.dependencies import (
    close_song_store,
    close_youtube_service,
    flush_posthog,
    get_song_store,
    shutdown_posthog,
)
from core.errors import register_error_handlers
from core.logging import setup_logging
from core.sentry import init_sentry
from routers.health import router as health_router

load_dotenv()

settings = get_settings()

init_sentry(
    dsn=settings.sentry_dsn,
    environment="production" if settings.log_level != "DEBUG" else "development",
    release=settings.app_version,
)

log_file = None
if settings.log_level != "DEBUG":
    log_dir = Path("/app/logs") if Path("/app/logs").exists() else Path("logs")
    log_file = log_dir / "morning-song-board.log"
setup_logging(level=settings.log_level, log_file=log_file)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan with proper startup and shutdown."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Board timezone: {settings.board_timezone}")
    logger.info(f"YouTube titles: {'configured' if settings.youtube_api_key else 'fallback only'}")

    # Missing connection values must stop startup, not the first request
    get_song_store(settings)

    yield

    logger.info("Shutting down application")
    shutdown_posthog()
    await close_song_store()
    await close_youtube_service()
    logger.info("All services shut down")


app = FastAPI(
    title=settings.app_name,
    description="Morning song board: today's scheduled songs and a requester's history",
    version=settings.app_version,
    lifespan=lifespan,
)

register_error_handlers(app)


@app.middleware("http")
async def posthog_flush_middleware(request: Request, call_next):
    """Flush PostHog events after each request to prevent data loss."""
    response = await call_next(request)
    flush_posthog()
    return response


app.include_router(health_router, prefix="", tags=["health"])
app.include_router(board_router, prefix="/api/v1", tags=["board"])

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )

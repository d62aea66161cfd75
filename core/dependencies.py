"""FastAPI dependency injection providers."""

import logging

from fastapi import Depends
from posthog import Posthog

from config.settings import Settings, get_settings
from core.exceptions import ConfigurationError
from songs.store import SongStore
from youtube.service import YouTubeService

logger = logging.getLogger(__name__)

# Module-level instances for lifecycle management
_song_store: SongStore | None = None
_youtube_service: YouTubeService | None = None
_posthog_client: Posthog | None = None


def create_song_store(settings: Settings) -> SongStore:
    """Build a song store from settings, failing fast on missing connection values.

    Args:
        settings: Application settings

    Returns:
        SongStore: A new, not yet connected store

    Raises:
        ConfigurationError: If SUPABASE_URL or SUPABASE_KEY is blank or unset
    """
    required = (
        ("SUPABASE_URL", settings.supabase_url),
        ("SUPABASE_KEY", settings.supabase_key),
    )
    for env_name, value in required:
        if not value or not value.strip():
            logger.error(f"{env_name} is missing. Check your .env and restart the service.")
            raise ConfigurationError(f"{env_name} not loaded", details={"setting": env_name})

    return SongStore(
        url=settings.supabase_url.strip(),
        key=settings.supabase_key.strip(),
        table=settings.songs_table,
        timeout=settings.http_timeout,
    )


def get_song_store(settings: Settings = Depends(get_settings)) -> SongStore:
    """Get the process-wide song store, creating it on first use.

    Args:
        settings: Application settings

    Returns:
        SongStore: The shared store instance

    Raises:
        ConfigurationError: If the store cannot be configured
    """
    global _song_store

    if _song_store is None:
        _song_store = create_song_store(settings)
        logger.info(f"Song store initialized (table: {settings.songs_table})")

    return _song_store


async def close_song_store() -> None:
    """Close the song store's HTTP client."""
    global _song_store
    if _song_store:
        await _song_store.close()
        _song_store = None


def get_youtube_service(settings: Settings = Depends(get_settings)) -> YouTubeService:
    """Get the YouTube service instance.

    A missing API key is logged but does not disable the service: lookups
    still run and fall back to the unknown-title sentinel.

    Args:
        settings: Application settings

    Returns:
        YouTubeService: The shared service instance
    """
    global _youtube_service

    if _youtube_service is None:
        if not settings.youtube_api_key:
            logger.warning("YOUTUBE_API_KEY not set - video titles will not resolve")
        _youtube_service = YouTubeService(
            settings.youtube_api_key,
            base_url=settings.youtube_api_base,
            timeout=settings.http_timeout,
        )
        logger.info("YouTube service initialized")

    return _youtube_service


async def close_youtube_service() -> None:
    """Close the YouTube service's HTTP client."""
    global _youtube_service
    if _youtube_service:
        await _youtube_service.close()
        _youtube_service = None


def get_posthog_client(settings: Settings = Depends(get_settings)) -> Posthog | None:
    """Get PostHog client instance.

    Args:
        settings: Application settings

    Returns:
        Optional[Posthog]: PostHog client if configured and enabled, None otherwise
    """
    global _posthog_client

    if not settings.enable_telemetry:
        logger.debug("Telemetry disabled")
        return None

    if not settings.posthog_api_key:
        logger.debug("POSTHOG_API_KEY not set - telemetry disabled")
        return None

    if _posthog_client is None:
        _posthog_client = Posthog(
            project_api_key=settings.posthog_api_key,
            host=settings.posthog_host,
        )
        logger.info(f"PostHog client initialized (host: {settings.posthog_host})")

    return _posthog_client


def flush_posthog() -> None:
    """Flush any buffered PostHog events."""
    global _posthog_client
    if _posthog_client:
        _posthog_client.flush()


def shutdown_posthog() -> None:
    """Shutdown PostHog client gracefully."""
    global _posthog_client
    if _posthog_client:
        _posthog_client.shutdown()
        _posthog_client = None
        logger.info("PostHog client shutdown")

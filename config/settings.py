"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Song store (Supabase/PostgREST) - Required at startup
    supabase_url: str | None = Field(None, description="Base URL of the hosted Supabase project")
    supabase_key: str | None = Field(
        None, description="Publishable (anon) API key for the Supabase project"
    )
    songs_table: str = Field(default="items", description="Table holding song requests")

    # YouTube Data API - Optional (titles fall back to a sentinel without it)
    youtube_api_key: str | None = Field(None, description="YouTube Data API v3 key")
    youtube_api_base: str = Field(
        default="https://www.googleapis.com/youtube/v3",
        description="Base URL of the YouTube Data API",
    )

    # Board Configuration
    default_requester: str = Field(
        default="30기 고동재",
        description="Requester whose history is shown when none is given",
    )
    board_timezone: str = Field(
        default="Asia/Seoul", description="IANA timezone that defines 'today' for the board"
    )
    http_timeout: float = Field(default=10.0, description="Timeout in seconds for outbound calls")

    # Application Configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=8000, description="Port to run the server on")
    log_level: str = Field(default="INFO", description="Logging level")

    # Feature Flags
    enable_telemetry: bool = Field(default=True, description="Enable PostHog telemetry")

    # PostHog Configuration
    posthog_api_key: str | None = Field(None, description="PostHog API key for telemetry")
    posthog_host: str = Field(default="https://us.i.posthog.com", description="PostHog host URL")

    # Sentry Configuration
    sentry_dsn: str | None = Field(None, description="Sentry DSN for error tracking")

    # Application Metadata
    app_name: str = Field(default="Morning-Song-Board", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Unit test fixtures."""

from contextlib import contextmanager
from unittest.mock import Mock

import pytest

from config.settings import Settings


@contextmanager
def override_deps(app, overrides):
    """Set FastAPI dependency overrides and clear them on exit.

    Args:
        app: The FastAPI application.
        overrides: A dict mapping dependency functions to their replacement values.
    """

    def _make_override(val):
        return lambda: val

    for dep_fn, provider in overrides.items():
        app.dependency_overrides[dep_fn] = _make_override(provider)
    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def mock_settings(monkeypatch):
    """Settings with safe test defaults (no real keys/DSNs)."""
    monkeypatch.setenv("SUPABASE_URL", "https://test.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "test-key")
    monkeypatch.setenv("YOUTUBE_API_KEY", "")
    monkeypatch.setenv("SENTRY_DSN", "")
    monkeypatch.setenv("POSTHOG_API_KEY", "")
    monkeypatch.setenv("ENABLE_TELEMETRY", "false")
    return Settings(
        supabase_url="https://test.supabase.co",
        supabase_key="test-key",
        youtube_api_key=None,
        sentry_dsn=None,
        posthog_api_key=None,
        enable_telemetry=False,
        default_requester="30기 고동재",
        board_timezone="Asia/Seoul",
    )


@pytest.fixture
def mock_posthog_client():
    """Mock PostHog client."""
    client = Mock()
    client.capture = Mock()
    client.flush = Mock()
    client.shutdown = Mock()
    return client


@pytest.fixture(autouse=True)
def reset_call_stats():
    """Reset the per-request call stats ContextVar between tests."""
    from core.telemetry import _call_stats_var

    token = _call_stats_var.set(None)
    yield
    _call_stats_var.reset(token)

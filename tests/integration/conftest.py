"""Integration test fixtures.

Provides a real SongStore and YouTubeService whose HTTP traffic is served by
in-process emulations of the PostgREST table and the YouTube Data API.
"""

from datetime import datetime

import httpx
import pytest
import pytest_asyncio

from config.settings import Settings
from songs.store import SongStore
from youtube.service import YouTubeService

REQUESTER = "30기 고동재"

# ---------------------------------------------------------------------------
# Seed data -- the song request table
# ---------------------------------------------------------------------------

SEED_ROWS = [
    {"id": 1, "name": REQUESTER, "url": "https://youtu.be/aaa", "date": "2026-10-12T00:00:00.000Z"},
    {"id": 2, "name": "Someone", "url": "https://www.youtube.com/watch?v=bbb", "date": "2026-10-19T00:00:00.000Z"},
    {"id": 3, "name": REQUESTER, "url": "https://www.youtube.com/watch?v=ccc", "date": "2026-10-19T00:00:00.000Z"},
    {"id": 4, "name": REQUESTER, "url": "not a url", "date": "2026-10-26T00:00:00.000Z"},
    {"id": 5, "name": "Someone", "url": "https://youtu.be/eee", "date": "2026-10-20T00:00:00.000Z"},
]

VIDEO_TITLES = {
    "aaa": "First Song",
    "bbb": "Second Song",
    "ccc": "Third Song",
    "eee": "Fifth Song",
}


def _parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class FakeSongTable:
    """A tiny PostgREST emulation over a list of rows.

    Supports the eq/gte/lt filters, order and limit the store issues.
    """

    def __init__(self, rows):
        self.rows = [dict(r) for r in rows]
        self.requests: list[httpx.Request] = []
        self.fail_deletes = False

    def _matches(self, row, column, expr):
        op, _, value = expr.partition(".")
        if op == "eq":
            return str(row[column]) == value
        if op == "gte":
            return _parse_ts(row[column]) >= _parse_ts(value)
        if op == "lt":
            return _parse_ts(row[column]) < _parse_ts(value)
        raise AssertionError(f"unsupported operator {op}")

    def _select(self, params):
        rows = self.rows
        order = limit = None
        for key, value in params:
            if key in ("select",):
                continue
            if key == "order":
                order = value
            elif key == "limit":
                limit = int(value)
            else:
                rows = [r for r in rows if self._matches(r, key, value)]
        if order:
            column, _, direction = order.partition(".")
            key_fn = (lambda r: _parse_ts(r[column])) if column == "date" else (lambda r: r[column])
            rows = sorted(rows, key=key_fn, reverse=direction == "desc")
        if limit is not None:
            rows = rows[:limit]
        return rows

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.headers.get("apikey") != "test-key":
            return httpx.Response(401, json={"message": "Invalid API key"})

        params = list(request.url.params.multi_items())
        if request.method == "GET":
            return httpx.Response(200, json=self._select(params))
        if request.method == "DELETE":
            if self.fail_deletes:
                return httpx.Response(403, json={"message": "permission denied for table items"})
            doomed = self._select(params)
            self.rows = [r for r in self.rows if r not in doomed]
            return httpx.Response(200, json=doomed)
        return httpx.Response(405)


def youtube_handler(request: httpx.Request) -> httpx.Response:
    """Serve /videos lookups from VIDEO_TITLES."""
    video_id = request.url.params.get("id")
    title = VIDEO_TITLES.get(video_id)
    if title is None:
        return httpx.Response(200, json={"items": []})
    return httpx.Response(
        200,
        json={"items": [{"id": video_id, "snippet": {"title": title, "channelTitle": "Channel"}}]},
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def song_table():
    return FakeSongTable(SEED_ROWS)


@pytest_asyncio.fixture
async def song_store(song_table):
    """Real SongStore talking to the emulated table."""
    store = SongStore(
        url="https://test.supabase.co",
        key="test-key",
        transport=httpx.MockTransport(song_table.handler),
    )
    yield store
    await store.close()


@pytest_asyncio.fixture
async def youtube_service():
    """Real YouTubeService talking to the emulated API."""
    service = YouTubeService("test-youtube-key", transport=httpx.MockTransport(youtube_handler))
    yield service
    await service.close()


@pytest.fixture
def test_settings():
    """Settings with no real keys, telemetry disabled."""
    return Settings(
        supabase_url="https://test.supabase.co",
        supabase_key="test-key",
        youtube_api_key="test-youtube-key",
        sentry_dsn=None,
        posthog_api_key=None,
        enable_telemetry=False,
        default_requester=REQUESTER,
        board_timezone="Asia/Seoul",
    )


@pytest_asyncio.fixture
async def app_client(song_store, youtube_service, test_settings):
    """httpx AsyncClient over the app with real services and emulated backends."""
    from httpx import ASGITransport, AsyncClient

    from config.settings import get_settings
    from core.dependencies import get_posthog_client, get_song_store, get_youtube_service
    from main import app

    app.dependency_overrides[get_song_store] = lambda: song_store
    app.dependency_overrides[get_youtube_service] = lambda: youtube_service
    app.dependency_overrides[get_posthog_client] = lambda: None
    app.dependency_overrides[get_settings] = lambda: test_settings

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()

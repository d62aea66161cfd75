"""Shared test fixtures for pytest."""

from unittest.mock import AsyncMock

import pytest

from songs.store import SongStore
from tests.factories import make_song_request
from youtube.models import UNKNOWN_TITLE
from youtube.service import YouTubeService


async def _fake_title(video_id):
    return f"Title {video_id}" if video_id else UNKNOWN_TITLE


@pytest.fixture
def mock_song_store():
    """Create a mock song store."""
    store = AsyncMock(spec=SongStore)
    store.fetch_scheduled = AsyncMock(return_value=[])
    store.fetch_by_requester = AsyncMock(return_value=[])
    store.delete = AsyncMock(return_value=1)
    store.check_api = AsyncMock(return_value=True)
    store.close = AsyncMock()
    return store


@pytest.fixture
def mock_youtube_service():
    """Create a mock YouTube service whose titles echo the video id."""
    service = AsyncMock(spec=YouTubeService)
    service.api_key = "test-youtube-key"
    service.resolve_title = AsyncMock(side_effect=_fake_title)
    service.check_api = AsyncMock(return_value=True)
    service.close = AsyncMock()
    return service


@pytest.fixture
def sample_song_request():
    """Create a sample song request for testing."""
    return make_song_request(id=1, url="https://www.youtube.com/watch?v=dQw4w9WgXcQ")


@pytest.fixture
def sample_history():
    """Three past requests, highest id first as the store returns them."""
    return [
        make_song_request(id=3, url="https://youtu.be/ccc"),
        make_song_request(id=2, url="https://www.youtube.com/watch?v=bbb"),
        make_song_request(id=1, url="not a url"),
    ]

"""YouTube Data API service for resolving video titles."""

from __future__ import annotations

import logging
import time

import httpx
from pydantic import ValidationError

from core.exceptions import VideoLookupError
from core.sentry import add_breadcrumb
from core.telemetry import record_youtube_call
from youtube.models import UNKNOWN_TITLE, VideoListResponse, VideoTitleLookup

logger = logging.getLogger(__name__)

YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"
PROBE_VIDEO_ID = "dQw4w9WgXcQ"


class YouTubeService:
    """Title lookups against the YouTube Data API.

    Lookups are total: every failure is folded into a VideoTitleLookup and
    resolve_title() collapses that to UNKNOWN_TITLE, so callers never see an
    exception. A missing API key does not disable the service; requests
    still go out and come back unauthorized.
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = YOUTUBE_API_BASE,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key or None
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"User-Agent": "MorningSongBoard/1.0"},
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def check_api(self) -> bool:
        """Check YouTube API connectivity and key validity."""
        if not self.api_key:
            return False
        try:
            client = await self._get_client()
            resp = await client.get(
                "/videos", params={"id": PROBE_VIDEO_ID, "part": "id", "key": self.api_key}
            )
            return bool(resp.status_code == 200)
        except Exception:
            return False

    async def _fetch_title(self, video_id: str) -> str:
        """Fetch the snippet title for a video.

        Raises:
            VideoLookupError: When the response carries no usable title
            httpx.HTTPError: On transport failures
        """
        params = {"id": video_id, "part": "snippet"}
        if self.api_key:
            params["key"] = self.api_key

        client = await self._get_client()
        response = await client.get("/videos", params=params)

        if response.status_code != 200:
            raise VideoLookupError(
                f"YouTube API returned HTTP {response.status_code}",
                details={"video_id": video_id, "status_code": response.status_code},
            )

        try:
            payload = VideoListResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise VideoLookupError(
                "YouTube API returned a malformed body", details={"video_id": video_id}
            ) from e

        if not payload.items:
            raise VideoLookupError("Video not found", details={"video_id": video_id})

        snippet = payload.items[0].snippet
        if snippet is None or not snippet.title:
            raise VideoLookupError("Video has no snippet title", details={"video_id": video_id})

        return snippet.title

    async def lookup_title(self, video_id: str | None) -> VideoTitleLookup:
        """Look up a video's title, reporting misses as values instead of errors."""
        if not video_id:
            return VideoTitleLookup(video_id=None, error="no video id")

        add_breadcrumb("youtube", "lookup_title", {"video_id": video_id})
        start = time.perf_counter()
        try:
            title = await self._fetch_title(video_id)
        except VideoLookupError as e:
            logger.warning(f"Title lookup missed for {video_id}: {e.message}")
            lookup = VideoTitleLookup(video_id=video_id, error=e.message)
        except httpx.HTTPError as e:
            logger.warning(f"Title lookup failed for {video_id}: {type(e).__name__}: {e}")
            lookup = VideoTitleLookup(video_id=video_id, error=type(e).__name__)
        else:
            lookup = VideoTitleLookup(video_id=video_id, title=title)

        record_youtube_call((time.perf_counter() - start) * 1000, hit=lookup.found)
        return lookup

    async def resolve_title(self, video_id: str | None) -> str:
        """Resolve a display title, falling back to UNKNOWN_TITLE on any miss.

        No request is made when there is no video id.
        """
        lookup = await self.lookup_title(video_id)
        return lookup.title_or(UNKNOWN_TITLE)

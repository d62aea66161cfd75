"""Pydantic models for YouTube Data API responses and lookup results."""

from pydantic import BaseModel

UNKNOWN_TITLE = "Unknown Video"


class VideoSnippet(BaseModel):
    """The part of a video resource carrying its display metadata."""

    title: str | None = None
    channelTitle: str | None = None


class VideoResource(BaseModel):
    id: str | None = None
    snippet: VideoSnippet | None = None


class VideoListResponse(BaseModel):
    """Response of GET /videos. Unknown ids produce an empty item list."""

    items: list[VideoResource] = []


class VideoTitleLookup(BaseModel):
    """Outcome of a single title lookup: a title or the reason it missed."""

    video_id: str | None = None
    title: str | None = None
    error: str | None = None

    @property
    def found(self) -> bool:
        return bool(self.title)

    def title_or(self, default: str = UNKNOWN_TITLE) -> str:
        """Collapse the lookup to a display title."""
        return self.title if self.title else default

"""Models for the board view and its HTTP contract."""

from pydantic import BaseModel, computed_field

from songs.models import SongRequest
from youtube.urls import DEFAULT_THUMBNAIL

TODAY_SLOT_COUNT = 2

EMPTY_SLOT_TITLE = "아직 비어있음"
EMPTY_SLOT_NAME = "신청 대기 중…"
NO_REQUESTS_MESSAGE = "신청 내역이 없어요."
DELETE_FAILED_NOTICE = "삭제에 실패했어요."

# Static assets served by the front end
DELETE_ICON = "/delete.png"
SUBMIT_ICON = "/button.png"
HEADER_ICON = "/musicnote.png"


class TodaySong(SongRequest):
    """A request scheduled for today, with its resolved title and thumbnail."""

    title: str
    thumbnail: str


class PastSong(SongRequest):
    """A request from the requester's history, with its resolved title."""

    title: str


class TodaySlot(BaseModel):
    """One of the fixed presentation slots for today's songs."""

    slot: int
    song: TodaySong | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_title(self) -> str:
        return self.song.title if self.song and self.song.title else EMPTY_SLOT_TITLE

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_name(self) -> str:
        return self.song.name if self.song and self.song.name else EMPTY_SLOT_NAME

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_thumbnail(self) -> str:
        return self.song.thumbnail if self.song and self.song.thumbnail else DEFAULT_THUMBNAIL


class BoardResponse(BaseModel):
    """Everything needed to render the board for one requester."""

    requester: str
    today: list[TodaySlot]
    past: list[PastSong] = []
    empty_message: str | None = None
    delete_icon: str = DELETE_ICON
    submit_icon: str = SUBMIT_ICON
    header_icon: str = HEADER_ICON
    cache_stats: dict | None = None


class CancelResponse(BaseModel):
    """Outcome of cancelling one of the requester's past requests."""

    id: int | str
    deleted: bool
    deleted_count: int = 0

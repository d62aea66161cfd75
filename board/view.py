"""Board view: load orchestration and the optimistic delete flow.

The view owns three pieces of state (today's slots, the requester's
history, and the id of a delete in flight). Each is written only by its own
routine: load_today() writes today_songs, load_past() writes past_songs,
cancel() writes past_songs and pending_delete_id. Read failures leave the
previous state in place; a failed delete rolls the history back and raises a
notice for the user.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from zoneinfo import ZoneInfo

from board.enrichment import enrich_past, enrich_today, pad_today_slots
from board.models import (
    DELETE_FAILED_NOTICE,
    NO_REQUESTS_MESSAGE,
    TODAY_SLOT_COUNT,
    BoardResponse,
    PastSong,
    TodaySlot,
    TodaySong,
)
from board.mutation import TentativeMutation, remove_song, same_id
from board.schedule import today_range
from core.exceptions import SongStoreError
from core.sentry import capture_exception
from core.telemetry import RequestTelemetry
from songs.models import SongRequest
from songs.store import SongStore
from youtube.service import YouTubeService
from youtube.urls import extract_video_id

logger = logging.getLogger(__name__)


def _empty_slots() -> list[TodaySong | None]:
    return [None] * TODAY_SLOT_COUNT


@dataclass
class BoardState:
    """Mutable view state for one board."""

    today_songs: list[TodaySong | None] = field(default_factory=_empty_slots)
    past_songs: list[PastSong] = field(default_factory=list)
    pending_delete_id: int | str | None = None
    notices: list[str] = field(default_factory=list)


class BoardView:
    """Loads and mutates the board for a single requester."""

    def __init__(
        self,
        store: SongStore,
        youtube: YouTubeService,
        requester: str,
        tz: ZoneInfo | None = None,
        telemetry: RequestTelemetry | None = None,
        notify: Callable[[str], None] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the view.

        Args:
            store: Song store used for queries and deletes
            youtube: Service used to resolve video titles
            requester: Identity whose history is shown and may be deleted
            tz: Timezone defining "today"; defaults to UTC
            telemetry: Optional per-request telemetry tracker
            notify: Optional callback receiving user-facing notices
            clock: Optional source of the current time
        """
        self.store = store
        self.youtube = youtube
        self.requester = requester
        self.tz = tz or ZoneInfo("UTC")
        self.telemetry = telemetry or RequestTelemetry()
        self.notify = notify
        self.clock = clock or (lambda: datetime.now(self.tz))
        self.state = BoardState()
        self.last_deleted_count = 0

    async def load(self) -> None:
        """Load today's songs and the requester's history concurrently."""
        await asyncio.gather(self.load_today(), self.load_past())

    async def load_today(self) -> None:
        start, end = today_range(self.clock(), self.tz)
        try:
            with self.telemetry.track_step("today_query"):
                self.telemetry.record_api_call("song_store")
                rows = await self.store.fetch_scheduled(start, end, limit=TODAY_SLOT_COUNT)
        except SongStoreError as e:
            logger.error(f"Failed to load today's songs: {e.message}")
            return

        with self.telemetry.track_step("today_enrichment"):
            self._count_lookups(rows)
            enriched = await enrich_today(rows, self.youtube)

        self.state.today_songs = pad_today_slots(enriched)

    async def load_past(self) -> None:
        try:
            with self.telemetry.track_step("past_query"):
                self.telemetry.record_api_call("song_store")
                rows = await self.store.fetch_by_requester(self.requester)
        except SongStoreError as e:
            logger.error(f"Failed to load songs requested by '{self.requester}': {e.message}")
            return

        with self.telemetry.track_step("past_enrichment"):
            self._count_lookups(rows)
            self.state.past_songs = await enrich_past(rows, self.youtube)

    def _count_lookups(self, rows: list[SongRequest]) -> None:
        for row in rows:
            if extract_video_id(row.url):
                self.telemetry.record_api_call("youtube")

    def is_busy(self, song_id: int | str) -> bool:
        """Whether the delete control for a song should be disabled."""
        return same_id(self.state.pending_delete_id, song_id)

    async def cancel(self, song_id: int | str | None) -> bool:
        """Delete one of the requester's past songs, removing it optimistically.

        Returns:
            True when the backend confirmed the delete, False on a no-op or failure
        """
        if not song_id:
            return False

        self.state.pending_delete_id = song_id
        mutation = TentativeMutation(self.state.past_songs, remove_song(song_id))
        self.state.past_songs = mutation.projected

        try:
            with self.telemetry.track_step("delete"):
                self.telemetry.record_api_call("song_store")
                self.last_deleted_count = await self.store.delete(
                    song_id, requester=self.requester
                )
        except SongStoreError as e:
            logger.error(f"Failed to delete song {song_id}: {e.message}")
            capture_exception(e, context={"song_id": str(song_id), "requester": self.requester})
            self.state.past_songs = mutation.rollback()
            self._raise_notice(DELETE_FAILED_NOTICE)
            return False
        finally:
            self.state.pending_delete_id = None

        return True

    def _raise_notice(self, notice: str) -> None:
        self.state.notices.append(notice)
        if self.notify is not None:
            self.notify(notice)

    def to_response(self) -> BoardResponse:
        """Project the current state onto the HTTP contract."""
        return BoardResponse(
            requester=self.requester,
            today=[
                TodaySlot(slot=index, song=song)
                for index, song in enumerate(self.state.today_songs)
            ],
            past=list(self.state.past_songs),
            empty_message=None if self.state.past_songs else NO_REQUESTS_MESSAGE,
        )

"""Read-side enrichment of song requests with video titles and thumbnails."""

import asyncio
import logging

from board.models import TODAY_SLOT_COUNT, PastSong, TodaySong
from songs.models import SongRequest
from youtube.service import YouTubeService
from youtube.urls import extract_video_id, thumbnail_url

logger = logging.getLogger(__name__)


async def enrich_today_song(song: SongRequest, youtube: YouTubeService) -> TodaySong:
    video_id = extract_video_id(song.url)
    title = await youtube.resolve_title(video_id)
    return TodaySong(**song.model_dump(), title=title, thumbnail=thumbnail_url(video_id))


async def enrich_past_song(song: SongRequest, youtube: YouTubeService) -> PastSong:
    title = await youtube.resolve_title(extract_video_id(song.url))
    return PastSong(**song.model_dump(), title=title)


async def enrich_today(songs: list[SongRequest], youtube: YouTubeService) -> list[TodaySong]:
    """Enrich today's rows concurrently; returns once every lookup has settled."""
    enriched = await asyncio.gather(*(enrich_today_song(song, youtube) for song in songs))
    return list(enriched)


async def enrich_past(songs: list[SongRequest], youtube: YouTubeService) -> list[PastSong]:
    """Enrich history rows concurrently, preserving their order."""
    enriched = await asyncio.gather(*(enrich_past_song(song, youtube) for song in songs))
    return list(enriched)


def pad_today_slots(songs: list[TodaySong]) -> list[TodaySong | None]:
    """Pad (or trim) to exactly TODAY_SLOT_COUNT entries, empty slots as None."""
    if len(songs) > TODAY_SLOT_COUNT:
        logger.warning(f"Got {len(songs)} songs for today, showing the first {TODAY_SLOT_COUNT}")
    slots: list[TodaySong | None] = list(songs[:TODAY_SLOT_COUNT])
    while len(slots) < TODAY_SLOT_COUNT:
        slots.append(None)
    return slots

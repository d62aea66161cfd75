"""Board API router."""

import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from posthog import Posthog

from board.models import BoardResponse, CancelResponse
from board.view import BoardView
from config.settings import Settings, get_settings
from core.dependencies import get_posthog_client, get_song_store, get_youtube_service
from core.telemetry import RequestTelemetry, get_call_stats, init_call_stats
from songs.store import SongStore
from youtube.service import YouTubeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/board", tags=["board"])


def _board_timezone(settings: Settings) -> ZoneInfo:
    try:
        return ZoneInfo(settings.board_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown BOARD_TIMEZONE '{settings.board_timezone}', using UTC")
        return ZoneInfo("UTC")


@router.get(
    "",
    response_model=BoardResponse,
    summary="Load the morning song board",
    description="""
    Loads today's two scheduled songs and the requester's full request history.

    Both lists are fetched concurrently and every entry is enriched with its
    YouTube title (and, for today's songs, a thumbnail). A failed query leaves
    its list empty; a failed title lookup falls back to "Unknown Video".
    Today's list always has exactly two slots.
    """,
    responses={
        200: {"description": "Board loaded"},
        503: {"description": "Song store not configured"},
        500: {"description": "Internal server error"},
    },
)
async def get_board(
    requester: str | None = Query(None, description="Requester whose history to show"),
    settings: Settings = Depends(get_settings),
    store: SongStore = Depends(get_song_store),
    youtube: YouTubeService = Depends(get_youtube_service),
    posthog_client: Posthog | None = Depends(get_posthog_client),
):
    """Load the board for a requester."""
    init_call_stats()
    telemetry = RequestTelemetry()
    view = BoardView(
        store=store,
        youtube=youtube,
        requester=requester or settings.default_requester,
        tz=_board_timezone(settings),
        telemetry=telemetry,
    )

    try:
        await view.load()
    except Exception as e:
        logger.error(f"Board load failed: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from e

    response = view.to_response()
    response.cache_stats = get_call_stats()

    if posthog_client:
        telemetry.send_to_posthog(
            posthog_client,
            "board_loaded",
            {
                "today_count": sum(1 for slot in response.today if slot.song is not None),
                "past_count": len(response.past),
            },
        )

    return response


@router.delete(
    "/requests/{song_id}",
    response_model=CancelResponse,
    summary="Cancel one of the requester's song requests",
    responses={
        200: {"description": "Request deleted"},
        502: {"description": "Song store rejected the delete"},
        503: {"description": "Song store not configured"},
    },
)
async def cancel_request(
    song_id: str = Path(..., min_length=1, description="Identifier of the request"),
    requester: str | None = Query(None, description="Requester who owns the request"),
    settings: Settings = Depends(get_settings),
    store: SongStore = Depends(get_song_store),
    youtube: YouTubeService = Depends(get_youtube_service),
    posthog_client: Posthog | None = Depends(get_posthog_client),
):
    """Delete a past request."""
    init_call_stats()
    telemetry = RequestTelemetry()
    view = BoardView(
        store=store,
        youtube=youtube,
        requester=requester or settings.default_requester,
        tz=_board_timezone(settings),
        telemetry=telemetry,
    )

    deleted = await view.cancel(song_id)

    if posthog_client:
        telemetry.send_to_posthog(posthog_client, "board_cancel", {"deleted": deleted})

    if not deleted:
        raise HTTPException(status_code=502, detail=view.state.notices[-1])

    return CancelResponse(
        id=song_id,
        deleted=True,
        deleted_count=view.last_deleted_count,
    )

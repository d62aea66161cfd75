"""Date bounds for the board's 'today' query."""

from datetime import UTC, datetime, time, timedelta
from zoneinfo import ZoneInfo


def today_range(
    now: datetime | None = None,
    tz: ZoneInfo | None = None,
) -> tuple[datetime, datetime]:
    """Return [start, end) bounds covering the local calendar day.

    The bounds are the local date's midnights labelled as UTC, so a song
    scheduled for 2026-10-19 matches on that date wherever the board runs.

    Args:
        now: Reference instant; defaults to the current time
        tz: Timezone defining the local day; defaults to UTC

    Returns:
        Tuple of (start, end), both timezone-aware in UTC
    """
    tz = tz or ZoneInfo("UTC")
    now = now or datetime.now(tz)
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)

    local_date = now.astimezone(tz).date()
    start = datetime.combine(local_date, time.min, tzinfo=UTC)
    return start, start + timedelta(days=1)

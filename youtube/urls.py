"""Video identifier extraction and thumbnail derivation for YouTube URLs."""

from urllib.parse import parse_qs, urlparse

SHORT_LINK_HOST = "youtu.be"
THUMBNAIL_URL = "https://img.youtube.com/vi/{video_id}/hqdefault.jpg"
DEFAULT_THUMBNAIL = "/default-thumbnail.png"


def extract_video_id(url: str | None) -> str | None:
    """Extract the video identifier from a YouTube page URL.

    Short links (youtu.be/<id>) yield their first path segment; any other
    host yields the ``v`` query parameter. Anything that does not parse as
    an absolute URL yields None. Never raises.
    """
    if not isinstance(url, str) or not url.strip():
        return None

    try:
        parsed = urlparse(url.strip())
        host = parsed.hostname or ""
    except ValueError:
        return None

    if not parsed.scheme or not host:
        return None

    if SHORT_LINK_HOST in host:
        segment = parsed.path.lstrip("/").split("/", 1)[0]
        return segment or None

    values = parse_qs(parsed.query).get("v")
    if not values:
        return None
    return values[0] or None


def thumbnail_url(video_id: str | None) -> str:
    """Build the high-quality thumbnail URL for a video, or the fallback asset."""
    if not video_id:
        return DEFAULT_THUMBNAIL
    return THUMBNAIL_URL.format(video_id=video_id)

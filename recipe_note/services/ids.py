# recipe_note/services/ids.py
import re
import secrets
import string
from datetime import datetime, timezone
from typing import Optional

from recipe_note.services.types import SourceType

# Only the watch-query and short-link forms are recognized
_YT_QUERY_RE = re.compile(r"[?&]v=([^&#]+)")
_YT_SHORT_RE = re.compile(r"youtu\.be/([^?&#/]+)")

_BASE36 = string.digits + string.ascii_lowercase

RECIPE_ID_PATTERN = re.compile(r"^recipe_(?:\d{13,}|\d{8}_[0-9a-z]{4})$")

THUMBNAIL_URL_TEMPLATE = "https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


def extract_video_id(url: str) -> Optional[str]:
    """Video id from a YouTube URL, or None when the URL has none."""
    m = _YT_QUERY_RE.search(url) or _YT_SHORT_RE.search(url)
    return m.group(1) if m else None


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def thumbnail_url(source_url: str) -> str:
    video_id = extract_video_id(source_url)
    return THUMBNAIL_URL_TEMPLATE.format(video_id=video_id) if video_id else ""


def generate_recipe_id(source_type: SourceType, now: Optional[datetime] = None) -> str:
    """
    ``recipe_<epoch millis>`` for video recipes,
    ``recipe_<YYYYMMDD>_<4 base36 chars>`` for pasted text.
    """
    now = now or datetime.now(timezone.utc)
    if source_type == "youtube":
        return f"recipe_{int(now.timestamp() * 1000)}"
    suffix = "".join(secrets.choice(_BASE36) for _ in range(4))
    return f"recipe_{now.strftime('%Y%m%d')}_{suffix}"

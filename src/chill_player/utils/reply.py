"""Formatting helpers shared by the catalog adapter and Discord messages."""

from __future__ import annotations

from functools import cache

from chill_player.domain.shared.validators import VIDEO_ID_PATTERN, is_url

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
PLAYLIST_URL = "https://www.youtube.com/playlist?list={playlist_id}"
THUMBNAIL_URL = "https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"


@cache
def format_duration(seconds: int | float | None) -> str | None:
    """Render seconds as ``M:SS`` or ``H:MM:SS``; None for unknown durations."""
    if seconds is None or seconds < 0:
        return None

    total_seconds = int(seconds)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max(max_length - 1, 0)] + "…"


def watch_url(item_id: str) -> str:
    """Turn a bare video id into a watch URL; URLs pass through unchanged."""
    return item_id if is_url(item_id) else WATCH_URL.format(video_id=item_id)


def playlist_url(playlist_id: str) -> str:
    return playlist_id if is_url(playlist_id) else PLAYLIST_URL.format(playlist_id=playlist_id)


def thumbnail_url(video_id: str) -> str | None:
    if not VIDEO_ID_PATTERN.match(video_id):
        return None
    return THUMBNAIL_URL.format(video_id=video_id)

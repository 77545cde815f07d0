"""yt-dlp backed media catalog."""

from chill_player.infrastructure.catalog.ytdlp_catalog import YtDlpCatalog, classify_download_error

__all__ = [
    "YtDlpCatalog",
    "classify_download_error",
]

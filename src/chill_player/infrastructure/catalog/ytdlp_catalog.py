"""MediaCatalog implementation using yt-dlp for search, resolution and playlists."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, cast

from pydantic import ValidationError
from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError

from chill_player.application.interfaces.media_catalog import MediaCatalog
from chill_player.config.settings import CatalogSettings
from chill_player.domain.playback.entities import Item, PlaylistListing, ResolvedTrack
from chill_player.domain.playback.value_objects import ResolveFailureKind
from chill_player.domain.shared.exceptions import (
    EmptyResultError,
    PlaylistNotFoundError,
    ResolveError,
    SearchUnavailableError,
)
from chill_player.domain.shared.messages import ErrorMessages, LogTemplates
from chill_player.infrastructure.catalog.models import (
    CACHE_MAX_SIZE,
    CacheEntry,
    YtDlpFlatEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)
from chill_player.utils.reply import (
    format_duration,
    playlist_url,
    thumbnail_url,
    truncate,
    watch_url,
)

logger = logging.getLogger(__name__)

DEFAULT_PLAYLIST_TITLE = "Playlist"

_FORMAT_MARKERS = ("requested format",)
_NOT_FOUND_MARKERS = ("private video", "is private")
_RESTRICTED_MARKERS = (
    "age-restricted",
    "age restricted",
    "confirm your age",
    "inappropriate for some users",
    "sign in",
    "consent",
    "members-only",
    "members only",
    "join this channel",
    "http error 403",
)
_MISSING_MARKERS = ("unavailable", "not available", "does not exist", "removed", "404")

_RESOLVE_MESSAGES = {
    ResolveFailureKind.NOT_FOUND: ErrorMessages.RESOLVE_NOT_FOUND,
    ResolveFailureKind.RESTRICTED: ErrorMessages.RESOLVE_RESTRICTED,
    ResolveFailureKind.UNRESOLVABLE: ErrorMessages.RESOLVE_UNRESOLVABLE,
}


def classify_download_error(message: str) -> ResolveFailureKind:
    """Map yt-dlp error text onto a resolve failure kind.

    Private videos count as not found even though yt-dlp asks to sign in.
    """
    text = message.lower()
    if any(marker in text for marker in _FORMAT_MARKERS):
        return ResolveFailureKind.UNRESOLVABLE
    if any(marker in text for marker in _NOT_FOUND_MARKERS):
        return ResolveFailureKind.NOT_FOUND
    if any(marker in text for marker in _RESTRICTED_MARKERS):
        return ResolveFailureKind.RESTRICTED
    if any(marker in text for marker in _MISSING_MARKERS):
        return ResolveFailureKind.NOT_FOUND
    return ResolveFailureKind.UNRESOLVABLE


class YtDlpCatalog(MediaCatalog):

    def __init__(self, settings: CatalogSettings | None = None) -> None:
        self._settings = settings or CatalogSettings()
        self._cache: dict[str, CacheEntry] = {}
        self._base_opts = YtDlpOpts(socket_timeout=self._settings.socket_timeout)

    # ── Option helpers ──────────────────────────────────────────────

    def _search_opts(self) -> YtDlpOpts:
        return self._base_opts.model_copy(update={"extract_flat": True})

    def _resolve_opts(self) -> YtDlpOpts:
        return self._base_opts.model_copy(update={"format": self._settings.ytdlp_format})

    def _playlist_opts(self) -> YtDlpOpts:
        return self._base_opts.model_copy(
            update={
                "noplaylist": False,
                "extract_flat": "in_playlist",
                "playlistend": self._settings.playlist_limit,
            }
        )

    def _extract(self, target: str, opts: YtDlpOpts) -> dict[str, Any] | None:
        params = cast(Any, opts.model_dump(exclude_none=True))
        with YoutubeDL(params=params) as ydl:
            data = ydl.extract_info(target, download=False)
        return dict(data) if isinstance(data, dict) else None

    # ── Cache ───────────────────────────────────────────────────────

    def _cached(self, key: str, now: float) -> ResolvedTrack | None:
        entry = self._cache.get(key)
        if entry is None:
            return None
        if now - entry.cached_at < self._settings.cache_ttl_seconds:
            logger.debug(LogTemplates.CACHE_HIT, key)
            return entry.track
        self._cache.pop(key, None)
        return None

    def _store(self, key: str, track: ResolvedTrack, now: float) -> None:
        if self._settings.cache_ttl_seconds <= 0:
            return
        self._cache[key] = CacheEntry(track=track, cached_at=now)
        if len(self._cache) <= CACHE_MAX_SIZE:
            return
        ttl = self._settings.cache_ttl_seconds
        expired = [k for k, entry in self._cache.items() if now - entry.cached_at >= ttl]
        for k in expired:
            self._cache.pop(k, None)
        if expired:
            logger.debug(LogTemplates.CACHE_EXPIRED_CLEANED, len(expired))

    def clear_cache(self) -> None:
        self._cache.clear()

    # ── Sync extraction (runs in a worker thread) ───────────────────

    def _search_sync(self, query: str) -> list[Item]:
        term = f"{query} {self._settings.search_suffix}".strip()
        data = self._extract(f"ytsearch{self._settings.search_limit}:{term}", self._search_opts())
        if data is None:
            return []
        return self._entries_to_items(data.get("entries"))

    def _resolve_sync(self, item_id: str) -> ResolvedTrack:
        now = time.time()
        cached = self._cached(item_id, now)
        if cached is not None:
            return cached

        try:
            data = self._extract(watch_url(item_id), self._resolve_opts())
        except DownloadError as exc:
            kind = classify_download_error(str(exc))
            logger.warning(LogTemplates.YTDLP_FAILED_RESOLVE, item_id, kind.value)
            raise ResolveError(item_id, kind, _RESOLVE_MESSAGES[kind]) from exc

        if data is None:
            raise ResolveError(
                item_id,
                ResolveFailureKind.NOT_FOUND,
                _RESOLVE_MESSAGES[ResolveFailureKind.NOT_FOUND],
            )

        try:
            info = YtDlpTrackInfo.model_validate(data)
            stream_url = info.best_audio_url()
            if not stream_url:
                logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, info.title)
                raise ResolveError(
                    item_id,
                    ResolveFailureKind.UNRESOLVABLE,
                    _RESOLVE_MESSAGES[ResolveFailureKind.UNRESOLVABLE],
                )
            track = ResolvedTrack(
                stream_url=stream_url,
                title=truncate(info.title, 500),
                duration_seconds=min(info.duration or 0, 86_400),
            )
        except ValidationError as exc:
            logger.warning(LogTemplates.YTDLP_MALFORMED_DATA, item_id, exc)
            raise ResolveError(
                item_id,
                ResolveFailureKind.UNRESOLVABLE,
                _RESOLVE_MESSAGES[ResolveFailureKind.UNRESOLVABLE],
            ) from exc

        self._store(item_id, track, now)
        logger.info(LogTemplates.YTDLP_RESOLVED, item_id, track.title, track.duration_seconds)
        return track

    def _list_playlist_sync(self, playlist_id: str) -> PlaylistListing:
        data = self._extract(playlist_url(playlist_id), self._playlist_opts())
        if data is None:
            raise PlaylistNotFoundError(playlist_id)

        raw_title = data.get("title")
        title = raw_title.strip() if isinstance(raw_title, str) and raw_title.strip() else ""
        items = self._entries_to_items(data.get("entries"))
        return PlaylistListing(
            title=truncate(title or DEFAULT_PLAYLIST_TITLE, 500),
            items=tuple(items[: self._settings.playlist_limit]),
        )

    @staticmethod
    def _entries_to_items(entries: Any) -> list[Item]:
        if entries is None:
            return []
        items: list[Item] = []
        for raw in entries:
            if not isinstance(raw, dict):
                continue
            entry = YtDlpFlatEntry.model_validate(raw)
            if not entry.is_playable or entry.id is None:
                continue
            items.append(
                Item(
                    id=entry.id,
                    title=truncate(entry.title, 500),
                    duration_label=format_duration(entry.duration),
                    thumbnail_ref=entry.thumbnail_url or thumbnail_url(entry.id),
                )
            )
        return items

    # ── MediaCatalog ────────────────────────────────────────────────

    async def search(self, query: str) -> list[Item]:
        logger.info(LogTemplates.YTDLP_SEARCH, query)
        try:
            items = await asyncio.to_thread(self._search_sync, query)
        except (DownloadError, ValidationError) as exc:
            logger.warning(LogTemplates.YTDLP_FAILED_SEARCH, query)
            raise SearchUnavailableError(ErrorMessages.SEARCH_FAILED.format(error=exc)) from exc
        logger.info(LogTemplates.YTDLP_SEARCH_RESULTS, len(items), query)
        return items

    async def resolve(self, item_id: str) -> ResolvedTrack:
        logger.debug(LogTemplates.YTDLP_RESOLVING, item_id)
        return await asyncio.to_thread(self._resolve_sync, item_id)

    async def list_playlist(self, playlist_id: str) -> PlaylistListing:
        logger.info(LogTemplates.YTDLP_LISTING_PLAYLIST, playlist_id)
        try:
            listing = await asyncio.to_thread(self._list_playlist_sync, playlist_id)
        except (DownloadError, ValidationError) as exc:
            logger.warning(LogTemplates.YTDLP_FAILED_PLAYLIST, playlist_id, exc)
            raise PlaylistNotFoundError(
                playlist_id, ErrorMessages.PLAYLIST_LOAD_FAILED.format(error=exc)
            ) from exc

        if listing.is_empty:
            raise EmptyResultError(ErrorMessages.PLAYLIST_EMPTY)
        logger.info(
            LogTemplates.YTDLP_PLAYLIST_LISTED, playlist_id, listing.title, len(listing.items)
        )
        return listing

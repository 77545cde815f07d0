"""Pydantic models for yt-dlp data and configuration.

These are infrastructure-specific models for parsing external yt-dlp data,
caching resolved streams, and configuring yt-dlp options.
"""

from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chill_player.domain.playback.entities import ResolvedTrack
from chill_player.domain.shared.types import (
    NonEmptyStr,
    NonNegativeFloat,
    NonNegativeInt,
    PositiveInt,
)

CACHE_MAX_SIZE: Final[int] = 500
DEFAULT_RETRIES: Final[int] = 3
DEFAULT_TITLE: Final[str] = "Unknown Title"
UNAVAILABLE_TITLES: Final[frozenset[str]] = frozenset({"[Private video]", "[Deleted video]"})


def _coerce_non_negative_int(v: Any) -> int | None:
    if v is None:
        return None
    try:
        val = int(v)
    except (TypeError, ValueError):
        return None
    return val if val >= 0 else None


def _coerce_optional_str(v: Any) -> str | None:
    if not isinstance(v, str) or not v.strip():
        return None
    return v


class AudioFormatInfo(BaseModel):
    """A single format entry from yt-dlp extraction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr | None = None
    acodec: NonEmptyStr | None = None
    vcodec: NonEmptyStr | None = None
    abr: NonNegativeFloat | None = None

    @field_validator("url", "acodec", "vcodec", mode="before")
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        return _coerce_optional_str(v)

    @field_validator("abr", mode="before")
    @classmethod
    def _coerce_abr(cls, v: Any) -> float | None:
        try:
            return float(v) if v is not None and float(v) >= 0 else None
        except (TypeError, ValueError):
            return None

    @property
    def is_audio_only(self) -> bool:
        has_audio = self.acodec not in (None, "none")
        return bool(self.url) and has_audio and self.vcodec in (None, "none")


class YtDlpTrackInfo(BaseModel):
    """Trimmed yt-dlp extraction result for a single video.

    Extra fields from yt-dlp are silently ignored. Before-validators coerce
    garbage from external yt-dlp data gracefully.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: NonEmptyStr | None = None
    url: NonEmptyStr | None = None
    title: NonEmptyStr = DEFAULT_TITLE
    duration: NonNegativeInt | None = None
    thumbnail: NonEmptyStr | None = None
    formats: list[AudioFormatInfo] = Field(default_factory=list)

    @field_validator("id", "url", "thumbnail", mode="before")
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        return _coerce_optional_str(v)

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        return _coerce_optional_str(v) or DEFAULT_TITLE

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> int | None:
        return _coerce_non_negative_int(v)

    def best_audio_url(self) -> str | None:
        """The selected stream URL, or the highest-bitrate audio-only format."""
        if self.url:
            return self.url
        audio_formats = [f for f in self.formats if f.is_audio_only]
        if not audio_formats:
            return None
        return max(audio_formats, key=lambda f: f.abr or 0.0).url


class YtDlpFlatEntry(BaseModel):
    """A flat search or playlist entry (metadata only, no stream)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: NonEmptyStr | None = None
    title: NonEmptyStr = DEFAULT_TITLE
    duration: NonNegativeInt | None = None
    thumbnails: list[dict[str, Any]] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str | None:
        return _coerce_optional_str(v)

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        return _coerce_optional_str(v) or DEFAULT_TITLE

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> int | None:
        return _coerce_non_negative_int(v)

    @field_validator("thumbnails", mode="before")
    @classmethod
    def _coerce_thumbnails(cls, v: Any) -> list[dict[str, Any]]:
        if not isinstance(v, list):
            return []
        return [t for t in v if isinstance(t, dict)]

    @property
    def is_playable(self) -> bool:
        return self.id is not None and self.title not in UNAVAILABLE_TITLES

    @property
    def thumbnail_url(self) -> str | None:
        for thumb in reversed(self.thumbnails):
            url = thumb.get("url")
            if isinstance(url, str) and url.startswith(("http://", "https://")):
                return url
        return None


class CacheEntry(BaseModel):
    """Cached stream resolution with its creation timestamp."""

    model_config = ConfigDict(frozen=True)

    track: ResolvedTrack
    cached_at: NonNegativeFloat


class YtDlpOpts(BaseModel):
    """Typed yt-dlp configuration options passed to YoutubeDL."""

    model_config = ConfigDict(frozen=True)

    quiet: bool = True
    no_warnings: bool = True
    noprogress: bool = True
    noplaylist: bool = True
    retries: PositiveInt = DEFAULT_RETRIES
    socket_timeout: PositiveInt = 10
    format: NonEmptyStr | None = None
    skip_download: bool = True
    extract_flat: NonEmptyStr | bool = False
    playlistend: PositiveInt | None = None

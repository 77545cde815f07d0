"""Core domain entities for the playback bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from chill_player.domain.shared.types import (
    DurationSeconds,
    HttpUrlStr,
    NonEmptyStr,
    TrackTitleStr,
)


class Item(BaseModel):
    """A selectable catalog entry from search or playlist results.

    Identity is the ``id``; two items with the same id are the same item
    even if their display metadata differs.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    id: NonEmptyStr
    title: TrackTitleStr
    duration_label: NonEmptyStr | None = None
    thumbnail_ref: HttpUrlStr | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class ResolvedTrack(BaseModel):
    """A playable stream for an item, valid only for the current session."""

    model_config = ConfigDict(frozen=True, strict=True)

    stream_url: HttpUrlStr
    title: TrackTitleStr
    duration_seconds: DurationSeconds = 0

    @property
    def duration_formatted(self) -> str:
        """Format duration as MM:SS or HH:MM:SS."""
        hours, remainder = divmod(self.duration_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)

        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"


class StagedTrack(BaseModel):
    """The next track to hand to the primary channel once the announcement is over."""

    model_config = ConfigDict(frozen=True, strict=True)

    stream_url: HttpUrlStr
    title: TrackTitleStr

    @classmethod
    def from_resolution(cls, resolved: ResolvedTrack, fallback_title: str) -> StagedTrack:
        """Build a staged track, preferring the resolved title over the listing title."""
        return cls(stream_url=resolved.stream_url, title=resolved.title or fallback_title)


class PlaylistListing(BaseModel):
    """Title and ordered items of a remote playlist."""

    # Not strict: adapters may hand over a list, which is coerced to a tuple.
    model_config = ConfigDict(frozen=True)

    title: TrackTitleStr = "Playlist"
    items: tuple[Item, ...] = Field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.items


class SpeechClip(BaseModel):
    """A synthesized announcement that an audio channel can load."""

    model_config = ConfigDict(frozen=True, strict=True)

    source: NonEmptyStr
    text: NonEmptyStr

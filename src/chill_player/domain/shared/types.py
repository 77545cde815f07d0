"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the project is defined here once,
so models can simply annotate their fields::

    from chill_player.domain.shared.types import NonEmptyStr, TrackTitleStr

    class MyModel(BaseModel):
        id: NonEmptyStr
        title: TrackTitleStr
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Numeric constraints ─────────────────────────────────────────────

DiscordSnowflake = Annotated[int, Field(gt=0, lt=2**64)]
"""Positive integer that fits a Discord snowflake (1 … 2^64-1)."""

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""

NonNegativeFloat = Annotated[float, Field(ge=0.0)]
"""Float >= 0.0."""

VolumeFloat = Annotated[float, Field(ge=0.0, le=2.0)]
"""Audio volume multiplier in [0.0, 2.0]."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Track title: 1-500 characters."""

HttpUrlStr = Annotated[str, Field(pattern=r"^https?://")]
"""String that starts with http:// or https://."""


# ── Domain-specific numeric constraints ─────────────────────────────

DurationSeconds = Annotated[int, Field(ge=0, le=86_400)]
"""Track duration in seconds: 0 … 86 400 (24 hours)."""

SearchLimit = Annotated[int, Field(gt=0, le=25)]
"""Search results per query: 1 … 25 (a Discord select menu holds 25 options)."""

PlaylistLimit = Annotated[int, Field(gt=0, le=200)]
"""Playlist entries fetched per listing: 1 … 200."""

SpeechMaxLength = Annotated[int, Field(gt=0, le=4096)]
"""Announcement text limit in characters."""

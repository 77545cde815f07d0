"""
Playback Bounded Context

Domain model for catalog items, staged tracks, playlist traversal and the
phases of a playback session.
"""

from chill_player.domain.playback.cursor import PlaylistCursor
from chill_player.domain.playback.entities import (
    Item,
    PlaylistListing,
    ResolvedTrack,
    SpeechClip,
    StagedTrack,
)
from chill_player.domain.playback.value_objects import (
    ChannelRole,
    MediaErrorCode,
    PlaylistPosition,
    ResolveFailureKind,
    SessionPhase,
    SignalKind,
    TerminalSignal,
)

__all__ = [
    # Entities
    "Item",
    "PlaylistListing",
    "ResolvedTrack",
    "SpeechClip",
    "StagedTrack",
    # Cursor
    "PlaylistCursor",
    # Value Objects
    "ChannelRole",
    "MediaErrorCode",
    "PlaylistPosition",
    "ResolveFailureKind",
    "SessionPhase",
    "SignalKind",
    "TerminalSignal",
]

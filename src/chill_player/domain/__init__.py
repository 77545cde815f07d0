"""
Domain Layer

Pure domain model with no infrastructure dependencies:

- playback: items, staged tracks, playlist cursor, session phases
- shared: error taxonomy, message catalog, validators, constrained types
"""

from chill_player.domain.playback import Item, PlaylistCursor, SessionPhase, StagedTrack
from chill_player.domain.shared import DomainError

__all__ = [
    "DomainError",
    "Item",
    "PlaylistCursor",
    "SessionPhase",
    "StagedTrack",
]

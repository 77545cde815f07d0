"""
Shared Kernel

Cross-cutting types, messages, validators and the error taxonomy used by
every other package.
"""

from chill_player.domain.shared.exceptions import (
    DomainError,
    EmptyPlaylistError,
    EmptyResultError,
    ExhaustedPlaylistError,
    InputInvalidError,
    PlaybackFailureError,
    PlaylistNotFoundError,
    ResolveError,
    SearchUnavailableError,
    SynthesisUnavailableError,
    TextTooLongError,
    UpstreamUnavailableError,
)
from chill_player.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates

__all__ = [
    # Exceptions
    "DomainError",
    "EmptyPlaylistError",
    "EmptyResultError",
    "ExhaustedPlaylistError",
    "InputInvalidError",
    "PlaybackFailureError",
    "PlaylistNotFoundError",
    "ResolveError",
    "SearchUnavailableError",
    "SynthesisUnavailableError",
    "TextTooLongError",
    "UpstreamUnavailableError",
    # Messages
    "DiscordUIMessages",
    "ErrorMessages",
    "LogTemplates",
]

"""Base exception classes for domain-level errors."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chill_player.domain.playback.value_objects import MediaErrorCode, ResolveFailureKind


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InputInvalidError(DomainError):
    """Raised when user input is rejected before any async work starts."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="INPUT_INVALID")
        self.field = field


class EmptyPlaylistError(DomainError):
    """Raised when a playlist cursor is constructed from zero items."""

    def __init__(self, message: str = "Playlist must contain at least one item") -> None:
        super().__init__(message, code="EMPTY_PLAYLIST")


class EmptyResultError(DomainError):
    """Raised when a search or playlist listing returned nothing playable."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="EMPTY_RESULT")


class UpstreamUnavailableError(DomainError):
    """Raised when an external collaborator (catalog, speech) fails."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message, code=code or "UPSTREAM_UNAVAILABLE")


class SearchUnavailableError(UpstreamUnavailableError):
    def __init__(self, message: str) -> None:
        super().__init__(message, code="SEARCH_UNAVAILABLE")


class ResolveError(UpstreamUnavailableError):
    """Raised when an item cannot be turned into a playable stream."""

    def __init__(self, item_id: str, kind: ResolveFailureKind, message: str | None = None) -> None:
        msg = message or f"Could not resolve '{item_id}': {kind.value}"
        super().__init__(msg, code=f"RESOLVE_{kind.name}")
        self.item_id = item_id
        self.kind = kind


class PlaylistNotFoundError(UpstreamUnavailableError):
    def __init__(self, playlist_id: str, message: str | None = None) -> None:
        msg = message or f"Playlist '{playlist_id}' not found"
        super().__init__(msg, code="PLAYLIST_NOT_FOUND")
        self.playlist_id = playlist_id


class SynthesisUnavailableError(UpstreamUnavailableError):
    def __init__(self, message: str) -> None:
        super().__init__(message, code="SYNTHESIS_UNAVAILABLE")


class TextTooLongError(UpstreamUnavailableError):
    def __init__(self, length: int, max_length: int) -> None:
        super().__init__(
            f"Text length {length} exceeds maximum of {max_length} characters",
            code="TEXT_TOO_LONG",
        )
        self.length = length
        self.max_length = max_length


class PlaybackFailureError(DomainError):
    """Raised (or reported) when an audio channel cannot play its source."""

    def __init__(self, error_code: MediaErrorCode, message: str | None = None) -> None:
        super().__init__(message or error_code.description, code="PLAYBACK_FAILURE")
        self.error_code = error_code


class ExhaustedPlaylistError(DomainError):
    """Raised when every item in one full playlist cycle failed."""

    def __init__(self, playlist_title: str, item_count: int) -> None:
        super().__init__(
            f"No playable items in playlist '{playlist_title}' ({item_count} tried)",
            code="EXHAUSTED_PLAYLIST",
        )
        self.playlist_title = playlist_title
        self.item_count = item_count

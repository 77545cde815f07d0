"""Immutable value objects for the playback bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SessionPhase(Enum):
    """Phase of a guild's playback session.

    State transitions:
    - IDLE -> LOADING (selection)
    - LOADING -> ANNOUNCEMENT_PLAYING (track staged, announcement started)
    - LOADING -> PRIMARY_PLAYING (announcement bypassed)
    - ANNOUNCEMENT_PLAYING -> PRIMARY_PLAYING (announcement finished or failed)
    - PRIMARY_PLAYING -> LOADING (playlist advance)
    - PRIMARY_PLAYING -> FINISHED (single item ended)
    - Any -> FAILED (unrecoverable error)
    - Any -> IDLE (stop)
    """

    IDLE = "idle"
    LOADING = "loading"
    ANNOUNCEMENT_PLAYING = "announcement_playing"
    PRIMARY_PLAYING = "primary_playing"
    FINISHED = "finished"
    FAILED = "failed"

    @property
    def is_loading(self) -> bool:
        return self is SessionPhase.LOADING

    @property
    def is_audible(self) -> bool:
        return self in {SessionPhase.ANNOUNCEMENT_PLAYING, SessionPhase.PRIMARY_PLAYING}

    @property
    def is_terminal(self) -> bool:
        return self in {SessionPhase.FINISHED, SessionPhase.FAILED}


class ChannelRole(Enum):
    """Which of the two audio channels a signal belongs to."""

    ANNOUNCEMENT = "announcement"
    PRIMARY = "primary"


class SignalKind(Enum):
    ENDED = "ended"
    ERROR = "error"


class MediaErrorCode(Enum):
    """Reasons a channel playback attempt can fail."""

    ABORTED = "aborted"
    NETWORK = "network"
    DECODE = "decode"
    SRC_NOT_SUPPORTED = "src_not_supported"
    NOT_ALLOWED = "not_allowed"
    UNKNOWN = "unknown"

    @property
    def description(self) -> str:
        return _MEDIA_ERROR_DESCRIPTIONS[self]


_MEDIA_ERROR_DESCRIPTIONS: dict[MediaErrorCode, str] = {
    MediaErrorCode.ABORTED: "Playback aborted.",
    MediaErrorCode.NETWORK: "Network error caused playback failure.",
    MediaErrorCode.DECODE: "Audio decoding error.",
    MediaErrorCode.SRC_NOT_SUPPORTED: "Audio format not supported.",
    MediaErrorCode.NOT_ALLOWED: "Playback blocked. Make sure I can join and speak in voice.",
    MediaErrorCode.UNKNOWN: "An unknown playback error occurred.",
}


class ResolveFailureKind(Enum):
    """Reasons an item cannot be resolved to a stream."""

    NOT_FOUND = "not_found"
    RESTRICTED = "restricted"
    UNRESOLVABLE = "unresolvable"


@dataclass(frozen=True)
class PlaylistPosition:
    """1-based position within a playlist, for display."""

    position: int
    total: int

    def __post_init__(self) -> None:
        if self.total < 1:
            raise ValueError("Playlist total must be at least 1")
        if not 1 <= self.position <= self.total:
            raise ValueError(f"Position {self.position} outside 1..{self.total}")

    def __str__(self) -> str:
        return f"{self.position}/{self.total}"


@dataclass(frozen=True)
class TerminalSignal:
    """The single terminal event ending one channel playback attempt."""

    role: ChannelRole
    kind: SignalKind
    attempt: int
    error_code: MediaErrorCode | None = None

    def __post_init__(self) -> None:
        if self.kind is SignalKind.ERROR and self.error_code is None:
            object.__setattr__(self, "error_code", MediaErrorCode.UNKNOWN)

    @property
    def is_error(self) -> bool:
        return self.kind is SignalKind.ERROR

    @classmethod
    def ended(cls, role: ChannelRole, attempt: int) -> TerminalSignal:
        return cls(role=role, kind=SignalKind.ENDED, attempt=attempt)

    @classmethod
    def error(cls, role: ChannelRole, attempt: int, code: MediaErrorCode) -> TerminalSignal:
        return cls(role=role, kind=SignalKind.ERROR, attempt=attempt, error_code=code)

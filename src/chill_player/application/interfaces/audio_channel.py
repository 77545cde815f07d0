"""Port interface for a single audio output channel.

A channel plays one source at a time and reports exactly one terminal
signal per playback attempt. Loading a new source starts a new attempt;
signals carry the attempt number so that listeners can tell a current
attempt from a superseded one.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from chill_player.domain.playback.value_objects import ChannelRole, TerminalSignal
from chill_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

TerminalCallback = Callable[[TerminalSignal], Awaitable[None]]


class AudioChannel(ABC):
    """Interface for an audio output that never advances on its own."""

    def __init__(self, role: ChannelRole, guild_id: int = 0) -> None:
        self._role = role
        self._guild_id = guild_id
        self._attempt = 0
        self._terminal_callback: TerminalCallback | None = None

    @property
    def role(self) -> ChannelRole:
        return self._role

    @property
    def guild_id(self) -> int:
        return self._guild_id

    @property
    def attempt(self) -> int:
        """Number of the current playback attempt (0 before the first load)."""
        return self._attempt

    def set_terminal_callback(self, callback: TerminalCallback | None) -> None:
        self._terminal_callback = callback

    def load(self, url: str) -> int:
        """Set the next source without playing it and return the new attempt number."""
        self._attempt += 1
        self._on_load(url, self._attempt)
        logger.debug(
            LogTemplates.CHANNEL_LOADED, self._role.value, self._guild_id, self._attempt, url
        )
        return self._attempt

    @abstractmethod
    def _on_load(self, url: str, attempt: int) -> None:
        """Replace the pending source, discarding any previous attempt."""
        ...

    @abstractmethod
    async def play(self) -> None:
        """Begin or resume playback of the loaded source.

        Raises:
            PlaybackFailureError: If playback cannot start at all.
        """
        ...

    @abstractmethod
    async def pause(self) -> None:
        """Stop producing audio without discarding the loaded source."""
        ...

    async def _emit(self, signal: TerminalSignal) -> None:
        """Deliver a terminal signal to the registered callback."""
        logger.debug(
            LogTemplates.CHANNEL_TERMINAL,
            self._role.value,
            self._guild_id,
            signal.attempt,
            signal.kind.value,
        )
        callback = self._terminal_callback
        if callback is None:
            logger.warning(LogTemplates.CHANNEL_NO_CALLBACK, self._role.value, self._guild_id)
            return
        try:
            await callback(signal)
        except Exception:
            logger.exception(LogTemplates.CHANNEL_CALLBACK_ERROR, self._role.value, self._guild_id)

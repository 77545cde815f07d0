"""Port interface for text-to-speech announcements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from chill_player.domain.shared.types import NonEmptyStr, SpeechMaxLength

if TYPE_CHECKING:
    from ...domain.playback.entities import SpeechClip

DEFAULT_MAX_LENGTH = 200


class SpeechSynthesizer(ABC):
    """Interface for turning short announcement text into playable audio."""

    @property
    def max_length(self) -> int:
        return DEFAULT_MAX_LENGTH

    @abstractmethod
    async def synthesize(
        self, text: NonEmptyStr, max_length: SpeechMaxLength = DEFAULT_MAX_LENGTH
    ) -> "SpeechClip":
        """Synthesize *text* into a clip.

        Raises:
            TextTooLongError: If *text* is longer than *max_length*.
            SynthesisUnavailableError: If the speech service fails.
        """
        ...

    async def close(self) -> None:
        """Release any clips or clients held by the synthesizer."""
        return None

"""Port interface for rendering playback state to the user."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.playback.value_objects import PlaylistPosition, SessionPhase


class PresentationSink(ABC):
    """Receives state changes from a playback orchestrator."""

    @abstractmethod
    async def on_phase_change(
        self,
        phase: "SessionPhase",
        title: str | None,
        position: "PlaylistPosition | None",
    ) -> None:
        ...

    @abstractmethod
    async def on_error(self, message: str, is_fatal: bool) -> None:
        """Show an error. Fatal errors persist; non-fatal ones are transient."""
        ...

    @abstractmethod
    async def on_loading_state_change(self, is_loading: bool, message: str | None = None) -> None:
        ...

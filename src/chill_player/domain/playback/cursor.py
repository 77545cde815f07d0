"""Playlist cursor: an ordered, endlessly looping position over playlist items."""

from __future__ import annotations

from collections.abc import Iterable

from chill_player.domain.playback.entities import Item, PlaylistListing
from chill_player.domain.playback.value_objects import PlaylistPosition
from chill_player.domain.shared.exceptions import EmptyPlaylistError


class PlaylistCursor:
    """Tracks the current position within a playlist, wrapping past the end.

    The playlist has no natural end: advancing from the last item returns to
    the first one. An empty playlist cannot be constructed.
    """

    __slots__ = ("_current_index", "_items", "_title")

    def __init__(self, title: str, items: Iterable[Item]) -> None:
        self._title = title
        self._items: tuple[Item, ...] = tuple(items)
        if not self._items:
            raise EmptyPlaylistError()
        self._current_index = 0

    @classmethod
    def from_listing(cls, listing: PlaylistListing) -> PlaylistCursor:
        return cls(listing.title, listing.items)

    @property
    def title(self) -> str:
        return self._title

    @property
    def items(self) -> tuple[Item, ...]:
        return self._items

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def position(self) -> PlaylistPosition:
        return PlaylistPosition(position=self._current_index + 1, total=len(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def current(self) -> Item:
        return self._items[self._current_index]

    def advance(self) -> Item:
        """Move to the next item, looping back to the first after the last."""
        self._current_index = (self._current_index + 1) % len(self._items)
        return self._items[self._current_index]

    def __repr__(self) -> str:
        return f"PlaylistCursor(title={self._title!r}, position={self.position})"

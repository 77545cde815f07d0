"""Port interface for searching and resolving catalog media."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from chill_player.domain.shared.types import NonEmptyStr

if TYPE_CHECKING:
    from ...domain.playback.entities import Item, PlaylistListing, ResolvedTrack


class MediaCatalog(ABC):
    """Interface for the remote media catalog (search, stream resolution, playlists)."""

    @abstractmethod
    async def search(self, query: NonEmptyStr) -> list["Item"]:
        """Search the catalog.

        Raises:
            SearchUnavailableError: If the catalog cannot be queried.
        """
        ...

    @abstractmethod
    async def resolve(self, item_id: NonEmptyStr) -> "ResolvedTrack":
        """Resolve an item id or URL to a playable stream.

        Raises:
            ResolveError: With kind NOT_FOUND, RESTRICTED or UNRESOLVABLE.
        """
        ...

    @abstractmethod
    async def list_playlist(self, playlist_id: NonEmptyStr) -> "PlaylistListing":
        """List the items of a playlist.

        Raises:
            PlaylistNotFoundError: If the playlist cannot be listed.
        """
        ...

"""Query for searching the media catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ...domain.playback.entities import Item
from ...domain.shared.exceptions import EmptyResultError
from ...domain.shared.messages import ErrorMessages
from ...domain.shared.validators import validate_search_query

if TYPE_CHECKING:
    from ..interfaces.media_catalog import MediaCatalog


class SearchCatalogQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str


class SearchResults(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str
    items: tuple[Item, ...]

    def __len__(self) -> int:
        return len(self.items)


class SearchCatalogHandler:
    """Validates the query, searches the catalog and rejects empty results.

    Raises:
        InputInvalidError: For an empty or whitespace-only query.
        SearchUnavailableError: When the catalog cannot be reached.
        EmptyResultError: When the search found nothing.
    """

    def __init__(self, *, catalog: MediaCatalog) -> None:
        self._catalog = catalog

    async def handle(self, query: SearchCatalogQuery) -> SearchResults:
        text = validate_search_query(query.query)
        items = await self._catalog.search(text)
        if not items:
            raise EmptyResultError(ErrorMessages.NO_SEARCH_RESULTS.format(query=text))
        return SearchResults(query=text, items=tuple(items))

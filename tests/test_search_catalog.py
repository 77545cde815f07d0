"""Tests for the catalog search query handler."""

import pytest

from conftest import FakeCatalog, make_item

from chill_player.application.queries import SearchCatalogHandler, SearchCatalogQuery
from chill_player.domain.shared.exceptions import (
    EmptyResultError,
    InputInvalidError,
    SearchUnavailableError,
)


@pytest.fixture
def handler(catalog: FakeCatalog) -> SearchCatalogHandler:
    return SearchCatalogHandler(catalog=catalog)


class TestSearchCatalogHandler:
    """Tests for SearchCatalogHandler.handle."""

    async def test_returns_items(self, handler, catalog):
        catalog.search_results = [make_item("a"), make_item("b")]

        results = await handler.handle(SearchCatalogQuery(query="  rainy  "))

        assert results.query == "rainy"
        assert len(results) == 2
        assert catalog.search_calls == ["rainy"]

    async def test_blank_query_never_searches(self, handler, catalog):
        with pytest.raises(InputInvalidError):
            await handler.handle(SearchCatalogQuery(query="   "))

        assert catalog.search_calls == []

    async def test_empty_results(self, handler, catalog):
        with pytest.raises(EmptyResultError, match="rainy"):
            await handler.handle(SearchCatalogQuery(query="rainy"))

    async def test_catalog_failure_propagates(self, handler, catalog):
        async def broken(query: str):
            raise SearchUnavailableError("down")

        catalog.search = broken

        with pytest.raises(SearchUnavailableError):
            await handler.handle(SearchCatalogQuery(query="rainy"))

"""
Application Queries

Read-side handlers that answer questions without changing playback state.
"""

from chill_player.application.queries.search_catalog import (
    SearchCatalogHandler,
    SearchCatalogQuery,
    SearchResults,
)

__all__ = [
    "SearchCatalogHandler",
    "SearchCatalogQuery",
    "SearchResults",
]

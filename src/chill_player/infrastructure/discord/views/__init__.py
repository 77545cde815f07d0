"""Discord UI views and components."""

from __future__ import annotations

from chill_player.infrastructure.discord.views.base_view import BaseInteractiveView
from chill_player.infrastructure.discord.views.search_results_view import (
    SearchResultSelect,
    SearchResultsView,
)

__all__ = [
    "BaseInteractiveView",
    "SearchResultSelect",
    "SearchResultsView",
]

"""Select menu listing catalog search results."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING

import discord

from chill_player.domain.shared.messages import DiscordUIMessages
from chill_player.infrastructure.discord.guards.voice_guards import (
    check_user_in_voice,
    send_ephemeral,
)
from chill_player.infrastructure.discord.views.base_view import BaseInteractiveView
from chill_player.utils.reply import truncate

if TYPE_CHECKING:
    from ....domain.playback.entities import Item

logger = logging.getLogger(__name__)

# Discord allows at most 25 options in a select menu
MAX_OPTIONS = 25

_VIEW_TIMEOUT = 300.0

SelectHandler = Callable[[discord.Interaction, "Item"], Awaitable[None]]


def build_options(items: Sequence[Item]) -> list[discord.SelectOption]:
    options: list[discord.SelectOption] = []
    seen: set[str] = set()
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        options.append(
            discord.SelectOption(
                label=truncate(item.title, 100),
                value=item.id,
                description=item.duration_label,
            )
        )
        if len(options) == MAX_OPTIONS:
            break
    return options


class SearchResultSelect(discord.ui.Select["SearchResultsView"]):
    def __init__(self, items: Sequence[Item]) -> None:
        super().__init__(
            placeholder=DiscordUIMessages.SEARCH_PLACEHOLDER,
            min_values=1,
            max_values=1,
            options=build_options(items),
        )

    async def callback(self, interaction: discord.Interaction) -> None:
        assert self.view is not None
        view: SearchResultsView = self.view

        item = view.item_for(self.values[0])
        if item is None:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_SELECTION_EXPIRED)
            return
        await view.on_select(interaction, item)


class SearchResultsView(BaseInteractiveView):
    """Shows search results; picking one hands the item to ``on_select``."""

    def __init__(
        self,
        *,
        guild_id: int,
        items: Sequence[Item],
        on_select: SelectHandler,
        timeout: float | None = _VIEW_TIMEOUT,
    ) -> None:
        super().__init__(timeout=timeout)
        self._guild_id = guild_id
        self._items = {item.id: item for item in items}
        self._on_select = on_select
        self.add_item(SearchResultSelect(items))

    def item_for(self, item_id: str) -> Item | None:
        return self._items.get(item_id)

    async def on_select(self, interaction: discord.Interaction, item: Item) -> None:
        await self._on_select(interaction, item)

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        return await check_user_in_voice(interaction, self._guild_id)

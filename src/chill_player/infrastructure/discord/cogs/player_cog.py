"""Slash-command cog for the chill player: search, play, playlist, next, stop, leave."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from chill_player.application.queries.search_catalog import SearchCatalogQuery
from chill_player.domain.playback.entities import Item
from chill_player.domain.shared.exceptions import (
    EmptyResultError,
    InputInvalidError,
    SearchUnavailableError,
)
from chill_player.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates
from chill_player.domain.shared.validators import (
    validate_item_id,
    validate_playlist_id,
    validate_search_query,
)
from chill_player.infrastructure.discord.guards.voice_guards import (
    ensure_voice,
    get_member,
    send_ephemeral,
)
from chill_player.infrastructure.discord.views.search_results_view import SearchResultsView
from chill_player.utils.reply import truncate

if TYPE_CHECKING:
    from ....application.services.orchestrator import PlaybackOrchestrator
    from ....config.container import Container

logger = logging.getLogger(__name__)


class PlayerCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    async def cog_unload(self) -> None:
        await self.container.session_registry.close_all()

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    async def _join_and_bind(self, interaction: discord.Interaction) -> bool:
        """Join the user's voice channel and post updates where the command was used.

        Expects the interaction to already be deferred.
        """
        if not await ensure_voice(interaction, self.container.voice_adapter):
            return False

        assert interaction.guild is not None
        if interaction.channel_id is not None:
            self.container.message_state_manager.bind_channel(
                interaction.guild.id, interaction.channel_id
            )
        return True

    def _session(self, guild_id: int) -> PlaybackOrchestrator:
        return self.container.session_registry.get_or_create(guild_id)

    async def _reject(self, interaction: discord.Interaction, command: str, message: str) -> None:
        logger.info(
            LogTemplates.COMMAND_REJECTED,
            command,
            interaction.guild.id if interaction.guild else None,
            message,
        )
        await send_ephemeral(interaction, message)

    # ─────────────────────────────────────────────────────────────────
    # Search
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="search", description="Search for chill music to play.")
    @app_commands.describe(query="What to search for")
    async def search(self, interaction: discord.Interaction, query: str) -> None:
        try:
            text = validate_search_query(query)
        except InputInvalidError as exc:
            await self._reject(interaction, "search", exc.message)
            return

        member = await get_member(interaction)
        if member is None:
            return
        assert interaction.guild is not None
        guild_id = interaction.guild.id

        await interaction.response.defer(ephemeral=True)
        try:
            results = await self.container.search_handler.handle(SearchCatalogQuery(query=text))
        except EmptyResultError as exc:
            await send_ephemeral(interaction, exc.message)
            return
        except SearchUnavailableError as exc:
            logger.warning(LogTemplates.COMMAND_SEARCH_FAILED, guild_id, exc.message)
            await send_ephemeral(
                interaction, DiscordUIMessages.ERROR_SEARCH_FAILED.format(error=exc.message)
            )
            return

        view = SearchResultsView(
            guild_id=guild_id,
            items=results.items,
            on_select=self._on_search_select,
        )
        message = await interaction.followup.send(
            DiscordUIMessages.SEARCH_RESULTS_HEADER.format(query=truncate(results.query, 80)),
            view=view,
            ephemeral=True,
            wait=True,
        )
        view.set_message(message)

    async def _on_search_select(self, interaction: discord.Interaction, item: Item) -> None:
        await interaction.response.defer(ephemeral=True)
        if not await self._join_and_bind(interaction):
            return

        assert interaction.guild is not None
        await interaction.followup.send(
            DiscordUIMessages.ACTION_SELECTED.format(title=truncate(item.title, 80)),
            ephemeral=True,
        )
        await self._session(interaction.guild.id).select_item(item)

    # ─────────────────────────────────────────────────────────────────
    # Play / Playlist
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="play", description="Play a single video by ID or URL.")
    @app_commands.describe(video="YouTube video ID or URL")
    async def play(self, interaction: discord.Interaction, video: str) -> None:
        try:
            item_id = validate_item_id(video)
        except InputInvalidError as exc:
            await self._reject(interaction, "play", exc.message)
            return

        await interaction.response.defer(ephemeral=True)
        if not await self._join_and_bind(interaction):
            return

        assert interaction.guild is not None
        await interaction.followup.send(
            DiscordUIMessages.ACTION_LOADING_TRACK.format(item_id=truncate(item_id, 80)),
            ephemeral=True,
        )
        item = Item(id=item_id, title=truncate(item_id, 500))
        await self._session(interaction.guild.id).select_item(item)

    @app_commands.command(name="playlist", description="Loop a playlist by ID or URL.")
    @app_commands.describe(playlist="YouTube playlist ID or URL")
    async def playlist(self, interaction: discord.Interaction, playlist: str) -> None:
        try:
            playlist_id = validate_playlist_id(playlist)
        except InputInvalidError as exc:
            await self._reject(interaction, "playlist", exc.message)
            return

        await interaction.response.defer(ephemeral=True)
        if not await self._join_and_bind(interaction):
            return

        assert interaction.guild is not None
        await interaction.followup.send(
            DiscordUIMessages.ACTION_LOADING_PLAYLIST.format(playlist_id=playlist_id),
            ephemeral=True,
        )
        await self._session(interaction.guild.id).select_playlist(playlist_id)

    # ─────────────────────────────────────────────────────────────────
    # Next / Stop / Leave
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="next", description="Skip to the next playlist item.")
    async def next(self, interaction: discord.Interaction) -> None:
        await interaction.response.defer(ephemeral=True)
        if not await self._join_and_bind(interaction):
            return

        assert interaction.guild is not None
        session = self.container.session_registry.get(interaction.guild.id)
        if session is None or session.playlist is None:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_NO_PLAYLIST)
            return

        await interaction.followup.send(DiscordUIMessages.ACTION_SKIPPED, ephemeral=True)
        await session.next()

    @app_commands.command(name="stop", description="Stop playback.")
    async def stop(self, interaction: discord.Interaction) -> None:
        member = await get_member(interaction)
        if member is None:
            return

        assert interaction.guild is not None
        session = self.container.session_registry.get(interaction.guild.id)
        if session is not None:
            await session.stop()
        await interaction.response.send_message(DiscordUIMessages.ACTION_STOPPED, ephemeral=True)

    @app_commands.command(name="leave", description="Stop playback and leave the voice channel.")
    async def leave(self, interaction: discord.Interaction) -> None:
        member = await get_member(interaction)
        if member is None:
            return

        assert interaction.guild is not None
        guild_id = interaction.guild.id
        voice_adapter = self.container.voice_adapter

        await self.container.session_registry.close(guild_id)
        self.container.message_state_manager.reset(guild_id)

        if not voice_adapter.is_connected(guild_id):
            await interaction.response.send_message(
                DiscordUIMessages.STATE_NOT_CONNECTED_TO_VOICE, ephemeral=True
            )
            return

        await voice_adapter.disconnect(guild_id)
        await interaction.response.send_message(
            DiscordUIMessages.ACTION_DISCONNECTED, ephemeral=True
        )


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)
    await bot.add_cog(PlayerCog(bot, container))

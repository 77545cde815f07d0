"""Renders playback state into Discord messages.

Each guild gets one now-playing message that is edited in place on every
phase change. Fatal errors are posted as persistent messages and remove the
now-playing message; non-fatal errors are posted with ``delete_after`` so
they disappear on their own.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import discord
from pydantic import BaseModel

from chill_player.application.interfaces.presentation import PresentationSink
from chill_player.domain.playback.value_objects import SessionPhase
from chill_player.domain.shared.messages import DiscordUIMessages, LogTemplates
from chill_player.domain.shared.types import DiscordSnowflake
from chill_player.utils.reply import truncate

if TYPE_CHECKING:
    from chill_player.domain.playback.value_objects import PlaylistPosition

logger = logging.getLogger(__name__)

DEFAULT_TRANSIENT_SECONDS: float = 8.0

_PHASE_HEADINGS: dict[SessionPhase, tuple[str, discord.Color]] = {
    SessionPhase.IDLE: (DiscordUIMessages.EMBED_IDLE, discord.Color.light_grey()),
    SessionPhase.LOADING: (DiscordUIMessages.EMBED_LOADING, discord.Color.blurple()),
    SessionPhase.ANNOUNCEMENT_PLAYING: (DiscordUIMessages.EMBED_ANNOUNCING, discord.Color.gold()),
    SessionPhase.PRIMARY_PLAYING: (DiscordUIMessages.EMBED_NOW_PLAYING, discord.Color.green()),
    SessionPhase.FINISHED: (DiscordUIMessages.EMBED_FINISHED, discord.Color.dark_grey()),
    SessionPhase.FAILED: (DiscordUIMessages.EMBED_FAILED, discord.Color.red()),
}


def build_now_playing_embed(
    phase: SessionPhase,
    title: str | None,
    position: PlaylistPosition | None = None,
    *,
    detail: str | None = None,
) -> discord.Embed:
    heading, color = _PHASE_HEADINGS[phase]
    fallback = detail or DiscordUIMessages.EMBED_NOTHING_PLAYING
    description = truncate(title, 200) if title else fallback
    embed = discord.Embed(title=heading, description=description, color=color)

    if position is not None:
        embed.add_field(
            name=DiscordUIMessages.EMBED_PLAYLIST_FIELD,
            value=DiscordUIMessages.EMBED_PLAYLIST_VALUE.format(
                position=position.position,
                total=position.total,
            ),
            inline=False,
        )
    return embed


class GuildMessageState(BaseModel):
    channel_id: DiscordSnowflake | None = None
    now_playing_message_id: DiscordSnowflake | None = None


class MessageStateManager:
    """Per-guild tracking of the text channel and now-playing message."""

    def __init__(
        self, bot: discord.Client, *, transient_seconds: float = DEFAULT_TRANSIENT_SECONDS
    ) -> None:
        self._bot = bot
        self._transient_seconds = transient_seconds
        self._state_by_guild: dict[int, GuildMessageState] = {}

    def get_state(self, guild_id: int) -> GuildMessageState:
        state = self._state_by_guild.get(guild_id)
        if state is None:
            state = GuildMessageState()
            self._state_by_guild[guild_id] = state
        return state

    def bind_channel(self, guild_id: int, channel_id: int) -> None:
        """Post future updates for *guild_id* into *channel_id*."""
        state = self.get_state(guild_id)
        if state.channel_id != channel_id:
            state.channel_id = channel_id
            state.now_playing_message_id = None

    def reset(self, guild_id: int) -> None:
        self._state_by_guild.pop(guild_id, None)

    def sink_for(self, guild_id: int) -> DiscordPresentationSink:
        return DiscordPresentationSink(self, guild_id)

    # ── Discord I/O ─────────────────────────────────────────────────

    async def _get_channel(self, guild_id: int) -> Any | None:
        state = self._state_by_guild.get(guild_id)
        if state is None or state.channel_id is None:
            logger.debug(LogTemplates.PRESENTATION_NO_CHANNEL, guild_id)
            return None

        channel = self._bot.get_channel(state.channel_id)
        if channel is None:
            try:
                channel = await self._bot.fetch_channel(state.channel_id)
            except discord.HTTPException:
                logger.debug(LogTemplates.PRESENTATION_NO_CHANNEL, guild_id)
                return None
        return channel if hasattr(channel, "send") else None

    async def show_phase(
        self,
        guild_id: int,
        phase: SessionPhase,
        title: str | None,
        position: PlaylistPosition | None,
        *,
        detail: str | None = None,
    ) -> None:
        channel = await self._get_channel(guild_id)
        if channel is None:
            return
        state = self.get_state(guild_id)

        if phase is SessionPhase.FAILED:
            await self._delete_now_playing(channel, state, guild_id)
            return

        embed = build_now_playing_embed(phase, title, position, detail=detail)
        try:
            if state.now_playing_message_id is not None:
                message = await channel.fetch_message(state.now_playing_message_id)
                await message.edit(embed=embed)
                return
        except discord.HTTPException:
            state.now_playing_message_id = None

        try:
            message = await channel.send(embed=embed)
        except discord.HTTPException as exc:
            logger.warning(LogTemplates.PRESENTATION_SEND_FAILED, guild_id, exc)
            return
        state.now_playing_message_id = message.id

    async def _delete_now_playing(
        self, channel: Any, state: GuildMessageState, guild_id: int
    ) -> None:
        message_id, state.now_playing_message_id = state.now_playing_message_id, None
        if message_id is None:
            return
        try:
            message = await channel.fetch_message(message_id)
            await message.delete()
        except discord.HTTPException as exc:
            logger.debug(LogTemplates.PRESENTATION_SEND_FAILED, guild_id, exc)

    async def show_error(self, guild_id: int, message: str, *, is_fatal: bool) -> None:
        channel = await self._get_channel(guild_id)
        if channel is None:
            return
        try:
            if is_fatal:
                await channel.send(DiscordUIMessages.NOTICE_FATAL.format(message=message))
            else:
                await channel.send(
                    DiscordUIMessages.NOTICE_TRANSIENT.format(message=message),
                    delete_after=self._transient_seconds,
                )
        except discord.HTTPException as exc:
            logger.warning(LogTemplates.PRESENTATION_SEND_FAILED, guild_id, exc)


class DiscordPresentationSink(PresentationSink):
    """PresentationSink bound to one guild of a :class:`MessageStateManager`."""

    def __init__(self, manager: MessageStateManager, guild_id: int) -> None:
        self._manager = manager
        self._guild_id = guild_id
        self._phase = SessionPhase.IDLE
        self._title: str | None = None
        self._position: PlaylistPosition | None = None

    @property
    def guild_id(self) -> int:
        return self._guild_id

    async def on_phase_change(
        self, phase: SessionPhase, title: str | None, position: PlaylistPosition | None
    ) -> None:
        self._phase, self._title, self._position = phase, title, position
        if phase is not SessionPhase.LOADING:
            await self._manager.show_phase(self._guild_id, phase, title, position)

    async def on_loading_state_change(self, is_loading: bool, message: str | None = None) -> None:
        if not is_loading:
            return
        await self._manager.show_phase(
            self._guild_id, SessionPhase.LOADING, self._title, self._position, detail=message
        )

    async def on_error(self, message: str, is_fatal: bool) -> None:
        await self._manager.show_error(self._guild_id, message, is_fatal=is_fatal)

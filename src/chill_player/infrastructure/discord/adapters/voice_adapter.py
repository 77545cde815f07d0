"""Discord voice adapter implementing VoiceAdapter for connection management."""

from __future__ import annotations

import asyncio
import logging

import discord

from chill_player.application.interfaces.voice_adapter import VoiceAdapter
from chill_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT: float = 10.0


class DiscordVoiceAdapter(VoiceAdapter):
    def __init__(self, bot: discord.Client) -> None:
        self._bot = bot

    def get_voice_client(self, guild_id: int) -> discord.VoiceClient | None:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            return None

        vc = guild.voice_client
        return vc if isinstance(vc, discord.VoiceClient) else None

    def _get_voice_channel(
        self, guild_id: int, channel_id: int
    ) -> tuple[discord.Guild, discord.VoiceChannel | discord.StageChannel] | None:
        guild = self._bot.get_guild(guild_id)
        if not guild:
            logger.warning(LogTemplates.GUILD_NOT_FOUND, guild_id)
            return None

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            logger.warning(LogTemplates.CHANNEL_NOT_VOICE, channel_id)
            return None
        return guild, channel

    async def connect(self, guild_id: int, channel_id: int) -> bool:
        found = self._get_voice_channel(guild_id, channel_id)
        if found is None:
            return False
        guild, channel = found

        try:
            async with asyncio.timeout(CONNECT_TIMEOUT):
                await channel.connect(self_deaf=True)
            await self._ensure_self_deaf(guild, channel)
            logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild.name)
            return True
        except TimeoutError:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_id)
            return False
        except discord.Forbidden:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel_id)
            return False
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            return False

    async def _ensure_self_deaf(
        self, guild: discord.Guild, channel: discord.VoiceChannel | discord.StageChannel
    ) -> None:
        try:
            await guild.change_voice_state(channel=channel, self_deaf=True)
        except discord.HTTPException as exc:
            logger.debug(LogTemplates.VOICE_SELF_DEAFEN_FAILED, guild.id, exc)

    async def disconnect(self, guild_id: int) -> bool:
        vc = self.get_voice_client(guild_id)
        if not vc:
            return True

        try:
            await vc.disconnect(force=True)
        except discord.ClientException:
            logger.exception(LogTemplates.VOICE_CLEANUP_ERROR)
            return False
        logger.info(LogTemplates.VOICE_DISCONNECTED, guild_id)
        return True

    async def ensure_connected(self, guild_id: int, channel_id: int) -> bool:
        """Connect if not connected, move if in a different channel."""
        vc = self.get_voice_client(guild_id)

        if vc and not vc.is_connected():
            logger.warning(LogTemplates.VOICE_STALE_CLEANUP, guild_id)
            await self.disconnect(guild_id)
            vc = None

        if vc and vc.channel:
            if vc.channel.id == channel_id:
                return True
            return await self.move_to(guild_id, channel_id)

        return await self.connect(guild_id, channel_id)

    async def move_to(self, guild_id: int, channel_id: int) -> bool:
        vc = self.get_voice_client(guild_id)
        if not vc:
            return await self.connect(guild_id, channel_id)

        found = self._get_voice_channel(guild_id, channel_id)
        if found is None:
            return False
        guild, channel = found

        try:
            async with asyncio.timeout(CONNECT_TIMEOUT):
                await vc.move_to(channel)
            await self._ensure_self_deaf(guild, channel)
            logger.info(LogTemplates.VOICE_MOVED, channel.name)
            return True
        except TimeoutError:
            logger.error(LogTemplates.VOICE_MOVE_TIMEOUT, channel_id)
            return False

    def is_connected(self, guild_id: int) -> bool:
        vc = self.get_voice_client(guild_id)
        return vc is not None and vc.is_connected()

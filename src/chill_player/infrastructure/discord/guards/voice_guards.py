"""Reusable voice-channel guard functions for Discord slash commands.

These are free functions that accept explicit dependencies rather than relying
on a specific cog instance, making them usable from any cog or view.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord

from chill_player.domain.shared.messages import DiscordUIMessages

if TYPE_CHECKING:
    from ....application.interfaces.voice_adapter import VoiceAdapter


async def send_ephemeral(interaction: discord.Interaction, message: str) -> None:
    """Send an ephemeral message, handling both fresh and already-responded interactions."""
    if interaction.response.is_done():
        await interaction.followup.send(message, ephemeral=True)
    else:
        await interaction.response.send_message(message, ephemeral=True)


async def get_member(interaction: discord.Interaction) -> discord.Member | None:
    """Return the invoking guild member, or reply with an error and return None."""
    if not interaction.guild:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
        return None

    user = interaction.user
    if not isinstance(user, discord.Member):
        await send_ephemeral(interaction, DiscordUIMessages.STATE_VERIFY_VOICE_FAILED)
        return None

    return user


async def ensure_voice(interaction: discord.Interaction, voice_adapter: VoiceAdapter) -> bool:
    """Check the user is in voice and join (or move to) their channel."""
    member = await get_member(interaction)
    if member is None:
        return False

    assert interaction.guild is not None

    if not member.voice or not member.voice.channel:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE)
        return False

    success = await voice_adapter.ensure_connected(interaction.guild.id, member.voice.channel.id)
    if not success:
        await send_ephemeral(interaction, DiscordUIMessages.ERROR_COULD_NOT_JOIN_VOICE)
        return False

    return True


async def check_user_in_voice(interaction: discord.Interaction, guild_id: int) -> bool:
    """Return True if the interacting user is in the bot's voice channel.

    Sends an ephemeral rejection and returns False otherwise.
    Used as an ``interaction_check`` in views that require voice presence.
    """
    user = interaction.user
    if not isinstance(user, discord.Member):
        await send_ephemeral(interaction, DiscordUIMessages.STATE_VERIFY_VOICE_FAILED)
        return False

    if not user.voice or not user.voice.channel:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE)
        return False

    guild = interaction.client.get_guild(guild_id)
    if guild and guild.voice_client and guild.voice_client.channel:
        if user.voice.channel.id != guild.voice_client.channel.id:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_MUST_BE_IN_VOICE)
            return False

    return True

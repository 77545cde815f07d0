"""Discord cogs - command handlers."""

from chill_player.infrastructure.discord.cogs.player_cog import PlayerCog

__all__ = [
    "PlayerCog",
]

"""Voice channel guard functions for Discord cogs."""

from chill_player.infrastructure.discord.guards.voice_guards import (
    check_user_in_voice,
    ensure_voice,
    get_member,
    send_ephemeral,
)

__all__ = [
    "check_user_in_voice",
    "ensure_voice",
    "get_member",
    "send_ephemeral",
]

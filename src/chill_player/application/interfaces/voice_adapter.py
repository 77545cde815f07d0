"""Port interface for Discord voice connection management."""

from __future__ import annotations

from abc import ABC, abstractmethod

from chill_player.domain.shared.types import DiscordSnowflake


class VoiceAdapter(ABC):
    """Interface for joining, moving between and leaving voice channels."""

    @abstractmethod
    async def connect(self, guild_id: DiscordSnowflake, channel_id: DiscordSnowflake) -> bool:
        """Connect to a voice channel."""
        ...

    @abstractmethod
    async def disconnect(self, guild_id: DiscordSnowflake) -> bool:
        """Disconnect from voice in a guild."""
        ...

    @abstractmethod
    async def ensure_connected(
        self, guild_id: DiscordSnowflake, channel_id: DiscordSnowflake
    ) -> bool:
        """Ensure bot is connected to the specified channel, connecting or moving as needed."""
        ...

    @abstractmethod
    async def move_to(self, guild_id: DiscordSnowflake, channel_id: DiscordSnowflake) -> bool:
        ...

    @abstractmethod
    def is_connected(self, guild_id: DiscordSnowflake) -> bool:
        ...

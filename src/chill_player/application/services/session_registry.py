"""Per-guild registry of playback orchestrators."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from .orchestrator import PlaybackOrchestrator

logger = logging.getLogger(__name__)

OrchestratorFactory = Callable[[DiscordSnowflake], "PlaybackOrchestrator"]


class SessionRegistry:
    """Creates one orchestrator per guild on first use and closes it on leave."""

    def __init__(self, factory: OrchestratorFactory) -> None:
        self._factory = factory
        self._sessions: dict[DiscordSnowflake, PlaybackOrchestrator] = {}

    def get(self, guild_id: DiscordSnowflake) -> PlaybackOrchestrator | None:
        return self._sessions.get(guild_id)

    def get_or_create(self, guild_id: DiscordSnowflake) -> PlaybackOrchestrator:
        session = self._sessions.get(guild_id)
        if session is None:
            session = self._factory(guild_id)
            self._sessions[guild_id] = session
            logger.info(LogTemplates.SESSION_CREATED, guild_id)
        return session

    async def close(self, guild_id: DiscordSnowflake) -> bool:
        session = self._sessions.pop(guild_id, None)
        if session is None:
            return False
        await session.close()
        logger.info(LogTemplates.SESSION_CLOSED, guild_id)
        return True

    async def close_all(self) -> None:
        for guild_id in list(self._sessions):
            await self.close(guild_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._sessions

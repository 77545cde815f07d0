"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for adapters, per-guild playback sessions and
query handlers. Components are created on-demand and cached for reuse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.interfaces.media_catalog import MediaCatalog
    from ..application.interfaces.speech_synthesizer import SpeechSynthesizer
    from ..application.interfaces.voice_adapter import VoiceAdapter
    from ..application.queries.search_catalog import SearchCatalogHandler
    from ..application.services.orchestrator import PlaybackOrchestrator
    from ..application.services.session_registry import SessionRegistry
    from ..infrastructure.discord.presentation.message_sink import MessageStateManager
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed.
    """

    settings: Settings
    _bot: Bot | None = None

    # Infrastructure adapters
    _catalog: MediaCatalog | None = None
    _synthesizer: SpeechSynthesizer | None = None
    _voice_adapter: VoiceAdapter | None = None

    # Discord presentation
    _message_state_manager: MessageStateManager | None = None

    # Application services
    _session_registry: SessionRegistry | None = None

    # Query handlers
    _search_handler: SearchCatalogHandler | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Infrastructure Adapters ===

    @property
    def catalog(self) -> MediaCatalog:
        """Get the media catalog."""
        if self._catalog is None:
            from ..infrastructure.catalog.ytdlp_catalog import YtDlpCatalog

            self._catalog = YtDlpCatalog(self.settings.catalog)
        return self._catalog

    @property
    def synthesizer(self) -> SpeechSynthesizer:
        """Get the announcement speech synthesizer."""
        if self._synthesizer is None:
            from ..infrastructure.speech.openai_speech import OpenAISpeechSynthesizer

            self._synthesizer = OpenAISpeechSynthesizer(self.settings.speech)
        return self._synthesizer

    @property
    def voice_adapter(self) -> VoiceAdapter:
        """Get the voice adapter."""
        if self._voice_adapter is None:
            from ..infrastructure.discord.adapters.voice_adapter import (
                DiscordVoiceAdapter,
            )

            self._voice_adapter = DiscordVoiceAdapter(self.bot)
        return self._voice_adapter

    # === Discord Presentation ===

    @property
    def message_state_manager(self) -> MessageStateManager:
        """Get the per-guild now-playing message manager."""
        if self._message_state_manager is None:
            from ..infrastructure.discord.presentation.message_sink import (
                MessageStateManager,
            )

            self._message_state_manager = MessageStateManager(
                self.bot,
                transient_seconds=self.settings.playback.transient_message_seconds,
            )
        return self._message_state_manager

    # === Application Services ===

    @property
    def session_registry(self) -> SessionRegistry:
        """Get the registry of per-guild playback sessions."""
        if self._session_registry is None:
            from ..application.services.session_registry import SessionRegistry

            self._session_registry = SessionRegistry(self._create_orchestrator)
        return self._session_registry

    def _create_orchestrator(self, guild_id: int) -> PlaybackOrchestrator:
        from ..application.services.orchestrator import PlaybackOrchestrator
        from ..domain.playback.value_objects import ChannelRole
        from ..infrastructure.discord.channels.voice_channel import (
            DiscordAudioChannel,
            GuildVoiceSlot,
        )

        playback = self.settings.playback
        slot = GuildVoiceSlot(self.bot, guild_id)
        announcement = DiscordAudioChannel(
            ChannelRole.ANNOUNCEMENT,
            slot,
            volume=playback.default_volume,
            ffmpeg_options=playback.ffmpeg_options,
        )
        primary = DiscordAudioChannel(
            ChannelRole.PRIMARY,
            slot,
            volume=playback.default_volume,
            ffmpeg_options=playback.ffmpeg_options,
        )
        return PlaybackOrchestrator(
            catalog=self.catalog,
            synthesizer=self.synthesizer,
            announcement_channel=announcement,
            primary_channel=primary,
            presentation=self.message_state_manager.sink_for(guild_id),
            retry_delay_seconds=playback.retry_delay_seconds,
            announcement_template=self.settings.speech.announcement_template,
            speech_max_length=self.settings.speech.max_text_length,
        )

    # === Query Handlers ===

    @property
    def search_handler(self) -> SearchCatalogHandler:
        """Get the catalog search handler."""
        if self._search_handler is None:
            from ..application.queries.search_catalog import SearchCatalogHandler

            self._search_handler = SearchCatalogHandler(catalog=self.catalog)
        return self._search_handler

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Initialize all async resources."""
        _ = self.catalog
        _ = self.synthesizer

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._session_registry is not None:
            try:
                await self._session_registry.close_all()
            except Exception as exc:
                logger.warning(LogTemplates.CONTAINER_SESSIONS_CLOSE_FAILED, exc)

        if self._synthesizer is not None:
            try:
                await self._synthesizer.close()
            except Exception as exc:
                logger.warning(LogTemplates.CONTAINER_SYNTHESIZER_CLOSE_FAILED, exc)


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)

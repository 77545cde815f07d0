"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Catalog (yt-dlp search, stream resolution, playlist listing)
- Speech (OpenAI text-to-speech announcements)
- Discord (bot, cogs, voice audio channels, presentation)
"""

from chill_player.infrastructure.catalog.ytdlp_catalog import YtDlpCatalog
from chill_player.infrastructure.discord.adapters.voice_adapter import DiscordVoiceAdapter
from chill_player.infrastructure.discord.bot import create_bot
from chill_player.infrastructure.speech.openai_speech import OpenAISpeechSynthesizer

__all__ = [
    "create_bot",
    "DiscordVoiceAdapter",
    "OpenAISpeechSynthesizer",
    "YtDlpCatalog",
]

"""OpenAI text-to-speech announcements."""

from chill_player.infrastructure.speech.openai_speech import OpenAISpeechSynthesizer

__all__ = ["OpenAISpeechSynthesizer"]

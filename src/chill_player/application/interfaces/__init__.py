"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from chill_player.application.interfaces.audio_channel import AudioChannel, TerminalCallback
from chill_player.application.interfaces.media_catalog import MediaCatalog
from chill_player.application.interfaces.presentation import PresentationSink
from chill_player.application.interfaces.speech_synthesizer import SpeechSynthesizer
from chill_player.application.interfaces.voice_adapter import VoiceAdapter

__all__ = [
    "AudioChannel",
    "MediaCatalog",
    "PresentationSink",
    "SpeechSynthesizer",
    "TerminalCallback",
    "VoiceAdapter",
]

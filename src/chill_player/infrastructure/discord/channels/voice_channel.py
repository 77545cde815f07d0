"""Audio channels backed by a guild's Discord voice connection.

A guild has exactly one ``discord.VoiceClient`` but the orchestrator drives
two channels (announcement and primary). :class:`GuildVoiceSlot` decides
which channel currently owns the voice client. When a channel starts playing
while the other one still holds a paused source, the other channel's attempt
is detached: its FFmpeg process is stopped and it never reports a terminal
signal.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import discord

from chill_player.application.interfaces.audio_channel import AudioChannel
from chill_player.domain.playback.value_objects import ChannelRole, MediaErrorCode, TerminalSignal
from chill_player.domain.shared.exceptions import PlaybackFailureError
from chill_player.domain.shared.messages import ErrorMessages, LogTemplates
from chill_player.domain.shared.validators import is_url

logger = logging.getLogger(__name__)

LOCAL_FFMPEG_OPTIONS = "-vn"


class _TrackedSource(discord.PCMVolumeTransformer):
    """Volume-controlled source that counts the audio frames it produced."""

    def __init__(self, original: discord.AudioSource, volume: float = 1.0) -> None:
        super().__init__(original, volume=volume)
        self.frames_read = 0

    def read(self) -> bytes:
        data = super().read()
        if data:
            self.frames_read += 1
        return data


def classify_player_error(error: Exception | None, frames_read: int) -> MediaErrorCode | None:
    """Map the outcome of a finished player onto a media error code.

    Returns None for a natural end. A source that produced no audio at all
    is treated as a network failure: FFmpeg exits quietly when it cannot
    open a remote stream.
    """
    if error is None:
        return MediaErrorCode.NETWORK if frames_read == 0 else None
    if isinstance(error, ConnectionError | TimeoutError):
        return MediaErrorCode.NETWORK
    if isinstance(error, discord.ClientException):
        return MediaErrorCode.DECODE
    if isinstance(error, OSError):
        return MediaErrorCode.NETWORK
    return MediaErrorCode.UNKNOWN


class GuildVoiceSlot:
    """Tracks which audio channel of a guild owns the voice client."""

    def __init__(self, bot: discord.Client, guild_id: int) -> None:
        self._bot = bot
        self._guild_id = guild_id
        self._owner: DiscordAudioChannel | None = None

    @property
    def guild_id(self) -> int:
        return self._guild_id

    @property
    def owner(self) -> DiscordAudioChannel | None:
        return self._owner

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._bot.loop

    def voice_client(self) -> discord.VoiceClient | None:
        guild = self._bot.get_guild(self._guild_id)
        if guild is None:
            return None
        vc = guild.voice_client
        return vc if isinstance(vc, discord.VoiceClient) else None

    def claim(self, channel: DiscordAudioChannel) -> discord.VoiceClient:
        """Give *channel* the voice client, detaching any other owner."""
        vc = self.voice_client()
        if vc is None or not vc.is_connected():
            raise PlaybackFailureError(
                MediaErrorCode.NOT_ALLOWED, ErrorMessages.NOT_CONNECTED_TO_VOICE
            )

        previous = self._owner
        if previous is not None and previous is not channel:
            previous.detach()
        self._owner = channel
        return vc

    def release(self, channel: DiscordAudioChannel) -> None:
        if self._owner is channel:
            self._owner = None


class DiscordAudioChannel(AudioChannel):
    """One logical audio channel playing FFmpeg sources through a shared voice client."""

    def __init__(
        self,
        role: ChannelRole,
        slot: GuildVoiceSlot,
        *,
        volume: float = 0.5,
        ffmpeg_options: dict[str, str] | None = None,
    ) -> None:
        super().__init__(role, slot.guild_id)
        self._slot = slot
        self._volume = volume
        self._ffmpeg_options = ffmpeg_options or {}
        self._url: str | None = None
        self._source: _TrackedSource | None = None
        # Attempt whose source is currently attached to the voice client.
        self._live_attempt: int | None = None

    @property
    def is_live(self) -> bool:
        return self._live_attempt is not None

    def _on_load(self, url: str, attempt: int) -> None:
        self._drop_live_source()
        self._url = url

    def detach(self) -> None:
        """Abandon the live attempt without signalling; another channel takes the voice client."""
        if self._live_attempt is not None:
            logger.debug(
                LogTemplates.CHANNEL_DETACHED, self.role.value, self.guild_id, self._live_attempt
            )
        self._drop_live_source()

    def _drop_live_source(self) -> None:
        source = self._source
        self._live_attempt = None
        self._source = None
        if source is None or self._slot.owner is not self:
            return
        vc = self._slot.voice_client()
        if vc is not None and vc.source is source and (vc.is_playing() or vc.is_paused()):
            vc.stop()

    def _build_source(self, url: str) -> _TrackedSource:
        if is_url(url):
            before_options = self._ffmpeg_options.get("before_options", "")
            options = self._ffmpeg_options.get("options", LOCAL_FFMPEG_OPTIONS)
        else:
            before_options = ""
            options = LOCAL_FFMPEG_OPTIONS
        try:
            original = discord.FFmpegPCMAudio(url, before_options=before_options, options=options)
        except discord.ClientException as exc:
            raise PlaybackFailureError(MediaErrorCode.SRC_NOT_SUPPORTED, str(exc)) from exc
        return _TrackedSource(original, volume=self._volume)

    async def play(self) -> None:
        if self._url is None:
            raise PlaybackFailureError(
                MediaErrorCode.SRC_NOT_SUPPORTED, ErrorMessages.NO_SOURCE_LOADED
            )

        vc = self._slot.claim(self)
        attempt = self.attempt

        if self._live_attempt == attempt and self._source is not None and vc.source is self._source:
            if vc.is_paused():
                vc.resume()
                logger.debug(LogTemplates.CHANNEL_RESUMED, self.role.value, self.guild_id, attempt)
            return

        if vc.is_playing() or vc.is_paused():
            vc.stop()

        source = self._build_source(self._url)
        self._source = source
        self._live_attempt = attempt
        try:
            vc.play(source, after=self._make_after(attempt, source))
        except discord.ClientException as exc:
            self._source = None
            self._live_attempt = None
            self._slot.release(self)
            logger.warning(LogTemplates.CHANNEL_PLAYER_ERROR, self.role.value, self.guild_id, exc)
            raise PlaybackFailureError(MediaErrorCode.NOT_ALLOWED, str(exc)) from exc

        logger.info(LogTemplates.CHANNEL_STARTED, self.role.value, self.guild_id, attempt)

    async def pause(self) -> None:
        if self._live_attempt is None or self._slot.owner is not self:
            return
        vc = self._slot.voice_client()
        if vc is not None and vc.is_playing() and vc.source is self._source:
            vc.pause()
            logger.debug(
                LogTemplates.CHANNEL_PAUSED, self.role.value, self.guild_id, self._live_attempt
            )

    def _make_after(self, attempt: int, source: _TrackedSource) -> Any:
        loop = self._slot.loop

        def after(error: Exception | None = None) -> None:
            # Runs on the voice player thread.
            if error is not None:
                logger.warning(
                    LogTemplates.CHANNEL_PLAYER_ERROR, self.role.value, self.guild_id, error
                )
            code = classify_player_error(error, source.frames_read)
            asyncio.run_coroutine_threadsafe(self._finish(attempt, source, code), loop)

        return after

    async def _finish(
        self, attempt: int, source: _TrackedSource, code: MediaErrorCode | None
    ) -> None:
        if self._source is not source or self._live_attempt != attempt:
            return

        self._source = None
        self._live_attempt = None
        self._slot.release(self)

        if code is None:
            signal = TerminalSignal.ended(self.role, attempt)
        else:
            signal = TerminalSignal.error(self.role, attempt, code)
        await self._emit(signal)

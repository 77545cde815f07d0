"""
Tests for the Discord-backed audio channels and the shared voice slot.

The voice client is a MagicMock with just enough state to track the
playing/paused flags and the attached source.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest

from chill_player.domain.playback.value_objects import ChannelRole, MediaErrorCode, SignalKind
from chill_player.domain.shared.exceptions import PlaybackFailureError
from chill_player.infrastructure.discord.channels.voice_channel import (
    DiscordAudioChannel,
    GuildVoiceSlot,
    classify_player_error,
)

GUILD_ID = 111111111111111111
FFMPEG_OPTIONS = {"before_options": "-reconnect 1", "options": "-vn"}


def _voice_client(connected: bool = True) -> MagicMock:
    vc = MagicMock(spec=discord.VoiceClient)
    state = {"playing": False, "paused": False}
    vc.source = None
    vc.is_connected.return_value = connected

    def play(source, after=None):
        vc.source = source
        state["playing"], state["paused"] = True, False

    def pause():
        state["playing"], state["paused"] = False, True

    def resume():
        state["playing"], state["paused"] = True, False

    def stop():
        state["playing"], state["paused"] = False, False

    vc.play.side_effect = play
    vc.pause.side_effect = pause
    vc.resume.side_effect = resume
    vc.stop.side_effect = stop
    vc.is_playing.side_effect = lambda: state["playing"]
    vc.is_paused.side_effect = lambda: state["paused"]
    return vc


def _bot(vc: MagicMock | None) -> MagicMock:
    bot = MagicMock()
    if vc is None:
        bot.get_guild.return_value = None
    else:
        bot.get_guild.return_value = MagicMock(voice_client=vc)
    return bot


@pytest.fixture
def vc():
    return _voice_client()


@pytest.fixture
def slot(vc):
    return GuildVoiceSlot(_bot(vc), GUILD_ID)


@pytest.fixture
def channels(slot):
    announcement = DiscordAudioChannel(
        ChannelRole.ANNOUNCEMENT, slot, ffmpeg_options=FFMPEG_OPTIONS
    )
    primary = DiscordAudioChannel(ChannelRole.PRIMARY, slot, ffmpeg_options=FFMPEG_OPTIONS)
    for channel in (announcement, primary):
        channel.set_terminal_callback(AsyncMock())
    return announcement, primary


@pytest.fixture(autouse=True)
def fake_ffmpeg():
    with patch(
        "chill_player.infrastructure.discord.channels.voice_channel.discord.FFmpegPCMAudio"
    ) as mock_ffmpeg:
        def build(*args, **kwargs):
            source = MagicMock(spec=discord.AudioSource)
            source.is_opus.return_value = False
            return source

        mock_ffmpeg.side_effect = build
        yield mock_ffmpeg


class TestClassifyPlayerError:
    """Tests for mapping player outcomes to media error codes."""

    def test_natural_end(self):
        assert classify_player_error(None, frames_read=120) is None

    def test_silent_end_is_network(self):
        """A source that produced nothing counts as a failed fetch."""
        assert classify_player_error(None, frames_read=0) is MediaErrorCode.NETWORK

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (ConnectionResetError("reset"), MediaErrorCode.NETWORK),
            (TimeoutError("slow"), MediaErrorCode.NETWORK),
            (discord.ClientException("bad stream"), MediaErrorCode.DECODE),
            (OSError("pipe"), MediaErrorCode.NETWORK),
            (RuntimeError("?"), MediaErrorCode.UNKNOWN),
        ],
    )
    def test_errors(self, error, expected):
        assert classify_player_error(error, frames_read=10) is expected


class TestGuildVoiceSlot:
    """Tests for voice client ownership."""

    def test_claim_requires_connection(self, channels):
        """Should refuse to hand out a disconnected voice client."""
        slot = GuildVoiceSlot(_bot(_voice_client(connected=False)), GUILD_ID)
        announcement, _ = channels

        with pytest.raises(PlaybackFailureError) as exc_info:
            slot.claim(announcement)

        assert exc_info.value.error_code is MediaErrorCode.NOT_ALLOWED

    def test_claim_without_guild(self, channels):
        """Should refuse when the bot no longer sees the guild."""
        slot = GuildVoiceSlot(_bot(None), GUILD_ID)

        with pytest.raises(PlaybackFailureError):
            slot.claim(channels[0])

    def test_claim_sets_owner(self, slot, channels, vc):
        announcement, _ = channels

        assert slot.claim(announcement) is vc
        assert slot.owner is announcement

    def test_release_only_by_owner(self, slot, channels):
        announcement, primary = channels
        slot.claim(announcement)

        slot.release(primary)
        assert slot.owner is announcement
        slot.release(announcement)
        assert slot.owner is None


class TestPlayAndPause:
    """Tests for starting, pausing and resuming a channel."""

    async def test_play_without_source(self, channels):
        """Should fail before touching the voice client."""
        _, primary = channels

        with pytest.raises(PlaybackFailureError) as exc_info:
            await primary.play()

        assert exc_info.value.error_code is MediaErrorCode.SRC_NOT_SUPPORTED

    async def test_play_attaches_source(self, channels, vc, fake_ffmpeg):
        """Should start the loaded stream with the configured FFmpeg options."""
        _, primary = channels
        primary.load("https://stream.example/a.webm")

        await primary.play()

        vc.play.assert_called_once()
        assert primary.is_live
        fake_ffmpeg.assert_called_once_with(
            "https://stream.example/a.webm", before_options="-reconnect 1", options="-vn"
        )

    async def test_local_file_skips_reconnect(self, channels, fake_ffmpeg):
        """Should not pass network options for a local clip."""
        announcement, _ = channels
        announcement.load("/tmp/clip.mp3")

        await announcement.play()

        fake_ffmpeg.assert_called_once_with("/tmp/clip.mp3", before_options="", options="-vn")

    async def test_pause_then_play_resumes(self, channels, vc):
        """Should resume the paused source instead of restarting it."""
        _, primary = channels
        primary.load("https://stream.example/a.webm")
        await primary.play()

        await primary.pause()
        assert vc.is_paused()
        await primary.play()

        vc.resume.assert_called_once()
        assert vc.play.call_count == 1

    async def test_pause_before_play_is_noop(self, channels, vc):
        _, primary = channels
        primary.load("https://stream.example/a.webm")

        await primary.pause()

        vc.pause.assert_not_called()

    async def test_voice_client_refuses(self, channels, vc, slot):
        """Should report NOT_ALLOWED and release the slot when play() is rejected."""
        _, primary = channels
        vc.play.side_effect = discord.ClientException("Already playing audio.")
        primary.load("https://stream.example/a.webm")

        with pytest.raises(PlaybackFailureError) as exc_info:
            await primary.play()

        assert exc_info.value.error_code is MediaErrorCode.NOT_ALLOWED
        assert not primary.is_live
        assert slot.owner is None

    async def test_other_channel_detaches(self, channels, vc, slot):
        """Playing one channel should silently abandon the other's source."""
        announcement, primary = channels
        primary.load("https://stream.example/a.webm")
        await primary.play()
        await primary.pause()
        stale_source = primary._source

        announcement.load("/tmp/clip.mp3")
        await announcement.play()

        assert not primary.is_live
        assert slot.owner is announcement
        vc.stop.assert_called()
        await primary._finish(primary.attempt, stale_source, None)
        primary._terminal_callback.assert_not_awaited()


class TestTerminalSignals:
    """Tests for the signal emitted when a player finishes."""

    async def test_natural_end(self, channels, slot):
        _, primary = channels
        attempt = primary.load("https://stream.example/a.webm")
        await primary.play()

        await primary._finish(attempt, primary._source, None)

        signal = primary._terminal_callback.await_args.args[0]
        assert signal.kind is SignalKind.ENDED
        assert signal.role is ChannelRole.PRIMARY
        assert signal.attempt == attempt
        assert slot.owner is None

    async def test_error_end(self, channels):
        _, primary = channels
        attempt = primary.load("https://stream.example/a.webm")
        await primary.play()

        await primary._finish(attempt, primary._source, MediaErrorCode.DECODE)

        signal = primary._terminal_callback.await_args.args[0]
        assert signal.is_error
        assert signal.error_code is MediaErrorCode.DECODE

    async def test_finish_after_reload_ignored(self, channels):
        """A player from a superseded attempt should not signal."""
        _, primary = channels
        attempt = primary.load("https://stream.example/a.webm")
        await primary.play()
        old_source = primary._source

        primary.load("https://stream.example/b.webm")
        await primary._finish(attempt, old_source, None)

        primary._terminal_callback.assert_not_awaited()

    async def test_single_signal_per_attempt(self, channels):
        _, primary = channels
        attempt = primary.load("https://stream.example/a.webm")
        await primary.play()
        source = primary._source

        await primary._finish(attempt, source, None)
        await primary._finish(attempt, source, MediaErrorCode.NETWORK)

        primary._terminal_callback.assert_awaited_once()

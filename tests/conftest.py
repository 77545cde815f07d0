import asyncio

import pytest

from chill_player.application.interfaces.audio_channel import AudioChannel
from chill_player.application.interfaces.media_catalog import MediaCatalog
from chill_player.application.interfaces.presentation import PresentationSink
from chill_player.application.interfaces.speech_synthesizer import SpeechSynthesizer
from chill_player.application.services.orchestrator import PlaybackOrchestrator
from chill_player.domain.playback.entities import Item, PlaylistListing, ResolvedTrack, SpeechClip
from chill_player.domain.playback.value_objects import (
    ChannelRole,
    MediaErrorCode,
    ResolveFailureKind,
    TerminalSignal,
)
from chill_player.domain.shared.exceptions import (
    PlaybackFailureError,
    PlaylistNotFoundError,
    ResolveError,
    SynthesisUnavailableError,
    TextTooLongError,
)

# ============================================================================
# Fakes
# ============================================================================


def make_item(item_id: str, title: str | None = None) -> Item:
    return Item(id=item_id, title=title or f"Track {item_id}")


def make_track(item_id: str, title: str | None = None) -> ResolvedTrack:
    return ResolvedTrack(
        stream_url=f"https://stream.example/{item_id}.webm",
        title=title or f"Resolved {item_id}",
        duration_seconds=180,
    )


class FakeCatalog(MediaCatalog):
    """In-memory catalog; resolve outcomes are either tracks or exceptions."""

    def __init__(self) -> None:
        self.tracks: dict[str, ResolvedTrack | Exception] = {}
        self.playlists: dict[str, PlaylistListing | Exception] = {}
        self.search_results: list[Item] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.resolve_calls: list[str] = []
        self.playlist_calls: list[str] = []
        self.search_calls: list[str] = []

    async def search(self, query: str) -> list[Item]:
        self.search_calls.append(query)
        return list(self.search_results)

    async def resolve(self, item_id: str) -> ResolvedTrack:
        self.resolve_calls.append(item_id)
        gate = self.gates.get(item_id)
        if gate is not None:
            await gate.wait()
        outcome = self.tracks.get(item_id)
        if outcome is None:
            raise ResolveError(item_id, ResolveFailureKind.NOT_FOUND)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def list_playlist(self, playlist_id: str) -> PlaylistListing:
        self.playlist_calls.append(playlist_id)
        outcome = self.playlists.get(playlist_id)
        if outcome is None:
            raise PlaylistNotFoundError(playlist_id)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeSynthesizer(SpeechSynthesizer):
    def __init__(self, *, fail: bool = False, limit: int = 200) -> None:
        self.fail = fail
        self.limit = limit
        self.texts: list[str] = []
        self.closed = False

    @property
    def max_length(self) -> int:
        return self.limit

    async def synthesize(self, text: str, max_length: int = 200) -> SpeechClip:
        self.texts.append(text)
        if self.fail:
            raise SynthesisUnavailableError("speech offline")
        if len(text) > max_length:
            raise TextTooLongError(len(text), max_length)
        return SpeechClip(source=f"/tmp/clip-{len(self.texts)}.mp3", text=text)

    async def close(self) -> None:
        self.closed = True


class FakeChannel(AudioChannel):
    """Audio channel whose terminal signals are fired explicitly by the test."""

    def __init__(self, role: ChannelRole) -> None:
        super().__init__(role, guild_id=1)
        self.loaded: list[str] = []
        self.play_calls = 0
        self.pause_calls = 0
        self.play_error: MediaErrorCode | None = None
        self.playing = False

    def _on_load(self, url: str, attempt: int) -> None:
        self.loaded.append(url)
        self.playing = False

    async def play(self) -> None:
        self.play_calls += 1
        if self.play_error is not None:
            raise PlaybackFailureError(self.play_error)
        self.playing = True

    async def pause(self) -> None:
        self.pause_calls += 1
        self.playing = False

    async def finish(self) -> None:
        self.playing = False
        await self._emit(TerminalSignal.ended(self.role, self.attempt))

    async def fail(self, code: MediaErrorCode = MediaErrorCode.NETWORK) -> None:
        self.playing = False
        await self._emit(TerminalSignal.error(self.role, self.attempt, code))


class RecordingSink(PresentationSink):
    def __init__(self) -> None:
        self.phases: list[tuple] = []
        self.errors: list[tuple[str, bool]] = []
        self.loading: list[tuple[bool, str | None]] = []

    async def on_phase_change(self, phase, title, position) -> None:
        self.phases.append((phase, title, position))

    async def on_error(self, message: str, is_fatal: bool) -> None:
        self.errors.append((message, is_fatal))

    async def on_loading_state_change(self, is_loading: bool, message: str | None = None) -> None:
        self.loading.append((is_loading, message))

    @property
    def last_phase(self):
        return self.phases[-1][0] if self.phases else None


async def drain_retries(orchestrator: PlaybackOrchestrator) -> None:
    """Run scheduled playlist retries until none is pending."""
    while (task := orchestrator.pending_retry) is not None:
        await task


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def synthesizer():
    return FakeSynthesizer()


@pytest.fixture
def announcement_channel():
    return FakeChannel(ChannelRole.ANNOUNCEMENT)


@pytest.fixture
def primary_channel():
    return FakeChannel(ChannelRole.PRIMARY)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def orchestrator(catalog, synthesizer, announcement_channel, primary_channel, sink):
    return PlaybackOrchestrator(
        catalog=catalog,
        synthesizer=synthesizer,
        announcement_channel=announcement_channel,
        primary_channel=primary_channel,
        presentation=sink,
        retry_delay_seconds=0,
    )

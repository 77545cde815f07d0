"""
Tests for the OpenAI speech synthesizer.

The OpenAI client is always mocked; only the temp clip directory is real.
"""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from openai import APIError
from pydantic import SecretStr

from chill_player.config.settings import SpeechSettings
from chill_player.domain.shared.exceptions import (
    InputInvalidError,
    SynthesisUnavailableError,
    TextTooLongError,
)
from chill_player.infrastructure.speech.openai_speech import OpenAISpeechSynthesizer


def _client(audio: bytes = b"ID3-fake-mp3") -> MagicMock:
    client = MagicMock()
    client.audio.speech.create = AsyncMock(return_value=SimpleNamespace(content=audio))
    client.close = AsyncMock()
    return client


@pytest.fixture
async def synthesizer():
    synth = OpenAISpeechSynthesizer(SpeechSettings(max_cached_clips=2), client=_client())
    yield synth
    await synth.close()


class TestSynthesize:
    """Tests for turning text into a clip on disk."""

    async def test_writes_clip(self, synthesizer):
        """Should write the audio bytes and return a clip pointing at the file."""
        clip = await synthesizer.synthesize("Changing now to Rain")

        path = Path(clip.source)
        assert path.exists()
        assert path.read_bytes() == b"ID3-fake-mp3"
        assert path.suffix == ".mp3"
        assert clip.text == "Changing now to Rain"

    async def test_passes_model_and_voice(self):
        """Should call the API with the configured model and voice."""
        client = _client()
        synth = OpenAISpeechSynthesizer(SpeechSettings(model="tts-1", voice="nova"), client=client)

        await synth.synthesize("hello")
        await synth.close()

        kwargs = client.audio.speech.create.await_args.kwargs
        assert kwargs["model"] == "tts-1"
        assert kwargs["voice"] == "nova"
        assert kwargs["input"] == "hello"

    async def test_text_too_long(self, synthesizer):
        """Should reject text above the limit without calling the API."""
        with pytest.raises(TextTooLongError):
            await synthesizer.synthesize("x" * 11, max_length=10)

        synthesizer._client.audio.speech.create.assert_not_awaited()

    async def test_default_limit_from_settings(self):
        """Should use max_text_length when no limit is passed."""
        synth = OpenAISpeechSynthesizer(SpeechSettings(max_text_length=5), client=_client())

        assert synth.max_length == 5
        with pytest.raises(TextTooLongError):
            await synth.synthesize("too long")

    async def test_blank_text_rejected(self, synthesizer):
        """Should reject blank text."""
        with pytest.raises(InputInvalidError):
            await synthesizer.synthesize("   ")

    async def test_empty_audio(self):
        """Should treat an empty response as unavailable."""
        synth = OpenAISpeechSynthesizer(SpeechSettings(), client=_client(audio=b""))

        with pytest.raises(SynthesisUnavailableError):
            await synth.synthesize("hello")

    @pytest.mark.parametrize(
        "error",
        [
            APIError("boom", httpx.Request("POST", "https://api.openai.com"), body=None),
            httpx.ConnectError("no route"),
            httpx.ReadTimeout("slow"),
        ],
    )
    async def test_api_errors_mapped(self, error):
        """Should map client and transport errors to SynthesisUnavailableError."""
        client = _client()
        client.audio.speech.create.side_effect = error
        synth = OpenAISpeechSynthesizer(SpeechSettings(), client=client)

        with pytest.raises(SynthesisUnavailableError):
            await synth.synthesize("hello")

    async def test_unwritable_clip_dir(self, tmp_path):
        """Should report a failed clip write as unavailable synthesis."""
        synth = OpenAISpeechSynthesizer(SpeechSettings(), client=_client())
        synth._clip_dir = tmp_path / "missing"

        with pytest.raises(SynthesisUnavailableError) as exc_info:
            await synth.synthesize("hello")

        assert isinstance(exc_info.value.__cause__, OSError)
        assert not synth._clips

    async def test_clip_dir_creation_failure(self):
        synth = OpenAISpeechSynthesizer(SpeechSettings(), client=_client())

        with (
            patch("tempfile.mkdtemp", side_effect=PermissionError("read-only")),
            pytest.raises(SynthesisUnavailableError, match="read-only"),
        ):
            await synth.synthesize("hello")

        assert synth.clip_dir is None


class TestClient:
    """Tests for lazy client creation."""

    async def test_missing_api_key(self):
        """Should refuse to build a client without an API key."""
        synth = OpenAISpeechSynthesizer(SpeechSettings(api_key=SecretStr("")))

        with pytest.raises(SynthesisUnavailableError):
            await synth.synthesize("hello")

    async def test_close_closes_client(self):
        """Should close the injected client."""
        client = _client()
        synth = OpenAISpeechSynthesizer(SpeechSettings(), client=client)

        await synth.close()

        client.close.assert_awaited_once()


class TestClipCleanup:
    """Tests for bounded clip retention."""

    async def test_old_clips_removed(self, synthesizer):
        """Should keep only the most recent max_cached_clips files."""
        first = Path((await synthesizer.synthesize("one")).source)
        second = Path((await synthesizer.synthesize("two")).source)
        third = Path((await synthesizer.synthesize("three")).source)

        assert not first.exists()
        assert second.exists()
        assert third.exists()

    async def test_close_removes_directory(self):
        """Should delete the clip directory on close."""
        synth = OpenAISpeechSynthesizer(SpeechSettings(), client=_client())
        await synth.synthesize("hello")
        clip_dir = synth.clip_dir

        await synth.close()

        assert clip_dir is not None
        assert not clip_dir.exists()
        assert synth.clip_dir is None

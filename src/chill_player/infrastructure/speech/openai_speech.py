"""SpeechSynthesizer implementation using the OpenAI text-to-speech API."""

from __future__ import annotations

import asyncio
import logging
import shutil
import tempfile
import uuid
from collections import deque
from pathlib import Path

import httpx
from openai import APIError, AsyncOpenAI

from chill_player.application.interfaces.speech_synthesizer import SpeechSynthesizer
from chill_player.config.settings import SpeechSettings
from chill_player.domain.playback.entities import SpeechClip
from chill_player.domain.shared.exceptions import SynthesisUnavailableError, TextTooLongError
from chill_player.domain.shared.messages import ErrorMessages, LogTemplates
from chill_player.domain.shared.validators import validate_non_empty_string

logger = logging.getLogger(__name__)

OPENAI_TIMEOUT: float = 15.0
CLIP_SUFFIX = ".mp3"


class OpenAISpeechSynthesizer(SpeechSynthesizer):
    """Synthesizes announcements to MP3 files in a private temp directory.

    Only the most recent ``max_cached_clips`` files are kept on disk; the
    directory itself is removed by :meth:`close`.
    """

    def __init__(
        self, settings: SpeechSettings | None = None, client: AsyncOpenAI | None = None
    ) -> None:
        self._settings = settings or SpeechSettings()
        self._client = client
        self._clip_dir: Path | None = None
        self._clips: deque[Path] = deque()

    @property
    def max_length(self) -> int:
        return self._settings.max_text_length

    @property
    def clip_dir(self) -> Path | None:
        return self._clip_dir

    def _get_client(self) -> AsyncOpenAI:
        if self._client is not None:
            return self._client

        api_key_value = self._settings.api_key.get_secret_value()
        if not api_key_value:
            raise SynthesisUnavailableError(ErrorMessages.SPEECH_API_KEY_NOT_SET)

        self._client = AsyncOpenAI(api_key=api_key_value, max_retries=0, timeout=OPENAI_TIMEOUT)
        logger.info(
            LogTemplates.SPEECH_CLIENT_INITIALIZED, self._settings.model, self._settings.voice
        )
        return self._client

    def _ensure_clip_dir(self) -> Path:
        if self._clip_dir is None:
            self._clip_dir = Path(tempfile.mkdtemp(prefix="chill-player-speech-"))
        return self._clip_dir

    async def synthesize(self, text: str, max_length: int | None = None) -> SpeechClip:
        text = validate_non_empty_string(text, "text")
        limit = max_length or self.max_length
        if len(text) > limit:
            raise TextTooLongError(len(text), limit)

        client = self._get_client()
        logger.debug(LogTemplates.SPEECH_SYNTHESIZING, text)
        try:
            response = await client.audio.speech.create(
                model=self._settings.model,
                voice=self._settings.voice,
                input=text,
                response_format="mp3",
            )
        except (APIError, httpx.TimeoutException, httpx.ConnectError) as exc:
            logger.warning(LogTemplates.SPEECH_FAILED, exc)
            raise SynthesisUnavailableError(str(exc)) from exc

        audio = response.content
        if not audio:
            raise SynthesisUnavailableError(ErrorMessages.SPEECH_EMPTY_AUDIO)

        try:
            path = self._ensure_clip_dir() / f"{uuid.uuid4().hex}{CLIP_SUFFIX}"
            await asyncio.to_thread(path.write_bytes, audio)
        except OSError as exc:
            logger.warning(LogTemplates.SPEECH_CLIP_WRITE_FAILED, exc)
            raise SynthesisUnavailableError(str(exc)) from exc
        self._remember(path)
        return SpeechClip(source=str(path), text=text)

    def _remember(self, path: Path) -> None:
        self._clips.append(path)
        while len(self._clips) > self._settings.max_cached_clips:
            old = self._clips.popleft()
            try:
                old.unlink(missing_ok=True)
                logger.debug(LogTemplates.SPEECH_CLIP_REMOVED, old)
            except OSError as exc:
                logger.warning(LogTemplates.SPEECH_CLIP_REMOVE_FAILED, old, exc)

    async def close(self) -> None:
        self._clips.clear()
        if self._clip_dir is not None:
            shutil.rmtree(self._clip_dir, ignore_errors=True)
            self._clip_dir = None
        if self._client is not None:
            await self._client.close()
            self._client = None

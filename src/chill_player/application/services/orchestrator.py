"""Playback orchestrator - sequences announcement and primary audio per guild.

One orchestrator owns the session phase, the playlist cursor and the staged
track of a guild. It drives two audio channels:

    selection -> resolve + stage -> announce -> primary -> (advance | finish)

Every selection, ``next``, ``stop`` and playlist advance bumps a selection
token. Work that awaited a collaborator compares its token afterwards and
drops its result when a newer operation has started. Channel signals are
matched against the attempt number recorded when the channel was loaded.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ...domain.playback.cursor import PlaylistCursor
from ...domain.playback.entities import StagedTrack
from ...domain.playback.value_objects import ChannelRole, SessionPhase, TerminalSignal
from ...domain.shared.exceptions import (
    DomainError,
    EmptyResultError,
    ExhaustedPlaylistError,
    PlaybackFailureError,
    UpstreamUnavailableError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ...domain.shared.validators import validate_non_empty_string
from ...utils.reply import truncate

if TYPE_CHECKING:
    from ...domain.playback.entities import Item
    from ...domain.playback.value_objects import PlaylistPosition
    from ..interfaces.audio_channel import AudioChannel
    from ..interfaces.media_catalog import MediaCatalog
    from ..interfaces.presentation import PresentationSink
    from ..interfaces.speech_synthesizer import SpeechSynthesizer

logger = logging.getLogger(__name__)

DEFAULT_ANNOUNCEMENT_TEMPLATE = "Changing now to {title}"
DEFAULT_RETRY_DELAY_SECONDS = 1.5

_ANNOUNCEMENT_PHASES = frozenset({SessionPhase.LOADING, SessionPhase.ANNOUNCEMENT_PLAYING})
_PRIMARY_PHASES = frozenset(
    {SessionPhase.LOADING, SessionPhase.ANNOUNCEMENT_PLAYING, SessionPhase.PRIMARY_PLAYING}
)


class PlaybackOrchestrator:
    """State machine for one guild's playback session."""

    def __init__(
        self,
        *,
        catalog: MediaCatalog,
        synthesizer: SpeechSynthesizer,
        announcement_channel: AudioChannel,
        primary_channel: AudioChannel,
        presentation: PresentationSink,
        retry_delay_seconds: float = DEFAULT_RETRY_DELAY_SECONDS,
        announcement_template: str = DEFAULT_ANNOUNCEMENT_TEMPLATE,
        speech_max_length: int | None = None,
    ) -> None:
        self._catalog = catalog
        self._synthesizer = synthesizer
        self._announcement = announcement_channel
        self._primary = primary_channel
        self._presentation = presentation
        self._retry_delay = retry_delay_seconds
        self._template = announcement_template
        self._speech_max_length = speech_max_length or synthesizer.max_length

        self._phase = SessionPhase.IDLE
        self._title: str | None = None
        self._playlist: PlaylistCursor | None = None
        self._staged: StagedTrack | None = None
        self._last_error: DomainError | None = None
        self._consecutive_failures = 0
        self._token = 0
        self._retry_task: asyncio.Task[None] | None = None

        # Attempt numbers of the channel loads this orchestrator is waiting on.
        self._awaited_announcement: int | None = None
        self._awaited_primary: int | None = None

        self._announcement.set_terminal_callback(self._on_announcement_signal)
        self._primary.set_terminal_callback(self._on_primary_signal)

    # ── Read-only state ─────────────────────────────────────────────

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def title(self) -> str | None:
        return self._title

    @property
    def playlist(self) -> PlaylistCursor | None:
        return self._playlist

    @property
    def staged_track(self) -> StagedTrack | None:
        return self._staged

    @property
    def last_error(self) -> DomainError | None:
        """The most recent fatal error, if any."""
        return self._last_error

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    @property
    def pending_retry(self) -> asyncio.Task[None] | None:
        return self._retry_task

    @property
    def position(self) -> PlaylistPosition | None:
        return self._playlist.position if self._playlist is not None else None

    # ── Commands ────────────────────────────────────────────────────

    async def select_item(self, item: Item) -> None:
        """Play a single item, replacing whatever is playing."""
        validate_non_empty_string(item.id, "item_id")
        token = self._begin_selection("item", item.id)

        await self._silence()
        if self._is_stale(token, "silence"):
            return

        await self._set_phase(SessionPhase.LOADING, item.title, message=item.title)
        if self._is_stale(token, "presentation"):
            return
        await self._resolve_and_stage(item, token)

    async def select_playlist(self, playlist_id: str) -> None:
        """Load a playlist and play it from the first item, looping forever."""
        playlist_id = validate_non_empty_string(playlist_id, "playlist_id")
        token = self._begin_selection("playlist", playlist_id)

        await self._silence()
        if self._is_stale(token, "silence"):
            return

        await self._set_phase(SessionPhase.LOADING, None, message=playlist_id)
        if self._is_stale(token, "presentation"):
            return

        try:
            listing = await self._catalog.list_playlist(playlist_id)
        except DomainError as exc:
            if self._is_stale(token, "list_playlist"):
                return
            await self._fail(exc)
            return

        if self._is_stale(token, "list_playlist"):
            return

        if listing.is_empty:
            await self._fail(EmptyResultError(ErrorMessages.PLAYLIST_EMPTY))
            return

        self._playlist = PlaylistCursor.from_listing(listing)
        logger.info(LogTemplates.PLAYLIST_LOADED, listing.title, len(self._playlist))
        await self._resolve_and_stage(self._playlist.current(), token)

    async def next(self) -> bool:
        """Skip to the next playlist item. Returns False when no playlist is active."""
        if self._playlist is None:
            logger.debug(LogTemplates.NEXT_IGNORED_NO_PLAYLIST)
            return False

        token = self._invalidate()
        await self._silence()
        if self._is_stale(token, "silence"):
            return True

        await self._advance()
        return True

    async def stop(self) -> None:
        """Silence both channels, drop the playlist and return to IDLE."""
        self._invalidate()
        self._playlist = None
        self._staged = None
        await self._silence()
        logger.info(LogTemplates.SESSION_STOPPED)
        await self._set_phase(SessionPhase.IDLE, None)

    async def close(self) -> None:
        """Stop the session and detach from both channels."""
        await self.stop()
        self._announcement.set_terminal_callback(None)
        self._primary.set_terminal_callback(None)

    # ── Selection bookkeeping ───────────────────────────────────────

    def _invalidate(self) -> int:
        """Start a new generation: drop pending retries and awaited signals."""
        self._token += 1
        self._cancel_retry()
        self._awaited_announcement = None
        self._awaited_primary = None
        return self._token

    def _begin_selection(self, kind: str, target: str) -> int:
        token = self._invalidate()
        self._playlist = None
        self._staged = None
        self._consecutive_failures = 0
        logger.info(LogTemplates.SELECTION_STARTED, token, kind, target)
        return token

    def _is_stale(self, token: int, what: str) -> bool:
        if token != self._token:
            logger.debug(LogTemplates.STALE_RESPONSE_DISCARDED, what, token, self._token)
            return True
        return False

    def _cancel_retry(self) -> None:
        task = self._retry_task
        self._retry_task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _silence(self) -> None:
        await self._announcement.pause()
        await self._primary.pause()

    # ── Resolve, stage, announce, play ──────────────────────────────

    async def _resolve_and_stage(self, item: Item, token: int) -> None:
        try:
            await self._stage_and_announce(item, token)
        except Exception:
            logger.exception(LogTemplates.ITEM_LOAD_CRASHED, item.title)
            if self._is_stale(token, "item load"):
                return
            self._staged = None
            self._awaited_announcement = None
            self._awaited_primary = None
            message = ErrorMessages.ITEM_LOAD_FAILED.format(title=item.title)
            await self._handle_item_failure(UpstreamUnavailableError(message), token)

    async def _stage_and_announce(self, item: Item, token: int) -> None:
        try:
            resolved = await self._catalog.resolve(item.id)
        except DomainError as exc:
            if self._is_stale(token, "resolve"):
                return
            await self._handle_item_failure(exc, token)
            return

        if self._is_stale(token, "resolve"):
            return

        self._staged = StagedTrack.from_resolution(resolved, item.title)
        logger.info(LogTemplates.TRACK_STAGED, self._staged.title)
        await self._announce(token)

    def _render_announcement(self, title: str) -> str:
        """Fill the template, shortening the title so the text fits the speech limit."""
        text = self._template.format(title=title)
        overflow = len(text) - self._speech_max_length
        if overflow <= 0:
            return text
        return self._template.format(title=truncate(title, max(len(title) - overflow, 1)))

    async def _announce(self, token: int) -> None:
        staged = self._staged
        if staged is None:
            return

        text = self._render_announcement(staged.title)
        try:
            clip = await self._synthesizer.synthesize(text, max_length=self._speech_max_length)
        except DomainError as exc:
            if self._is_stale(token, "synthesize"):
                return
            await self._bypass_announcement(staged.title, exc, token)
            return

        if self._is_stale(token, "synthesize"):
            return

        await self._primary.pause()
        if self._is_stale(token, "pause"):
            return

        attempt = self._announcement.load(clip.source)
        self._awaited_announcement = attempt
        try:
            await self._announcement.play()
        except PlaybackFailureError as exc:
            if self._is_stale(token, "announcement play"):
                return
            self._awaited_announcement = None
            await self._bypass_announcement(staged.title, exc, token)
            return

        # The announcement may already have finished and been handled.
        if self._is_stale(token, "announcement play") or self._awaited_announcement != attempt:
            return
        await self._set_phase(SessionPhase.ANNOUNCEMENT_PLAYING, staged.title)

    async def _bypass_announcement(self, title: str, error: DomainError, token: int) -> None:
        logger.warning(LogTemplates.ANNOUNCEMENT_BYPASSED, title, error.message)
        await self._notify_error(ErrorMessages.ANNOUNCEMENT_FAILED, is_fatal=False)
        if self._is_stale(token, "announcement bypass"):
            return
        await self._start_primary(token)

    async def _start_primary(self, token: int) -> None:
        staged, self._staged = self._staged, None
        if staged is None:
            logger.warning(LogTemplates.STAGED_TRACK_MISSING)
            await self._set_phase(SessionPhase.IDLE, None)
            return

        await self._announcement.pause()
        if self._is_stale(token, "pause"):
            return

        attempt = self._primary.load(staged.stream_url)
        self._awaited_primary = attempt
        try:
            await self._primary.play()
        except PlaybackFailureError as exc:
            if self._is_stale(token, "primary play"):
                return
            self._awaited_primary = None
            await self._handle_item_failure(exc, token)
            return

        if self._is_stale(token, "primary play") or self._awaited_primary != attempt:
            return
        logger.info(LogTemplates.PRIMARY_STARTED, staged.title)
        await self._set_phase(SessionPhase.PRIMARY_PLAYING, staged.title)

    # ── Channel signals ─────────────────────────────────────────────

    def _accepts(
        self, signal: TerminalSignal, awaited: int | None, phases: frozenset[SessionPhase]
    ) -> bool:
        if awaited is None or signal.attempt != awaited or self._phase not in phases:
            logger.debug(
                LogTemplates.SIGNAL_IGNORED,
                signal.role.value,
                signal.attempt,
                awaited if awaited is not None else -1,
                self._phase.value,
            )
            return False
        return True

    async def _on_announcement_signal(self, signal: TerminalSignal) -> None:
        if signal.role is not ChannelRole.ANNOUNCEMENT:
            return
        if not self._accepts(signal, self._awaited_announcement, _ANNOUNCEMENT_PHASES):
            return

        self._awaited_announcement = None
        token = self._token
        if signal.is_error:
            error = PlaybackFailureError(signal.error_code)
            logger.warning(LogTemplates.ANNOUNCEMENT_BYPASSED, self._title, error.message)
            await self._notify_error(ErrorMessages.ANNOUNCEMENT_FAILED, is_fatal=False)
            if self._is_stale(token, "announcement signal"):
                return
        await self._start_primary(token)

    async def _on_primary_signal(self, signal: TerminalSignal) -> None:
        if signal.role is not ChannelRole.PRIMARY:
            return
        if not self._accepts(signal, self._awaited_primary, _PRIMARY_PHASES):
            return

        self._awaited_primary = None
        token = self._token
        if signal.is_error:
            await self._handle_item_failure(PlaybackFailureError(signal.error_code), token)
            return

        logger.info(LogTemplates.PRIMARY_ENDED, self._title)
        self._consecutive_failures = 0
        if self._playlist is None:
            await self._set_phase(SessionPhase.FINISHED, self._title)
            return
        await self._advance()

    # ── Advance, recovery, failure ──────────────────────────────────

    async def _advance(self) -> None:
        if self._playlist is None:
            return

        token = self._invalidate()
        self._staged = None
        item = self._playlist.advance()
        logger.info(LogTemplates.PLAYLIST_ADVANCED, self._playlist.position, item.title)

        await self._set_phase(SessionPhase.LOADING, item.title, message=item.title)
        if self._is_stale(token, "presentation"):
            return
        await self._resolve_and_stage(item, token)

    async def _handle_item_failure(self, error: DomainError, token: int) -> None:
        """Recover within a playlist, or fail the session for a single item."""
        if self._playlist is None:
            await self._fail(error, ErrorMessages.PLAYBACK_RETRY_HINT.format(message=error.message))
            return

        self._consecutive_failures += 1
        total = len(self._playlist)
        logger.warning(LogTemplates.ITEM_FAILED, self._consecutive_failures, total, error.message)

        if self._consecutive_failures >= total:
            title = self._playlist.title
            logger.error(LogTemplates.PLAYLIST_EXHAUSTED, title, self._consecutive_failures)
            await self._fail(
                ExhaustedPlaylistError(title, total),
                ErrorMessages.NO_PLAYABLE_ITEMS.format(title=title),
            )
            return

        await self._notify_error(error.message, is_fatal=False)
        if self._is_stale(token, "failure notice"):
            return
        self._schedule_retry(token)

    def _schedule_retry(self, token: int) -> None:
        self._cancel_retry()
        logger.info(LogTemplates.RETRY_SCHEDULED, self._retry_delay)
        self._retry_task = asyncio.create_task(self._retry_after_delay(token))

    async def _retry_after_delay(self, token: int) -> None:
        try:
            await asyncio.sleep(self._retry_delay)
            if self._is_stale(token, "retry"):
                return
            await self._advance()
        finally:
            if self._retry_task is asyncio.current_task():
                self._retry_task = None

    async def _fail(self, error: DomainError, message: str | None = None) -> None:
        self._last_error = error
        self._playlist = None
        self._staged = None
        self._cancel_retry()
        logger.error(LogTemplates.SESSION_FAILED, error.message)
        await self._set_phase(SessionPhase.FAILED, None)
        await self._notify_error(message or error.message, is_fatal=True)

    # ── Presentation ────────────────────────────────────────────────

    async def _set_phase(
        self, phase: SessionPhase, title: str | None, *, message: str | None = None
    ) -> None:
        previous = self._phase
        self._phase = phase
        self._title = title
        position = self.position
        logger.info(LogTemplates.PHASE_CHANGED, previous.value, phase.value, title, position)

        try:
            await self._presentation.on_phase_change(phase, title, position)
        except Exception:
            logger.exception(LogTemplates.PRESENTATION_CALLBACK_ERROR, "on_phase_change")
        try:
            await self._presentation.on_loading_state_change(phase is SessionPhase.LOADING, message)
        except Exception:
            logger.exception(LogTemplates.PRESENTATION_CALLBACK_ERROR, "on_loading_state_change")

    async def _notify_error(self, message: str, *, is_fatal: bool) -> None:
        try:
            await self._presentation.on_error(message, is_fatal)
        except Exception:
            logger.exception(LogTemplates.PRESENTATION_CALLBACK_ERROR, "on_error")

    def __repr__(self) -> str:
        return (
            f"PlaybackOrchestrator(phase={self._phase.value}, title={self._title!r}, "
            f"playlist={self._playlist!r})"
        )

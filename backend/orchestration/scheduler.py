"""
Turn scheduler for streaming multi-party conversations.

This module owns the run loop: it emits the opening turn, then alternates
between an inter-turn delay, a checkpoint where pause and interjections are
applied, next-speaker selection, and streaming the chosen speaker's turn into
the transcript. Pauses only ever take effect at checkpoints, so a streaming
turn is never truncated; stop() is immediate.
"""

import asyncio
import logging
import random
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from core import get_settings
from core.settings import (
    CONFIG_ERROR_DESCRIPTION,
    CONFIG_ERROR_TOAST_MS,
    DEFAULT_FAILURE_DESCRIPTION,
    MIN_PARTICIPANTS,
    TURN_ERROR_TOAST_MS,
    UNEXPECTED_FAILURE_DESCRIPTION,
)
from domain.cancellation import CancellationToken
from domain.contexts import RunState, TurnContext
from domain.enums import ConversationStatus, MessageRole, MessageStatus, StreamEventType, ToastVariant
from domain.errors import ConfigurationError, StreamError
from domain.interfaces import CompletionBackend, NotificationSink, StatusSink, TranscriptSink
from schemas import ChatMessage, Participant, SessionConfig, TranscriptMessage
from services.prompt_builder import build_turn_request, resolve_user_name

from .history import HistoryLog
from .sanitizer import strip_citation_artifacts
from .speaker_selector import SpeakerSelector

logger = logging.getLogger("TurnScheduler")


def create_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_session_config(config: SessionConfig) -> None:
    """
    Check that a session configuration can drive a conversation.

    Raises:
        ConfigurationError: If fewer than two participants are configured
    """
    count = len(config.participants)
    if count < MIN_PARTICIPANTS:
        raise ConfigurationError(f"{count} participant(s) configured, at least {MIN_PARTICIPANTS} required")


class TurnScheduler:
    """
    Drives one conversation session at a time.

    Public control surface: start / pause / resume / stop /
    queue_user_interjection / clear_pending_interjection. All methods must be
    called from the event loop that runs the session.
    """

    def __init__(
        self,
        backend: CompletionBackend,
        session_config: SessionConfig,
        transcript: TranscriptSink,
        status_sink: StatusSink,
        notifier: Optional[NotificationSink] = None,
        selector: Optional[SpeakerSelector] = None,
        rng: Optional[random.Random] = None,
        turn_delay: Optional[float] = None,
        history_limit: Optional[int] = None,
    ):
        """
        Args:
            backend: Completion/streaming backend
            session_config: Scenario to run; snapshotted on each start()
            transcript: Sink receiving appended and updated messages
            status_sink: Sink receiving lifecycle status, errors, and session ids
            notifier: Optional best-effort toast sink
            selector: Speaker selector (built from backend and rng when omitted)
            rng: Random source for the initial speaker and fallback picks
            turn_delay: Inter-turn delay in seconds (defaults from settings)
            history_limit: HistoryLog window (defaults from settings)
        """
        settings = get_settings()
        self.backend = backend
        self.session_config = session_config
        self.transcript = transcript
        self.status_sink = status_sink
        self.notifier = notifier
        self.rng = rng or random.Random()
        self.selector = selector or SpeakerSelector(backend, rng=self.rng)
        self.turn_delay = settings.turn_delay_seconds if turn_delay is None else max(turn_delay, 0.0)
        self.history_limit = history_limit or settings.history_limit

        self.history = HistoryLog(self.history_limit)
        self.status: ConversationStatus = ConversationStatus.IDLE
        self.session_id: Optional[str] = None
        self._state: Optional[RunState] = None

    # ------------------------------------------------------------------
    # Control surface
    # ------------------------------------------------------------------

    def start(self, credential: str) -> Optional[asyncio.Task]:
        """
        Start a new run.

        Returns the running task (the existing one if a run is already active),
        or None when the configuration cannot drive a conversation.
        """
        if self._state is not None and self._state.running:
            return self._state.task

        config = self.session_config
        try:
            validate_session_config(config)
        except ConfigurationError as e:
            logger.warning(f"🚫 Cannot start: {e}")
            self._notify(
                ToastVariant.DANGER,
                "Configuration incomplete",
                CONFIG_ERROR_DESCRIPTION,
                CONFIG_ERROR_TOAST_MS,
            )
            return None

        state = RunState(
            credential=credential,
            config=config,
            user_display_name=resolve_user_name(config),
        )
        self._state = state

        self.history = HistoryLog(self.history_limit)
        self.transcript.clear()
        self._set_status(ConversationStatus.CONNECTING)
        self.session_id = create_id()
        self.status_sink.set_session_id(self.session_id)

        state.active_speaker = self.rng.choice(config.participants)
        logger.info(
            f"🚀 Starting session {self.session_id} | Participants: {[p.display_name for p in config.participants]} "
            f"| Opening speaker: {state.active_speaker.display_name}"
        )

        state.task = asyncio.create_task(self._run(state))
        return state.task

    def pause(self) -> None:
        """Request a pause; it is applied at the next checkpoint between turns."""
        state = self._state
        if state is None or not state.running or state.paused or state.pause_requested:
            return
        state.pause_requested = True
        logger.info("⏸️  Pause requested")

    def resume(self) -> None:
        """Resume a paused run (or withdraw a pending pause request)."""
        state = self._state
        if state is None or not state.running:
            return
        if not state.paused and not state.pause_requested:
            return

        was_paused = state.paused
        state.paused = False
        state.pause_requested = False
        if was_paused:
            self._set_status(ConversationStatus.STREAMING)
            state.wake.set()
        logger.info("▶️  Resumed")

    def stop(self) -> None:
        """Stop immediately: cancel in-flight work and mark the session completed."""
        state = self._state
        if state is None or not state.running:
            return

        state.aborted = True
        state.running = False
        state.paused = False
        state.pause_requested = False
        state.pending_interjection = None
        state.skip_next_delay = False
        if state.token is not None:
            state.token.cancel()
        self._set_status(ConversationStatus.COMPLETED)
        state.wake.set()
        # A task that has not run yet exits on the abort flag at its first step
        if state.started and state.task is not None and not state.task.done():
            state.task.cancel()
        logger.info(f"🛑 Stopped session {self.session_id}")

    def queue_user_interjection(self, text: str, author_name: Optional[str] = None) -> None:
        """
        Queue a user message to be taken into account before the next turn.

        Works whether the run is paused or mid-turn. Only one interjection is
        held; queuing another replaces it.
        """
        state = self._state
        if state is None or not state.running:
            return
        trimmed = (text or "").strip()
        if not trimmed:
            return

        if author_name:
            state.user_display_name = author_name.strip() or state.user_display_name
        state.pending_interjection = trimmed
        state.skip_next_delay = True
        # Cut the inter-turn delay short; a paused loop re-checks and keeps waiting
        state.wake.set()
        logger.info(f"💬 Interjection queued from {state.user_display_name}: {trimmed[:50]}")

    def clear_pending_interjection(self) -> None:
        """Discard a queued interjection without resuming."""
        state = self._state
        if state is None:
            return
        state.pending_interjection = None
        state.skip_next_delay = False
        if state.pause_requested and not state.paused:
            state.pause_requested = False

    def is_running(self) -> bool:
        return self._state is not None and self._state.running

    def is_paused(self) -> bool:
        return self._state is not None and self._state.paused

    # ------------------------------------------------------------------
    # Run loop
    # ------------------------------------------------------------------

    async def _run(self, state: RunState) -> None:
        participants: List[Participant] = list(state.config.participants)
        state.started = True
        try:
            # stop() may have landed before the task got its first step
            if not state.aborted:
                await self._emit_turn(state, TurnContext(speaker=state.active_speaker, is_first=True))

            while not state.aborted:
                await self._inter_turn_delay(state)

                await self._checkpoint(state)
                if state.aborted:
                    break

                self._drain_interjection(state)

                next_speaker: Optional[Participant] = None
                while not state.aborted and next_speaker is None:
                    next_speaker = await self.selector.select_next(
                        state.credential,
                        state.config,
                        state.active_speaker,
                        participants,
                        self.history.entries,
                    )

                    await self._checkpoint(state)
                    if state.aborted:
                        break

                    # History changed while we were choosing; choose again
                    if self._drain_interjection(state):
                        next_speaker = None

                if state.aborted or next_speaker is None:
                    break

                await self._emit_turn(state, TurnContext(speaker=next_speaker))
                state.active_speaker = next_speaker

            if not state.aborted:
                self._set_status(ConversationStatus.COMPLETED)

        except asyncio.CancelledError:
            if not state.aborted:
                raise
            logger.info(f"❌ Run loop cancelled | Session: {self.session_id}")
        except Exception as e:
            logger.error(f"💥 Conversation loop error | Session: {self.session_id} | Error: {e}", exc_info=True)
            message = str(e) or DEFAULT_FAILURE_DESCRIPTION
            self.status = ConversationStatus.ERROR
            self.status_sink.set_error(message)
            self.status_sink.set_status(ConversationStatus.ERROR)
            self._notify(
                ToastVariant.DANGER,
                "Conversation failed",
                str(e) or UNEXPECTED_FAILURE_DESCRIPTION,
                TURN_ERROR_TOAST_MS,
            )
        finally:
            state.running = False
            state.paused = False
            state.pause_requested = False
            state.pending_interjection = None
            state.skip_next_delay = False
            if state.token is not None:
                state.token.cancel()
                state.token = None
            # A newer run may already own the scheduler after stop() + start()
            if self._state is state and self.status not in (ConversationStatus.COMPLETED, ConversationStatus.ERROR):
                self._set_status(ConversationStatus.IDLE)

    async def _inter_turn_delay(self, state: RunState) -> None:
        """Wait the inter-turn delay unless an interjection asked to skip it."""
        if state.skip_next_delay:
            state.skip_next_delay = False
            return

        state.wake.clear()
        try:
            await asyncio.wait_for(state.wake.wait(), timeout=self.turn_delay)
        except asyncio.TimeoutError:
            return

        # Woken early by an interjection
        state.skip_next_delay = False

    async def _checkpoint(self, state: RunState) -> None:
        """
        Apply a requested pause and park until resumed or stopped.

        This is the only place the run transitions to paused.
        """
        if state.pause_requested and not state.paused:
            state.paused = True
            state.pause_requested = False
            self._set_status(ConversationStatus.PAUSED)
            logger.info(f"⏸️  Paused at checkpoint | Session: {self.session_id}")

        while state.paused and not state.aborted:
            state.wake.clear()
            await state.wake.wait()

    def _drain_interjection(self, state: RunState) -> bool:
        """
        Move a pending interjection into the transcript and history.

        Returns:
            True if an interjection was consumed (speaker must be re-selected)
        """
        text = state.pending_interjection
        if not text:
            return False

        state.pending_interjection = None
        state.skip_next_delay = True

        self.transcript.append(
            TranscriptMessage(
                id=create_id(),
                role=MessageRole.USER,
                content=text,
                status=MessageStatus.COMPLETED,
                created_at=_utcnow(),
            )
        )
        self.history.append(state.user_display_name, text)
        logger.info(f"📥 Interjection from {state.user_display_name} added to history")
        return True

    async def _emit_turn(self, state: RunState, turn: TurnContext) -> None:
        """
        Stream one speaker's turn into the transcript.

        Chunks are appended to a raw buffer; the transcript always shows the
        sanitized buffer. Cancellation via stop() ends the turn silently.
        """
        speaker = turn.speaker
        self._set_status(ConversationStatus.CONNECTING if turn.is_first else ConversationStatus.STREAMING)

        message_id = create_id()
        self.transcript.append(
            TranscriptMessage(
                id=message_id,
                role=MessageRole.ASSISTANT,
                speaker_id=speaker.id,
                content="",
                status=MessageStatus.PENDING,
                created_at=_utcnow(),
            )
        )

        request = build_turn_request(
            state.config,
            speaker,
            self.history.entries,
            turn.is_first,
            user_name=state.user_display_name,
        )
        token = CancellationToken()
        state.token = token

        raw = ""
        content = ""
        try:
            async for event in self.backend.stream_completion(state.credential, request, token):
                if token.cancelled:
                    break

                event_type = event.get("type")

                if event_type == StreamEventType.CHUNK:
                    raw += event.get("delta") or ""
                    content = strip_citation_artifacts(raw)
                    self._update_message(message_id, MessageStatus.STREAMING, content)

                elif event_type == StreamEventType.MESSAGE:
                    raw = _message_content(event.get("message"))
                    content = strip_citation_artifacts(raw)
                    self._update_message(message_id, MessageStatus.COMPLETED, content)

                elif event_type == StreamEventType.ERROR:
                    error = event.get("error")
                    raise StreamError(f"Streaming failed: {error}") from (
                        error if isinstance(error, BaseException) else None
                    )

                elif event_type == StreamEventType.DONE:
                    break

            if token.cancelled:
                return

            content = strip_citation_artifacts(content)
            self._update_message(message_id, MessageStatus.COMPLETED, content)
            self.history.append(speaker.display_name, content)
            logger.info(f"✅ Turn complete | Speaker: {speaker.display_name} | {content[:50]}")
        except Exception:
            if token.cancelled:
                logger.info(f"❌ Turn cancelled | Speaker: {speaker.display_name}")
                return
            raise
        finally:
            if state.token is token:
                state.token = None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _update_message(self, message_id: str, status: MessageStatus, content: str) -> None:
        now = _utcnow()
        self.transcript.update(
            message_id,
            lambda prev: prev.model_copy(update={"status": status, "content": content, "created_at": now}),
        )

    def _set_status(self, status: ConversationStatus) -> None:
        self.status = status
        self.status_sink.set_status(status)

    def _notify(self, variant: ToastVariant, title: str, description: str, duration_ms: int) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.notify(variant, title, description, duration_ms)
        except Exception as e:
            logger.debug(f"Notification failed: {e}")


def _message_content(message) -> str:
    """Content of a final stream message given as ChatMessage or dict."""
    if message is None:
        return ""
    if isinstance(message, ChatMessage):
        return message.content
    if isinstance(message, dict):
        return message.get("content") or ""
    return getattr(message, "content", "") or ""

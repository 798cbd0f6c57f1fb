"""
In-memory session store.

Holds the transcript and run status for one session. Implements both the
TranscriptSink and StatusSink protocols, so a TurnScheduler can write to it
directly while UI or export collaborators read snapshots.
"""

import logging
from typing import Callable, List, Optional

from domain.enums import ConversationStatus
from schemas import TranscriptMessage

logger = logging.getLogger("SessionStore")


class SessionStore:
    """Transcript plus lifecycle status for a single conversation session."""

    def __init__(self):
        self._messages: List[TranscriptMessage] = []
        self.status: ConversationStatus = ConversationStatus.IDLE
        self.session_id: Optional[str] = None
        self.last_error: Optional[str] = None

    # ------------------------------------------------------------------
    # Transcript
    # ------------------------------------------------------------------

    @property
    def messages(self) -> List[TranscriptMessage]:
        """Snapshot of the transcript in append order."""
        return list(self._messages)

    def append(self, message: TranscriptMessage) -> None:
        self._messages.append(message)

    def update(self, message_id: str, mutator: Callable[[TranscriptMessage], TranscriptMessage]) -> None:
        """
        Replace a message with the mutator's result.

        Unknown ids are ignored.
        """
        for i, message in enumerate(self._messages):
            if message.id == message_id:
                self._messages[i] = mutator(message)
                return
        logger.debug(f"Update for unknown message id {message_id} ignored")

    def clear(self) -> None:
        self._messages = []

    def get(self, message_id: str) -> Optional[TranscriptMessage]:
        return next((m for m in self._messages if m.id == message_id), None)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def set_status(self, status: ConversationStatus) -> None:
        self.status = status
        if status != ConversationStatus.ERROR:
            self.last_error = None

    def set_error(self, message: Optional[str]) -> None:
        self.last_error = message
        if message:
            self.status = ConversationStatus.ERROR

    def set_session_id(self, session_id: Optional[str]) -> None:
        self.session_id = session_id

    def reset(self) -> None:
        """Return the store to its initial state."""
        self._messages = []
        self.status = ConversationStatus.IDLE
        self.session_id = None
        self.last_error = None

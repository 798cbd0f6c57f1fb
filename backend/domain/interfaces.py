"""
Protocols for the engine's external collaborators.

The engine stays agnostic of how completions are fetched, where the
transcript lives, and how status or notifications are surfaced.
"""

from typing import TYPE_CHECKING, Any, AsyncIterator, Callable, Dict, Optional, Protocol

from .cancellation import CancellationToken
from .enums import ConversationStatus, ToastVariant

if TYPE_CHECKING:
    from schemas import CompletionRequest, CompletionResult, TranscriptMessage


class CompletionBackend(Protocol):
    """Remote text-generation service."""

    async def create_completion(self, credential: str, request: "CompletionRequest") -> "CompletionResult":
        """Non-streaming completion (used for speaker selection)."""
        ...

    def stream_completion(
        self, credential: str, request: "CompletionRequest", token: CancellationToken
    ) -> AsyncIterator[Dict[str, Any]]:
        """
        Streaming completion.

        Yields dict events keyed by "type" (see StreamEventType) until a
        "done" or "error" event.
        """
        ...


class TranscriptSink(Protocol):
    def append(self, message: "TranscriptMessage") -> None: ...

    def update(self, message_id: str, mutator: Callable[["TranscriptMessage"], "TranscriptMessage"]) -> None: ...

    def clear(self) -> None: ...


class StatusSink(Protocol):
    def set_status(self, status: ConversationStatus) -> None: ...

    def set_error(self, message: Optional[str]) -> None: ...

    def set_session_id(self, session_id: Optional[str]) -> None: ...


class NotificationSink(Protocol):
    """Best-effort user-facing notifications (toasts)."""

    def notify(
        self,
        variant: ToastVariant,
        title: str,
        description: str = "",
        duration_ms: Optional[int] = None,
    ) -> None: ...

"""
Domain layer for internal engine data structures.

This package contains enums, run state, the cancellation token, the
exception hierarchy, and the protocols for external collaborators.
"""

from .cancellation import CancellationToken
from .contexts import RunState, TurnContext
from .enums import ConversationStatus, MessageRole, MessageStatus, StreamEventType, ToastVariant
from .errors import ConfigurationError, EngineError, StreamError
from .interfaces import CompletionBackend, NotificationSink, StatusSink, TranscriptSink

__all__ = [
    "CancellationToken",
    "CompletionBackend",
    "ConfigurationError",
    "ConversationStatus",
    "EngineError",
    "MessageRole",
    "MessageStatus",
    "NotificationSink",
    "RunState",
    "StatusSink",
    "StreamError",
    "StreamEventType",
    "ToastVariant",
    "TranscriptSink",
    "TurnContext",
]

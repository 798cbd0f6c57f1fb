"""
Domain enums for type-safe constants.
"""

from enum import Enum


class ConversationStatus(str, Enum):
    """Externally observable lifecycle status of a conversation run."""

    IDLE = "idle"
    CONNECTING = "connecting"
    STREAMING = "streaming"
    PAUSED = "paused"
    COMPLETED = "completed"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


class MessageRole(str, Enum):
    """Author role of a transcript message."""

    ASSISTANT = "assistant"  # Generated by a participant
    USER = "user"  # User interjection

    def __str__(self) -> str:
        return self.value


class MessageStatus(str, Enum):
    """Lifecycle of a transcript message."""

    PENDING = "pending"
    STREAMING = "streaming"
    COMPLETED = "completed"

    def __str__(self) -> str:
        return self.value


class StreamEventType(str, Enum):
    """Event kinds yielded by a streaming completion backend."""

    CHUNK = "chunk"  # {"type": "chunk", "delta": str}
    MESSAGE = "message"  # {"type": "message", "message": ChatMessage | dict}
    DONE = "done"  # {"type": "done"}
    ERROR = "error"  # {"type": "error", "error": Exception}

    def __str__(self) -> str:
        return self.value


class ToastVariant(str, Enum):
    """Severity of a user-facing notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"

    def __str__(self) -> str:
        return self.value

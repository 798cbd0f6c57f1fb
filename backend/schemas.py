from datetime import datetime, timezone
from typing import List, Literal, Optional

from domain.enums import MessageRole, MessageStatus
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ToolServer(BaseModel):
    """A shared external tool server (MCP) that participants may be granted access to."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    url: str


class ToolAccess(BaseModel):
    """Grant of one tool server to a participant, optionally narrowed to specific tools."""

    model_config = ConfigDict(frozen=True)

    server_id: str
    allowed_tool_names: Optional[List[str]] = None


class Participant(BaseModel):
    """
    One conversational agent.

    Immutable for the duration of a session; messages reference it by id.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    persona: str = ""
    model: str
    temperature: Optional[float] = None  # None uses the configured default
    color: Optional[str] = None
    enable_search: bool = False
    enable_code_execution: bool = False
    enable_tool_access: bool = True
    tool_access: List[ToolAccess] = Field(default_factory=list)


class SessionConfig(BaseModel):
    """Scenario parameters for one conversation session."""

    conversation_type: str = "conversation"
    topic: str = ""
    setting: str = ""
    mood: str = "friendly"
    decision_model: str = ""
    user_name: str = ""
    participants: List[Participant] = Field(default_factory=list)
    tool_servers: List[ToolServer] = Field(default_factory=list)


class TranscriptMessage(BaseModel):
    """
    One turn in the transcript.

    Created pending when a turn begins, updated as content streams in,
    and finalized to completed.
    """

    id: str
    role: MessageRole
    speaker_id: Optional[str] = None  # None for user interjections
    content: str = ""
    status: MessageStatus = MessageStatus.PENDING
    created_at: datetime = Field(default_factory=_utcnow)


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str
    name: Optional[str] = None


class ToolSpec(BaseModel):
    """Tool made available to a participant for one request."""

    type: Literal["mcp", "code_execution"]
    server_url: Optional[str] = None
    server_label: Optional[str] = None
    allowed_tool_names: Optional[List[str]] = None


class CompletionRequest(BaseModel):
    model: str
    messages: List[ChatMessage]
    temperature: float
    search_enabled: bool = False
    tools: Optional[List[ToolSpec]] = None

    @field_validator("messages")
    @classmethod
    def validate_messages(cls, v: List[ChatMessage]) -> List[ChatMessage]:
        if not v:
            raise ValueError("a completion request needs at least one message")
        return v


class CompletionResult(BaseModel):
    content: str = ""
    finish_reason: Optional[str] = None

"""
Pytest configuration and shared fixtures for engine tests.

This module provides participants, session configurations, sinks, and a
scripted completion backend that records every request it receives.
"""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Add backend directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from domain.cancellation import CancellationToken
from infrastructure import LoggingNotifier, SessionStore
from schemas import ChatMessage, CompletionRequest, CompletionResult, Participant, SessionConfig


class FakeBackend:
    """
    Scripted completion backend.

    Streams `chunks` (or a single final message containing `reply`) for every
    turn and answers decision requests with `decision`. When `gate` is set, each
    stream pauses after its chunks until the gate is opened; `decision_gate`
    holds decision requests the same way.
    """

    def __init__(
        self,
        reply: str = "ack",
        chunks: Optional[List[str]] = None,
        decision="",
        gate: Optional[asyncio.Event] = None,
        stream_error: Optional[Exception] = None,
        error_event: Optional[Exception] = None,
        decision_gate: Optional[asyncio.Event] = None,
    ):
        self.reply = reply
        self.chunks = chunks or []
        self.decision = decision
        self.gate = gate
        self.stream_error = stream_error
        self.error_event = error_event
        self.decision_gate = decision_gate
        self.stream_requests: List[CompletionRequest] = []
        self.completion_requests: List[CompletionRequest] = []
        self.tokens: List[CancellationToken] = []
        # Decision requests seen when each stream began
        self.decisions_before_stream: List[int] = []
        self.streams_started = 0
        self.streams_finished = 0

    async def create_completion(self, credential: str, request: CompletionRequest) -> CompletionResult:
        self.completion_requests.append(request)
        if self.decision_gate is not None:
            await self.decision_gate.wait()
        if isinstance(self.decision, Exception):
            raise self.decision
        return CompletionResult(content=self.decision, finish_reason="stop")

    async def stream_completion(self, credential: str, request: CompletionRequest, token: CancellationToken):
        self.stream_requests.append(request)
        self.tokens.append(token)
        self.decisions_before_stream.append(len(self.completion_requests))
        self.streams_started += 1

        if self.stream_error is not None:
            raise self.stream_error

        for chunk in self.chunks:
            yield {"type": "chunk", "delta": chunk}
            await asyncio.sleep(0)

        if self.gate is not None:
            await self.gate.wait()

        if self.error_event is not None:
            yield {"type": "error", "error": self.error_event}
            return

        content = "".join(self.chunks) if self.chunks else self.reply
        # Counted before the final events; consumers stop iterating at "done"
        self.streams_finished += 1
        yield {"type": "message", "message": ChatMessage(role="assistant", content=content)}
        yield {"type": "done"}

    def prompt_text(self, request: CompletionRequest) -> str:
        """User-role content of a turn request."""
        return request.messages[1].content if len(request.messages) > 1 else ""


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Reset settings and config caches so environment changes never leak between tests."""
    from config import clear_config_cache
    from core import reset_settings

    monkeypatch.delenv("USER_NAME", raising=False)
    reset_settings()
    clear_config_cache()
    yield
    reset_settings()
    clear_config_cache()


@pytest.fixture
def alice() -> Participant:
    return Participant(id="p-alice", display_name="Alice", persona="a cheerful botanist", model="grok-4")


@pytest.fixture
def bob() -> Participant:
    return Participant(id="p-bob", display_name="Bob", persona="a grumpy sailor", model="grok-3-mini")


@pytest.fixture
def carol() -> Participant:
    return Participant(id="p-carol", display_name="Carol", persona="", model="grok-3", temperature=0.5)


@pytest.fixture
def two_party_config(alice, bob) -> SessionConfig:
    return SessionConfig(
        conversation_type="debate",
        topic="tides",
        setting="a lighthouse",
        mood="playful",
        decision_model="grok-4",
        participants=[alice, bob],
    )


@pytest.fixture
def three_party_config(alice, bob, carol) -> SessionConfig:
    return SessionConfig(
        conversation_type="conversation",
        topic="gardening",
        setting="a greenhouse",
        mood="friendly",
        decision_model="grok-4",
        participants=[alice, bob, carol],
    )


@pytest.fixture
def session_store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def notifier() -> LoggingNotifier:
    return LoggingNotifier()


@pytest.fixture
def wait_until():
    """Return an async helper that polls a predicate until it holds or times out."""

    async def _wait_until(predicate, timeout: float = 2.0, interval: float = 0.001):
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not met before timeout")
            await asyncio.sleep(interval)

    return _wait_until

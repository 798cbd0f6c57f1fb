"""
Consolidated context data structures.

Contains the per-run state owned by a TurnScheduler and the per-turn context
passed through emission.
"""

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .cancellation import CancellationToken

if TYPE_CHECKING:
    from schemas import Participant, SessionConfig


@dataclass
class RunState:
    """
    Mutable state of one conversation run.

    Created on start() and discarded when the loop exits. Owned exclusively
    by a single TurnScheduler instance.

    Attributes:
        credential: Credential forwarded to the completion backend
        config: Snapshot of the session configuration for this run
        user_display_name: Name attributed to user interjections
        running: True until the loop exits
        paused: True while the loop is parked at a checkpoint
        pause_requested: Pause asked for, applied at the next checkpoint
        aborted: Set by stop(); the loop exits at the next await
        started: Set once the loop task has begun executing
        active_speaker: Participant who spoke last (or is speaking)
        pending_interjection: Single-slot queue for a user interjection
        skip_next_delay: Skip the next inter-turn delay
        token: Cancellation token of the in-flight streaming call
        task: The asyncio task running the loop
        wake: Wakes the loop from the inter-turn delay or a pause
    """

    credential: str
    config: "SessionConfig"
    user_display_name: str
    running: bool = True
    paused: bool = False
    pause_requested: bool = False
    aborted: bool = False
    started: bool = False
    active_speaker: Optional["Participant"] = None
    pending_interjection: Optional[str] = None
    skip_next_delay: bool = False
    token: Optional[CancellationToken] = None
    task: Optional["asyncio.Task"] = None
    wake: asyncio.Event = field(default_factory=asyncio.Event)


@dataclass
class TurnContext:
    """
    Parameters for emitting one turn.

    Attributes:
        speaker: Participant generating the turn
        is_first: True for the session's opening turn
    """

    speaker: "Participant"
    is_first: bool = False

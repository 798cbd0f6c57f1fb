"""
Conversation orchestration module for multi-party streaming sessions.

This module provides the turn scheduler, next-speaker selection, the rolling
history buffer, and citation stripping for generated text.
"""

from .history import HistoryLog
from .sanitizer import strip_citation_artifacts
from .scheduler import TurnScheduler
from .speaker_selector import SpeakerSelector, parse_speaker_choice, pick_random_participant

__all__ = [
    "HistoryLog",
    "SpeakerSelector",
    "TurnScheduler",
    "parse_speaker_choice",
    "pick_random_participant",
    "strip_citation_artifacts",
]

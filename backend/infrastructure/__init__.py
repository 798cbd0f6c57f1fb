"""
Reference implementations of the engine's sinks.
"""

from .notifications import LoggingNotifier, Toast
from .session_store import SessionStore

__all__ = ["LoggingNotifier", "SessionStore", "Toast"]

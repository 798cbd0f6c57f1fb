"""
Engine exception hierarchy.
"""


class EngineError(Exception):
    """Base class for conversation engine errors."""


class ConfigurationError(EngineError):
    """The session configuration cannot drive a conversation (e.g. fewer than two participants)."""


class StreamError(EngineError):
    """The streaming backend reported an error event while a turn was being generated."""

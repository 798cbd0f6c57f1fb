"""
Core engine infrastructure: settings and logging.
"""

from .logging import get_logger, setup_logging
from .settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_logger",
    "get_settings",
    "reset_settings",
    "setup_logging",
]

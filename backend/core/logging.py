"""
Logging setup for the conversation engine.

Components log through named loggers ("TurnScheduler", "SpeakerSelector", ...).
setup_logging() configures the root handler once, using the level from settings.
"""

import logging
import sys
from typing import Optional

from .settings import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
DATE_FORMAT = "%H:%M:%S"

_configured = False


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for the engine.

    Args:
        level: Optional level name overriding LOG_LEVEL from settings
    """
    global _configured
    if _configured:
        return

    log_level = (level or get_settings().log_level).upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(log_level)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a named logger."""
    return logging.getLogger(name)

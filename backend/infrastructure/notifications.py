"""
Notification sink that records toasts and mirrors them to the log.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from domain.enums import ToastVariant

logger = logging.getLogger("Notifications")

DEFAULT_TOAST_DURATION_MS = 4000


@dataclass
class Toast:
    """A user-facing notification."""

    variant: ToastVariant
    title: str
    description: str = ""
    duration_ms: int = DEFAULT_TOAST_DURATION_MS


class LoggingNotifier:
    """Keeps the most recent toasts in memory and logs each one."""

    def __init__(self, max_toasts: int = 20):
        self.max_toasts = max_toasts
        self.toasts: List[Toast] = []

    def notify(
        self,
        variant: ToastVariant,
        title: str,
        description: str = "",
        duration_ms: Optional[int] = None,
    ) -> None:
        toast = Toast(
            variant=variant,
            title=title,
            description=description,
            duration_ms=duration_ms if duration_ms is not None else DEFAULT_TOAST_DURATION_MS,
        )
        self.toasts.append(toast)
        if len(self.toasts) > self.max_toasts:
            del self.toasts[: len(self.toasts) - self.max_toasts]

        level = logging.WARNING if variant == ToastVariant.DANGER else logging.INFO
        logger.log(level, f"🔔 [{variant}] {title}: {description}")

    def dismiss_all(self) -> None:
        self.toasts.clear()

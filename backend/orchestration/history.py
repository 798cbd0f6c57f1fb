"""
Rolling conversation history used for prompt construction.
"""

import logging
from typing import List, Optional

from core.settings import FALLBACK_SPEAKER_NAME

logger = logging.getLogger("HistoryLog")

DEFAULT_HISTORY_LIMIT = 12


class HistoryLog:
    """
    Bounded, append-only list of "Name: text" entries.

    Once more than `limit` entries are held, the oldest are evicted first.
    The window only bounds prompt size; the transcript keeps everything.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT):
        if limit < 1:
            raise ValueError("history limit must be at least 1")
        self.limit = limit
        self._entries: List[str] = []

    def append(self, name: str, content: Optional[str]) -> bool:
        """
        Record one entry.

        Args:
            name: Speaker display name (blank names become "Speaker")
            content: Message text; empty or whitespace-only text is skipped

        Returns:
            True if an entry was recorded
        """
        text = (content or "").strip()
        if not text:
            return False

        speaker = (name or "").strip() or FALLBACK_SPEAKER_NAME
        self._entries.append(f"{speaker}: {text}")
        self._trim()
        return True

    def _trim(self) -> None:
        overflow = len(self._entries) - self.limit
        if overflow > 0:
            del self._entries[:overflow]

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

"""
Unit tests for HistoryLog.
"""

import pytest
from orchestration.history import HistoryLog


class TestHistoryLogAppend:
    """Tests for appending entries."""

    def test_formats_name_and_text(self):
        history = HistoryLog()

        assert history.append("Alice", "Hello there") is True
        assert history.entries == ["Alice: Hello there"]

    def test_trims_name_and_content(self):
        history = HistoryLog()
        history.append("  Bob ", "  Ahoy.  ")

        assert history.entries == ["Bob: Ahoy."]

    def test_blank_name_uses_fallback_label(self):
        history = HistoryLog()
        history.append("   ", "Who said that?")

        assert history.entries == ["Speaker: Who said that?"]

    @pytest.mark.parametrize("content", ["", "   ", "\n\t", None])
    def test_skips_empty_content(self, content):
        history = HistoryLog()

        assert history.append("Alice", content) is False
        assert len(history) == 0


class TestHistoryLogWindow:
    """Tests for the bounded window."""

    def test_never_exceeds_limit(self):
        history = HistoryLog(limit=12)
        for i in range(40):
            history.append("Alice", f"message {i}")
            assert len(history) <= 12

    def test_evicts_oldest_first(self):
        history = HistoryLog(limit=12)
        for i in range(15):
            history.append("Alice", f"message {i}")

        assert history.entries[0] == "Alice: message 3"
        assert history.entries[-1] == "Alice: message 14"

    def test_entries_is_a_copy(self):
        history = HistoryLog()
        history.append("Alice", "hi")

        history.entries.append("tampered")

        assert history.entries == ["Alice: hi"]

    def test_rejects_non_positive_limit(self):
        with pytest.raises(ValueError):
            HistoryLog(limit=0)

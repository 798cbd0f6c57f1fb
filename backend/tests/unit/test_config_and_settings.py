"""
Unit tests for settings loading and the YAML config cache.
"""

import logging
import os

import pytest
from config import get_cached_config, get_decision_prompt_templates, get_turn_prompt_templates
from core import get_logger, get_settings, reset_settings, setup_logging
from pydantic import ValidationError


class TestSettings:
    """Tests for Settings and the get_settings singleton."""

    def test_defaults(self):
        settings = get_settings()

        assert settings.user_name == "User"
        assert settings.turn_delay_seconds == pytest.approx(1.5)
        assert settings.history_limit == 12
        assert settings.prompt_history_window == 6
        assert settings.decision_temperature == pytest.approx(0.3)
        assert settings.default_decision_model == "grok-4"

    def test_singleton(self):
        assert get_settings() is get_settings()

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("USER_NAME", "Riley")
        monkeypatch.setenv("TURN_DELAY_SECONDS", "0.25")
        reset_settings()

        settings = get_settings()

        assert settings.user_name == "Riley"
        assert settings.turn_delay_seconds == pytest.approx(0.25)

    def test_negative_delay_clamped(self, monkeypatch):
        monkeypatch.setenv("TURN_DELAY_SECONDS", "-3")
        reset_settings()

        assert get_settings().turn_delay_seconds == 0.0

    def test_invalid_log_level_defaults_to_info(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        reset_settings()

        assert get_settings().log_level == "INFO"

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        reset_settings()

        assert get_settings().log_level == "DEBUG"

    def test_history_limit_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("HISTORY_LIMIT", "0")
        reset_settings()

        with pytest.raises(ValidationError):
            get_settings()


class TestConfigCache:
    """Tests for get_cached_config."""

    def test_returns_independent_copies(self, tmp_path):
        path = tmp_path / "prompts.yaml"
        path.write_text("greeting:\n  text: hello\n", encoding="utf-8")

        first = get_cached_config(path)
        first["greeting"]["text"] = "mutated"

        assert get_cached_config(path)["greeting"]["text"] == "hello"

    def test_reloads_when_mtime_changes(self, tmp_path):
        path = tmp_path / "prompts.yaml"
        path.write_text("value: 1\n", encoding="utf-8")
        assert get_cached_config(path)["value"] == 1

        path.write_text("value: 2\n", encoding="utf-8")
        stat = path.stat()
        os.utime(path, (stat.st_atime, stat.st_mtime + 10))

        assert get_cached_config(path)["value"] == 2

    def test_force_reload(self, tmp_path):
        path = tmp_path / "prompts.yaml"
        path.write_text("value: 1\n", encoding="utf-8")
        get_cached_config(path)

        stat = path.stat()
        path.write_text("value: 3\n", encoding="utf-8")
        os.utime(path, (stat.st_atime, stat.st_mtime))

        assert get_cached_config(path)["value"] == 1
        assert get_cached_config(path, force_reload=True)["value"] == 3

    def test_empty_file_is_empty_mapping(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert get_cached_config(path) == {}

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError):
            get_cached_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_cached_config(tmp_path / "nope.yaml")


class TestPromptTemplates:
    """Tests for the bundled prompt templates."""

    def test_turn_templates_present(self):
        templates = get_turn_prompt_templates()

        for key in ("system", "opening", "follow_up", "history_section", "stay_on_topic", "address_user"):
            assert key in templates

    def test_decision_templates_present(self):
        templates = get_decision_prompt_templates()

        assert "<name>|<reason>" in templates["request"]


class TestLogging:
    """Tests for logging setup."""

    def test_setup_logging_configures_root_once(self, monkeypatch):
        import core.logging as engine_logging

        root = logging.getLogger()
        original_level = root.level
        monkeypatch.setattr(engine_logging, "_configured", False)
        monkeypatch.setattr(root, "handlers", [])
        try:
            setup_logging("debug")
            setup_logging("error")

            assert len(root.handlers) == 1
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(original_level)

    def test_get_logger_is_named(self):
        assert get_logger("TurnScheduler").name == "TurnScheduler"

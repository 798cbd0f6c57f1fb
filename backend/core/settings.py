"""
Centralized engine settings using Pydantic BaseSettings.

This module provides type-safe access to environment variables with validation.
All settings are loaded once, on first use, through get_settings().
"""

import logging
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ============================================================================
# Engine Constants
# ============================================================================

# Label used in history when a speaker's display name is blank
FALLBACK_SPEAKER_NAME = "Speaker"

# Toast durations (milliseconds)
CONFIG_ERROR_TOAST_MS = 5000
TURN_ERROR_TOAST_MS = 6000

# User-facing error descriptions
CONFIG_ERROR_DESCRIPTION = "Add at least two participants before starting a conversation."
DEFAULT_FAILURE_DESCRIPTION = "Conversation failed"
UNEXPECTED_FAILURE_DESCRIPTION = "Unexpected error occurred."

# Minimum participants for a session
MIN_PARTICIPANTS = 2

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _get_project_root() -> Path:
    """Get the project root directory (parent of backend/)."""
    return Path(__file__).parent.parent.parent  # backend/core -> backend -> project_root


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    All settings have sensible defaults and are validated on startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # User configuration
    user_name: str = "User"

    # Turn pacing
    turn_delay_seconds: float = 1.5

    # Rolling history
    history_limit: int = 12
    prompt_history_window: int = 6

    # Speaker selection
    decision_temperature: float = 0.3
    default_decision_model: str = "grok-4"

    # Participant defaults
    default_participant_temperature: float = 0.8

    # Logging
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Optional[str]) -> str:
        """Normalize LOG_LEVEL, defaulting to INFO on unknown values."""
        if not v:
            return "INFO"
        v_upper = str(v).upper()
        if v_upper in _VALID_LOG_LEVELS:
            return v_upper
        logging.warning(f"Invalid LOG_LEVEL value: {v}. Defaulting to 'INFO'.")
        return "INFO"

    @field_validator("turn_delay_seconds", mode="after")
    @classmethod
    def validate_turn_delay(cls, v: float) -> float:
        """Negative delays make no sense; clamp them to zero."""
        return max(v, 0.0)

    @field_validator("history_limit", "prompt_history_window", mode="after")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v < 1:
            raise ValueError("history windows must hold at least one entry")
        return v

    @property
    def project_root(self) -> Path:
        """Path to the project root directory (parent of backend/)."""
        return _get_project_root()


# Singleton instance - load settings once on first access
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the engine settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        env_path = _get_project_root() / ".env"

        # Load with explicit env file path if it exists
        if env_path.exists():
            _settings = Settings(_env_file=str(env_path))
        else:
            _settings = Settings()

    return _settings


def reset_settings() -> None:
    """
    Reset the settings singleton (useful for testing).
    """
    global _settings
    _settings = None

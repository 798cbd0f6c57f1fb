"""
Configuration file loaders.

Provides functions to load specific configuration files with caching.
The cache is automatically refreshed when the underlying YAML file is modified.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from .cache import get_cached_config

logger = logging.getLogger(__name__)

# Configuration file paths
CONFIG_DIR = Path(__file__).parent
PROMPTS_CONFIG = CONFIG_DIR / "prompts.yaml"


def get_prompts_config() -> Dict[str, Any]:
    """
    Load the prompt templates from prompts.yaml.

    Returns:
        Dictionary with "turn_prompt" and "decision_prompt" template sections
    """
    return get_cached_config(PROMPTS_CONFIG)


def get_turn_prompt_templates() -> Dict[str, str]:
    """Templates used to build a speaker's turn prompt."""
    return get_prompts_config().get("turn_prompt", {})


def get_decision_prompt_templates() -> Dict[str, str]:
    """Templates used to build the next-speaker decision prompt."""
    return get_prompts_config().get("decision_prompt", {})

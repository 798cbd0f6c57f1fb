"""
Configuration module for prompt templates.

Prompt wording is kept in YAML (prompts.yaml) and loaded through an
mtime-invalidated cache.
"""

from .cache import clear_config_cache, get_cached_config
from .loaders import get_decision_prompt_templates, get_prompts_config, get_turn_prompt_templates

__all__ = [
    "clear_config_cache",
    "get_cached_config",
    "get_decision_prompt_templates",
    "get_prompts_config",
    "get_turn_prompt_templates",
]

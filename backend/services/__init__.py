"""
Services for building completion requests.
"""

from .prompt_builder import (
    build_decision_prompt,
    build_decision_request,
    build_prompt,
    build_system_message,
    build_tools_for_participant,
    build_turn_request,
    resolve_decision_model,
    resolve_user_name,
)

__all__ = [
    "build_decision_prompt",
    "build_decision_request",
    "build_prompt",
    "build_system_message",
    "build_tools_for_participant",
    "build_turn_request",
    "resolve_decision_model",
    "resolve_user_name",
]

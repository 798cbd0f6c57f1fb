"""
Prompt builder service for constructing per-turn and decision prompts.

Prompt wording comes from config/prompts.yaml; this module fills the
templates from the session configuration and the rolling history.
"""

import math
from typing import List, Optional, Sequence

from config import get_decision_prompt_templates, get_turn_prompt_templates
from core import get_settings
from schemas import ChatMessage, CompletionRequest, Participant, SessionConfig, ToolSpec


def resolve_user_name(config: SessionConfig) -> str:
    """Display name for user-authored turns, falling back to USER_NAME."""
    return (config.user_name or "").strip() or get_settings().user_name


def resolve_decision_model(config: SessionConfig) -> str:
    return (config.decision_model or "").strip() or get_settings().default_decision_model


def build_system_message(speaker: Participant) -> ChatMessage:
    """
    Build the system instruction that fixes the speaker into persona.

    Args:
        speaker: Participant taking the turn

    Returns:
        System-role ChatMessage
    """
    templates = get_turn_prompt_templates()
    persona = speaker.persona.strip() or speaker.display_name
    lines = templates["system"]
    if isinstance(lines, str):
        lines = [lines]
    content = " ".join(line.format(persona=persona) for line in lines)
    return ChatMessage(role="system", content=content)


def build_prompt(
    config: SessionConfig,
    speaker: Participant,
    history: Sequence[str],
    is_first: bool,
    user_name: Optional[str] = None,
    history_window: Optional[int] = None,
) -> List[ChatMessage]:
    """
    Build the messages for one speaker's turn.

    The opening turn introduces the scenario and the other participants.
    Later turns include the most recent history entries and, when the latest
    entry came from the user, an instruction to address them by name. Only the
    latest entry is inspected for that rule.

    Args:
        config: Session configuration
        speaker: Participant taking the turn
        history: Rolling "Name: text" entries, oldest first
        is_first: True for the session's opening turn
        user_name: Name attributed to user interjections (defaults from config)
        history_window: Number of entries to include (defaults from settings)

    Returns:
        [system message, user message]
    """
    templates = get_turn_prompt_templates()
    system_message = build_system_message(speaker)

    topic = config.topic.strip() or templates["default_topic"]
    setting = config.setting.strip() or templates["default_setting"]

    if is_first:
        others = ", ".join(p.display_name for p in config.participants if p.id != speaker.id)
        content = templates["opening"].format(
            conversation_type=config.conversation_type,
            topic=topic,
            others=others,
            setting=setting,
            mood=config.mood,
        )
        return [system_message, ChatMessage(role="user", content=content)]

    window = history_window if history_window is not None else get_settings().prompt_history_window
    user_name = user_name or resolve_user_name(config)

    recent_history = "\n".join(history[-window:]) if window > 0 else ""
    latest_entry = history[-1] if history else ""
    user_interjected = latest_entry.startswith(f"{user_name}:")

    history_section = templates["history_section"].format(history=recent_history) if recent_history else ""

    instructions = [templates["stay_on_topic"]]
    if user_interjected:
        instructions.append(templates["address_user"].format(user_name=user_name))

    content = templates["follow_up"].format(
        conversation_type=config.conversation_type,
        topic=topic,
        setting=setting,
        mood=config.mood,
        history_section=history_section,
        instruction=" ".join(instructions),
    )
    return [system_message, ChatMessage(role="user", content=content)]


def build_tools_for_participant(participant: Participant, config: SessionConfig) -> List[ToolSpec]:
    """
    Collect the tools a participant may call.

    Tool server grants are resolved against the session's tool servers;
    grants for unknown servers are skipped.
    """
    tools: List[ToolSpec] = []

    if participant.enable_tool_access and participant.tool_access and config.tool_servers:
        servers = {server.id: server for server in config.tool_servers}
        for access in participant.tool_access:
            server = servers.get(access.server_id)
            if server is None:
                continue
            tools.append(
                ToolSpec(
                    type="mcp",
                    server_url=server.url,
                    server_label=server.label,
                    allowed_tool_names=list(access.allowed_tool_names) if access.allowed_tool_names else None,
                )
            )

    if participant.enable_code_execution:
        tools.append(ToolSpec(type="code_execution"))

    return tools


def build_turn_request(
    config: SessionConfig,
    speaker: Participant,
    history: Sequence[str],
    is_first: bool,
    user_name: Optional[str] = None,
) -> CompletionRequest:
    """Package a speaker's turn prompt with their model, temperature, and tools."""
    settings = get_settings()
    temperature = speaker.temperature
    if temperature is None or not math.isfinite(temperature):
        temperature = settings.default_participant_temperature

    tools = build_tools_for_participant(speaker, config)

    return CompletionRequest(
        model=speaker.model,
        messages=build_prompt(config, speaker, history, is_first, user_name=user_name),
        temperature=temperature,
        search_enabled=speaker.enable_search,
        tools=tools or None,
    )


def build_decision_prompt(
    config: SessionConfig, participants: Sequence[Participant], history: Sequence[str]
) -> List[ChatMessage]:
    """
    Build the prompt asking the decision model for the next speaker.

    The model is asked to answer "<name>|<reason>".
    """
    templates = get_decision_prompt_templates()
    names = ", ".join(p.display_name for p in participants)
    sections = [
        templates["request"].format(conversation_type=config.conversation_type),
        templates["participants"].format(names=names),
        templates["history"].format(history="\n".join(history)),
    ]
    return [ChatMessage(role="user", content="\n\n".join(sections))]


def build_decision_request(
    config: SessionConfig, participants: Sequence[Participant], history: Sequence[str]
) -> CompletionRequest:
    return CompletionRequest(
        model=resolve_decision_model(config),
        messages=build_decision_prompt(config, participants, history),
        temperature=get_settings().decision_temperature,
        search_enabled=False,
    )

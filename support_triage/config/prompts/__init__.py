"""Prompt builders for the triage agents."""

from support_triage.config.prompts.action import build_action_system_prompt, build_action_user_prompt
from support_triage.config.prompts.categorization import (
    build_categorization_system_prompt,
    build_categorization_user_prompt,
)
from support_triage.config.prompts.urgency import build_urgency_system_prompt, build_urgency_user_prompt

__all__ = [
    "build_action_system_prompt",
    "build_action_user_prompt",
    "build_categorization_system_prompt",
    "build_categorization_user_prompt",
    "build_urgency_system_prompt",
    "build_urgency_user_prompt",
]

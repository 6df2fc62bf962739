"""Action recommendation service module."""

from support_triage.services.action.models import ActionResult
from support_triage.services.action.recommender import (
    ActionRecommender,
    find_escalation_trigger,
    select_action,
    should_escalate,
)

__all__ = [
    "ActionRecommender",
    "ActionResult",
    "find_escalation_trigger",
    "select_action",
    "should_escalate",
]

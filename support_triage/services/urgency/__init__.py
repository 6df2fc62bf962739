"""Urgency scoring service module."""

from support_triage.services.urgency.models import UrgencyResult
from support_triage.services.urgency.scorer import (
    UrgencyScorer,
    calculate_urgency_level,
    score_urgency_with_rules,
)

__all__ = ["UrgencyResult", "UrgencyScorer", "calculate_urgency_level", "score_urgency_with_rules"]

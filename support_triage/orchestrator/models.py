"""Triage record handed to callers."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from support_triage.config.constants import Category, UrgencyLevel
from support_triage.services.action.models import ActionResult
from support_triage.services.categorization.models import CategoryResult
from support_triage.services.signals.models import Signals
from support_triage.services.urgency.models import UrgencyResult


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TriageRecord:
    """Assembled verdict for one analyzed message."""

    message: str
    category: Category
    reasoning: str
    confidence: float
    urgency: UrgencyLevel
    urgency_score: int
    urgency_reasoning: str
    signals: Signals
    recommended_action: str
    escalate: bool
    escalate_reason: str | None = None
    timestamp: datetime = field(default_factory=_utcnow)

    @classmethod
    def assemble(
        cls,
        message: str,
        category: CategoryResult,
        urgency: UrgencyResult,
        action: ActionResult,
        timestamp: datetime | None = None,
    ) -> "TriageRecord":
        return cls(
            message=message,
            category=category.category,
            reasoning=category.reasoning,
            confidence=category.confidence,
            urgency=urgency.level,
            urgency_score=urgency.score,
            urgency_reasoning=urgency.reasoning,
            signals=urgency.signals,
            recommended_action=action.action,
            escalate=action.escalate,
            escalate_reason=action.escalate_reason,
            timestamp=timestamp or _utcnow(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the shape the history store persists."""
        return {
            "message": self.message,
            "category": self.category.value,
            "reasoning": self.reasoning,
            "confidence": self.confidence,
            "urgency": self.urgency.value,
            "urgencyScore": self.urgency_score,
            "urgencyReasoning": self.urgency_reasoning,
            "recommendedAction": self.recommended_action,
            "escalate": self.escalate,
            "escalateReason": self.escalate_reason,
            "timestamp": self.timestamp.isoformat(),
        }

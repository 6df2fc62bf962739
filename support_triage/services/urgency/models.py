"""Urgency service models."""

from dataclasses import dataclass

from support_triage.config.constants import ResultSource, UrgencyLevel, clamp_score, level_for_score
from support_triage.services.signals.models import Signals


@dataclass(frozen=True)
class UrgencyResult:
    """Result from urgency scoring.

    ``level`` is always the level derived from ``score``; construction with a
    mismatching pair is rejected so both scoring paths stay in sync.
    """

    level: UrgencyLevel
    score: int  # 0 - 100
    reasoning: str
    signals: Signals
    source: ResultSource = ResultSource.AI

    def __post_init__(self) -> None:
        if not 0 <= self.score <= 100:
            raise ValueError(f"urgency score must be within [0, 100], got {self.score}")
        expected = level_for_score(self.score)
        if self.level is not expected:
            raise ValueError(
                f"urgency level {self.level.value} does not match score {self.score} "
                f"(expected {expected.value})"
            )

    @classmethod
    def from_score(
        cls,
        score: float,
        reasoning: str,
        signals: Signals,
        source: ResultSource,
    ) -> "UrgencyResult":
        """Build a result whose level is derived from the clamped score."""
        clamped = clamp_score(score)
        return cls(
            level=level_for_score(clamped),
            score=clamped,
            reasoning=reasoning,
            signals=signals,
            source=source,
        )

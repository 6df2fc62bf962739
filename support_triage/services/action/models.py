"""Action recommendation service models."""

from dataclasses import dataclass

from support_triage.config.constants import ResultSource


@dataclass(frozen=True)
class ActionResult:
    """Recommended next step and escalation verdict."""

    action: str
    escalate: bool
    escalate_reason: str | None = None
    source: ResultSource = ResultSource.AI

    def __post_init__(self) -> None:
        if self.escalate and not self.escalate_reason:
            raise ValueError("escalate_reason is required when escalate is true")
        if not self.escalate and self.escalate_reason is not None:
            raise ValueError("escalate_reason must be absent when escalate is false")

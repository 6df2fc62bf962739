"""Analysis state model."""

from dataclasses import dataclass
from typing import Optional

from support_triage.config.constants import AnalysisStatus
from support_triage.orchestrator.models import TriageRecord
from support_triage.services.action.models import ActionResult
from support_triage.services.categorization.models import CategoryResult
from support_triage.services.urgency.models import UrgencyResult


@dataclass
class AnalysisState:
    """Working state of one orchestrated analysis."""

    message: str = ""
    status: AnalysisStatus = AnalysisStatus.IDLE

    # Stage 1: Categorization and urgency (concurrent)
    category_result: Optional[CategoryResult] = None
    urgency_result: Optional[UrgencyResult] = None

    # Stage 2: Action
    action_result: Optional[ActionResult] = None

    # Final record
    record: Optional[TriageRecord] = None
    error: Optional[str] = None

    def discard_results(self) -> None:
        """Drop partial results, e.g. after cancellation."""
        self.category_result = None
        self.urgency_result = None
        self.action_result = None
        self.record = None

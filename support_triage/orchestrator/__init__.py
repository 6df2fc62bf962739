"""Analysis orchestration module."""

from support_triage.orchestrator.models import TriageRecord
from support_triage.orchestrator.pipeline import AnalysisCancelledError, AnalysisOrchestrator

__all__ = ["AnalysisCancelledError", "AnalysisOrchestrator", "TriageRecord"]

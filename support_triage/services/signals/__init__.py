"""Signal detection service module."""

from support_triage.services.signals.detector import contains_any, detect_signals
from support_triage.services.signals.models import Signals

__all__ = ["Signals", "contains_any", "detect_signals"]

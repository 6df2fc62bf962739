"""
Constants, enums, and static values.
"""

from enum import Enum


class Category(str, Enum):
    """Closed set of message categories."""

    BILLING_ISSUE = "Billing Issue"
    TECHNICAL_PROBLEM = "Technical Problem"
    FEATURE_REQUEST = "Feature Request"
    GENERAL_INQUIRY = "General Inquiry"
    UNKNOWN = "Unknown"


class UrgencyLevel(str, Enum):
    """Closed set of urgency levels."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class ResultSource(str, Enum):
    """Which computation path produced a result."""

    AI = "ai"
    FALLBACK = "fallback"


class AnalysisStatus(str, Enum):
    """Orchestrator state machine."""

    IDLE = "idle"
    RUNNING = "running"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    FAILED = "failed"


class AnalysisStage(str, Enum):
    """Orchestrated analysis stages."""

    CLASSIFICATION = "classification"
    ACTION = "action"
    RECORD = "record"


class AnalysisStageDescription(str, Enum):
    """Analysis stage descriptions."""

    CLASSIFICATION = "Categorize the message and score its urgency concurrently"
    ACTION = "Recommend the next action and decide on escalation"
    RECORD = "Assemble the triage record"


# Score thresholds shared by the AI and rule-based urgency paths
HIGH_URGENCY_THRESHOLD = 70
MEDIUM_URGENCY_THRESHOLD = 30
MIN_URGENCY_SCORE = 0
MAX_URGENCY_SCORE = 100

# Messages this short are never flagged as shouting
ALL_CAPS_MIN_LENGTH = 10


def level_for_score(score: int) -> UrgencyLevel:
    """Map a 0-100 urgency score to its level."""
    if score >= HIGH_URGENCY_THRESHOLD:
        return UrgencyLevel.HIGH
    if score >= MEDIUM_URGENCY_THRESHOLD:
        return UrgencyLevel.MEDIUM
    return UrgencyLevel.LOW


def clamp_score(score: float) -> int:
    """Clamp a score into the 0-100 range."""
    return int(max(MIN_URGENCY_SCORE, min(MAX_URGENCY_SCORE, score)))


def get_available_categories() -> list[str]:
    """Category names exposed for UI filtering."""
    return [category.value for category in Category]


def get_urgency_levels() -> list[str]:
    """Urgency level names exposed for UI filtering."""
    return [level.value for level in UrgencyLevel]

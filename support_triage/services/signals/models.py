"""Signal detector models."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Signals:
    """Lexical and structural features of a support message."""

    has_critical_keyword: bool
    has_system_impact: bool
    has_business_impact: bool
    has_positive_sentiment: bool
    has_negative_sentiment: bool
    is_all_caps: bool
    exclamation_count: int
    question_count: int
    message_length: int
    word_count: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

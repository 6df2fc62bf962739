"""Deterministic signal detection over message text."""

from support_triage.config.constants import ALL_CAPS_MIN_LENGTH
from support_triage.config.keywords import SIGNAL_LEXICON, SignalLexicon
from support_triage.services.signals.models import Signals


def contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    """True if any keyword occurs as a substring of the already-lowercased text."""
    return any(keyword in text for keyword in keywords)


def detect_signals(message: str, lexicon: SignalLexicon = SIGNAL_LEXICON) -> Signals:
    """
    Extract signals from a message.

    Keyword matching is case-insensitive substring matching. The all-caps
    flag only applies to messages longer than ``ALL_CAPS_MIN_LENGTH`` so short
    exclamations such as "HELP!" are not treated as shouting.
    """
    lower_message = message.lower()
    return Signals(
        has_critical_keyword=contains_any(lower_message, lexicon.critical),
        has_system_impact=contains_any(lower_message, lexicon.system_impact),
        has_business_impact=contains_any(lower_message, lexicon.business_impact),
        has_positive_sentiment=contains_any(lower_message, lexicon.positive),
        has_negative_sentiment=contains_any(lower_message, lexicon.negative),
        is_all_caps=message == message.upper() and len(message) > ALL_CAPS_MIN_LENGTH,
        exclamation_count=message.count("!"),
        question_count=message.count("?"),
        message_length=len(message),
        word_count=len(message.split()),
    )

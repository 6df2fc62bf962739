"""
Urgency agent prompts.
"""

from typing import TYPE_CHECKING

from support_triage.config.constants import (
    HIGH_URGENCY_THRESHOLD,
    MEDIUM_URGENCY_THRESHOLD,
    Category,
    UrgencyLevel,
)

if TYPE_CHECKING:
    from support_triage.services.signals.models import Signals


def build_urgency_system_prompt() -> str:
    """Build system prompt for the urgency agent."""
    high = f"{HIGH_URGENCY_THRESHOLD}-100"
    medium = f"{MEDIUM_URGENCY_THRESHOLD}-{HIGH_URGENCY_THRESHOLD - 1}"
    low = f"0-{MEDIUM_URGENCY_THRESHOLD - 1}"

    return f"""You are an expert customer support triage specialist. Analyze messages to determine urgency level.

Consider these factors:
1. **Severity**: Is this a critical issue (outage, security, data loss) or minor inconvenience?
2. **Scope**: Does it affect one user, a team, or the entire organization?
3. **Business Impact**: Could this cause revenue loss, legal issues, or reputational damage?
4. **Time Sensitivity**: Is there a deadline or time-critical element?
5. **Customer Sentiment**: Is the customer distressed, frustrated, or calm?
6. **Blockers**: Is the customer completely blocked from using the product?

Return a JSON object with:
- "level": "{UrgencyLevel.HIGH.value}", "{UrgencyLevel.MEDIUM.value}", or "{UrgencyLevel.LOW.value}"
- "score": number from 0-100
- "reasoning": brief explanation (2-3 sentences max)

{UrgencyLevel.HIGH.value} ({high}): Critical issues, outages, security concerns, blocked users, significant business impact
{UrgencyLevel.MEDIUM.value} ({medium}): Important but not critical, partial functionality loss, frustrated but not blocked
{UrgencyLevel.LOW.value} ({low}): General inquiries, feature requests, positive feedback, minor issues"""


def build_urgency_user_prompt(
    message: str,
    signals: "Signals",
    category: Category | None = None,
) -> str:
    """Build the user turn for the urgency agent, with detected signals as hints."""
    category_hint = f" (Category: {category.value})" if category else ""
    return f"""Analyze urgency for this customer message{category_hint}:

"{message}"

Detected signals:
- Critical keywords found: {_flag(signals.has_critical_keyword)}
- System-wide impact mentioned: {_flag(signals.has_system_impact)}
- Business impact mentioned: {_flag(signals.has_business_impact)}
- Negative sentiment: {_flag(signals.has_negative_sentiment)}
- Positive sentiment: {_flag(signals.has_positive_sentiment)}
- Exclamation marks: {signals.exclamation_count}
- Questions: {signals.question_count}
- Written in all caps: {_flag(signals.is_all_caps)}

Return JSON only."""


def _flag(value: bool) -> str:
    return "true" if value else "false"

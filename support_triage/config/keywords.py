"""
Keyword tables driving the rule-based fallbacks.

All tables are plain data. Engines take them as constructor arguments so
categories, signals and escalation rules can be extended without touching
engine logic.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from support_triage.config.constants import Category


@dataclass(frozen=True)
class CategoryDefinition:
    """Description and scoring keywords for one category."""

    description: str
    keywords: tuple[str, ...]
    examples: tuple[str, ...] = ()


@dataclass(frozen=True)
class CategoryDisambiguation:
    """Bonus applied when a message couples an anchor term with a qualifier."""

    anchor: str
    qualifiers: tuple[str, ...]
    category: Category
    bonus: int


@dataclass(frozen=True)
class SignalLexicon:
    """Word lists the signal detector looks for."""

    critical: tuple[str, ...]
    system_impact: tuple[str, ...]
    business_impact: tuple[str, ...]
    positive: tuple[str, ...]
    negative: tuple[str, ...]


@dataclass(frozen=True)
class EscalationTrigger:
    """Keyword group that forces escalation with a fixed reason."""

    name: str
    keywords: tuple[str, ...]
    reason: str


@dataclass(frozen=True)
class ActionRule:
    """Action text used when any keyword is present in the message."""

    keywords: tuple[str, ...]
    action: str


@dataclass(frozen=True)
class ActionPlaybook:
    """Decision tree for one category: first matching rule wins."""

    default: str
    rules: tuple[ActionRule, ...] = ()
    time_pressure_keywords: tuple[str, ...] = ()
    time_pressure_note: str = ""


CATEGORY_DEFINITIONS: Mapping[Category, CategoryDefinition] = MappingProxyType({
    Category.BILLING_ISSUE: CategoryDefinition(
        description=(
            "Payment problems, charges, refunds, invoices, subscription management, "
            "pricing disputes"
        ),
        keywords=(
            "bill", "payment", "charge", "invoice", "refund", "subscription", "price",
            "cost", "fee", "credit card", "cancel subscription", "renewal", "discount",
            "promo", "coupon",
        ),
        examples=("I was charged twice", "Need a refund", "Cancel my subscription"),
    ),
    Category.TECHNICAL_PROBLEM: CategoryDefinition(
        description=(
            "Bugs, errors, crashes, outages, performance issues, functionality not "
            "working as expected"
        ),
        keywords=(
            "bug", "error", "broken", "not working", "crash", "down", "slow", "loading",
            "freeze", "stuck", "fail", "issue", "problem", "glitch", "unresponsive",
            "timeout", "connection",
        ),
        examples=("App keeps crashing", "Can't login", "Page won't load"),
    ),
    Category.FEATURE_REQUEST: CategoryDefinition(
        description=(
            "Suggestions for new features, improvements, enhancements, or changes to "
            "existing functionality"
        ),
        keywords=(
            "feature", "add", "improve", "enhancement", "suggestion", "wish",
            "would be great", "would like", "could you add", "missing", "need ability",
            "roadmap",
        ),
        examples=(
            "Would be great if you added...",
            "Can you implement...",
            "I wish there was...",
        ),
    ),
    Category.GENERAL_INQUIRY: CategoryDefinition(
        description=(
            "Questions about how things work, pricing information, account questions, "
            "general help, positive feedback"
        ),
        keywords=(
            "how do", "how to", "what is", "where is", "can i", "is there", "help",
            "question", "wondering", "curious", "thank", "thanks", "great job", "love",
        ),
        examples=(
            "How do I export data?",
            "What are your business hours?",
            "Thanks for the help!",
        ),
    ),
})

# Payment failures are billing issues even though "fail"/"error" score as technical
CATEGORY_DISAMBIGUATIONS: tuple[CategoryDisambiguation, ...] = (
    CategoryDisambiguation(
        anchor="payment",
        qualifiers=("fail", "error"),
        category=Category.BILLING_ISSUE,
        bonus=2,
    ),
)

SIGNAL_LEXICON = SignalLexicon(
    critical=(
        "down", "outage", "emergency", "urgent", "critical", "asap", "immediately",
        "production", "security", "breach", "hack", "compromised", "data loss",
        "cannot access", "can't access", "locked out", "blocked", "deadline",
        "legal", "lawsuit", "compliance", "audit", "executive", "ceo", "cto",
    ),
    system_impact=(
        "all users", "everyone", "entire", "company-wide", "organization",
        "multiple", "team", "department", "customers affected", "widespread",
    ),
    business_impact=(
        "revenue", "money", "losing", "cost", "contract", "client",
        "demo", "presentation", "meeting", "launch", "release",
    ),
    positive=(
        "thank", "thanks", "appreciate", "happy", "love", "great", "excellent",
        "wonderful", "amazing",
    ),
    negative=(
        "angry", "frustrated", "furious", "terrible", "awful", "worst",
        "unacceptable", "ridiculous",
    ),
)

# Order matters: the first group with a hit decides the reason
ESCALATION_TRIGGERS: tuple[EscalationTrigger, ...] = (
    EscalationTrigger(
        name="security",
        keywords=("security", "breach", "hack", "compromised"),
        reason="Security concern requires immediate escalation to security team",
    ),
    EscalationTrigger(
        name="legal",
        keywords=("legal", "lawyer", "lawsuit", "sue"),
        reason="Legal mention requires escalation to legal/compliance team",
    ),
    EscalationTrigger(
        name="churn_risk",
        keywords=("cancel", "leaving", "competitor"),
        reason="Churn risk - escalate to retention team",
    ),
    EscalationTrigger(
        name="vip",
        keywords=("ceo", "cto", "executive", "vip"),
        reason="Executive/VIP customer requires priority handling",
    ),
    EscalationTrigger(
        name="system_wide",
        keywords=("all users", "everyone", "company-wide", "outage"),
        reason="System-wide issue affecting multiple users",
    ),
)

HIGH_URGENCY_ESCALATION_REASON = "High urgency issue requires immediate supervisor attention"

ACTION_PLAYBOOKS: Mapping[Category, ActionPlaybook] = MappingProxyType({
    Category.BILLING_ISSUE: ActionPlaybook(
        rules=(
            ActionRule(
                keywords=("refund",),
                action=(
                    "Review the customer's billing history and recent transactions. If "
                    "refund is warranted per company policy, process it and confirm with "
                    "the customer. Document the reason for the refund."
                ),
            ),
            ActionRule(
                keywords=("charge", "charged"),
                action=(
                    "Pull up the customer's account to review recent charges. Explain each "
                    "charge clearly, and if there's an error, initiate a correction. Provide "
                    "an itemized breakdown if requested."
                ),
            ),
            ActionRule(
                keywords=("cancel",),
                action=(
                    "Understand the reason for cancellation. Offer retention options if "
                    "available (discount, plan change, pause). If proceeding with "
                    "cancellation, explain the process and any final billing."
                ),
            ),
        ),
        default=(
            "Access the customer's billing portal to review their account status, recent "
            "invoices, and payment history. Address the specific concern and offer to walk "
            "them through any unclear charges."
        ),
    ),
    Category.TECHNICAL_PROBLEM: ActionPlaybook(
        rules=(
            ActionRule(
                keywords=("login", "password", "access"),
                action=(
                    "Verify the customer's identity, then check their account status for "
                    "locks or flags. If locked out, initiate password reset or account "
                    "recovery. Check for any system-wide authentication issues."
                ),
            ),
            ActionRule(
                keywords=("slow", "performance"),
                action=(
                    "Check system status page for known performance issues. Gather "
                    "specifics: browser, device, network. If isolated issue, guide through "
                    "cache clearing and basic troubleshooting. If widespread, escalate to "
                    "engineering."
                ),
            ),
            ActionRule(
                keywords=("error", "bug"),
                action=(
                    "Request error details (screenshot, error code, steps to reproduce). "
                    "Check known issues database. If new issue, document thoroughly and "
                    "create a bug report for engineering team."
                ),
            ),
            ActionRule(
                keywords=("down", "not working"),
                action=(
                    "Immediately check system status and recent incident reports. If "
                    "confirmed outage, provide status update and ETA if available. If "
                    "user-specific, gather diagnostic information and troubleshoot."
                ),
            ),
        ),
        default=(
            "Gather specific details about the issue: what they were trying to do, what "
            "happened, any error messages. Check for known issues, then provide targeted "
            "troubleshooting steps."
        ),
    ),
    Category.FEATURE_REQUEST: ActionPlaybook(
        default=(
            "Thank the customer for their feedback. Log the feature request in the product "
            "feedback system with full context. If similar features exist, explain current "
            "capabilities. Share the product roadmap link if public."
        ),
        time_pressure_keywords=("urgent", "need"),
        time_pressure_note=(
            "Since this seems important for their workflow, check if there's a workaround "
            "or integration that could help in the meantime."
        ),
    ),
    Category.GENERAL_INQUIRY: ActionPlaybook(
        rules=(
            ActionRule(
                keywords=("pricing", "cost", "plan"),
                action=(
                    "Direct the customer to the pricing page and highlight plans that match "
                    "their described needs. Offer to schedule a call with sales for custom "
                    "requirements or volume discounts."
                ),
            ),
            ActionRule(
                keywords=("how", "tutorial"),
                action=(
                    "Provide a direct link to the relevant help article or documentation. "
                    "Offer to walk them through the process if documentation isn't "
                    "sufficient. Consider if this gap indicates need for better docs."
                ),
            ),
        ),
        default=(
            "Review available documentation and FAQ to provide a comprehensive answer. If "
            "the question reveals a gap in self-service resources, flag it for "
            "documentation improvement."
        ),
    ),
})

CLARIFICATION_ACTION = (
    "Review the message carefully to understand the customer's core need. Categorize "
    "appropriately if miscategorized, or gather more information if the request is unclear."
)

REASONING_TEMPLATES: Mapping[Category, tuple[str, ...]] = MappingProxyType({
    Category.BILLING_ISSUE: (
        "This message relates to billing, payments, or subscription management. The "
        "customer appears to have a financial or account-related concern that needs to "
        "be addressed.",
        "The message contains billing-related terminology indicating the customer needs "
        "assistance with payments, charges, or their subscription status.",
        "Based on the financial context of this message, this is categorized as a billing "
        "issue requiring review of the customer's account.",
    ),
    Category.TECHNICAL_PROBLEM: (
        "The customer is reporting a technical issue or malfunction. This requires "
        "investigation to identify the root cause and provide a resolution.",
        "This message describes functionality problems or errors the customer is "
        "experiencing. Technical troubleshooting will be needed.",
        "Based on the error or malfunction described, this is a technical support issue "
        "that may require engineering review.",
    ),
    Category.FEATURE_REQUEST: (
        "The customer is suggesting an improvement or new capability. This feedback "
        "should be logged for product team review.",
        "This message contains a feature suggestion or enhancement request. The customer "
        "is providing valuable product feedback.",
        "The customer is requesting functionality that doesn't currently exist. This "
        "should be tracked as product feedback.",
    ),
    Category.GENERAL_INQUIRY: (
        "This appears to be a general question or informational request. The customer is "
        "seeking clarification or assistance.",
        "The message is a general inquiry that can likely be addressed with documentation "
        "or standard support responses.",
        "This is a general support request or positive feedback that doesn't fall into a "
        "specific issue category.",
    ),
})


@dataclass(frozen=True)
class KeywordTables:
    """Bundle of every table the fallbacks consult."""

    categories: Mapping[Category, CategoryDefinition] = field(
        default_factory=lambda: CATEGORY_DEFINITIONS
    )
    disambiguations: tuple[CategoryDisambiguation, ...] = CATEGORY_DISAMBIGUATIONS
    signals: SignalLexicon = SIGNAL_LEXICON
    escalation_triggers: tuple[EscalationTrigger, ...] = ESCALATION_TRIGGERS
    high_urgency_reason: str = HIGH_URGENCY_ESCALATION_REASON
    playbooks: Mapping[Category, ActionPlaybook] = field(default_factory=lambda: ACTION_PLAYBOOKS)
    clarification_action: str = CLARIFICATION_ACTION
    reasoning_templates: Mapping[Category, tuple[str, ...]] = field(
        default_factory=lambda: REASONING_TEMPLATES
    )


DEFAULT_TABLES = KeywordTables()


def get_category_definitions() -> dict[str, dict[str, object]]:
    """Category definitions for documentation and UI."""
    return {
        category.value: {
            "description": definition.description,
            "keywords": list(definition.keywords),
        }
        for category, definition in CATEGORY_DEFINITIONS.items()
    }

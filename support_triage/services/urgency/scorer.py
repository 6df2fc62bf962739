"""Urgency scorer service."""

import logging
import math
from typing import Any

from support_triage.config.constants import Category, ResultSource, UrgencyLevel
from support_triage.config.keywords import DEFAULT_TABLES, KeywordTables
from support_triage.config.prompts import build_urgency_system_prompt, build_urgency_user_prompt
from support_triage.config.settings import Settings
from support_triage.infrastructure.llm.errors import InferenceCancelledError, InferenceError
from support_triage.infrastructure.llm.executor import ResilientCallClient
from support_triage.infrastructure.llm.models import InferenceRequest
from support_triage.services.signals.detector import detect_signals
from support_triage.services.signals.models import Signals
from support_triage.services.urgency.models import UrgencyResult
from support_triage.utils.cancellation import CancellationToken
from support_triage.utils.json_parser import JSONParser

logger = logging.getLogger(__name__)

BASE_SCORE = 50
DEFAULT_AI_REASONING = "Unable to determine detailed reasoning."
DEFAULT_FALLBACK_REASONING = "Standard priority based on message analysis."

CATEGORY_ADJUSTMENTS: dict[Category, tuple[int, str]] = {
    Category.TECHNICAL_PROBLEM: (10, "Technical issues often require timely resolution"),
    Category.BILLING_ISSUE: (5, "Billing concerns can impact customer retention"),
    Category.FEATURE_REQUEST: (-15, "Feature requests are typically non-urgent"),
}


def coerce_score(value: Any, default: int = BASE_SCORE) -> float:
    """Read a model-supplied score; anything non-numeric gives ``default``."""
    if isinstance(value, bool) or value is None:
        return default
    try:
        score = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(score):
        return default
    return round(score)


class UrgencyScorer:
    """Scores message urgency 0-100 with a model, falling back to signal rules."""

    def __init__(
        self,
        settings: Settings,
        call_client: ResilientCallClient,
        tables: KeywordTables = DEFAULT_TABLES,
    ):
        """Initialize urgency scorer."""
        self.settings = settings
        self.call_client = call_client
        self.tables = tables
        self._system_prompt = build_urgency_system_prompt()

    async def assess_urgency(
        self,
        message: str,
        category: Category | None,
        cancel_token: CancellationToken,
    ) -> UrgencyResult:
        """
        Assess how urgent a customer message is.

        Signals are computed first; they feed the prompt as hints and the
        rule-based fallback.

        Raises:
            InferenceCancelledError: If the analysis was cancelled.
        """
        signals = detect_signals(message, self.tables.signals)
        request = InferenceRequest.from_prompts(
            model=self.settings.urgency_model,
            system_prompt=self._system_prompt,
            user_prompt=build_urgency_user_prompt(message, signals, category),
            temperature=self.settings.urgency_temperature,
            max_tokens=self.settings.urgency_max_tokens,
        )
        try:
            reply = await self.call_client.invoke(request, cancel_token)
        except InferenceCancelledError:
            raise
        except InferenceError as e:
            logger.warning(
                "Urgency call failed (%s), using fallback scoring: %s", e.kind.value, e
            )
            return self.score_with_rules(message, category, signals)

        parsed = JSONParser.extract_json(reply)
        if parsed is None:
            logger.info("Urgency reply was not JSON, using fallback scoring")
            return self.score_with_rules(message, category, signals)
        return self._from_parsed(parsed, signals)

    def _from_parsed(self, parsed: dict[str, Any], signals: Signals) -> UrgencyResult:
        score = coerce_score(parsed.get("score"))
        reasoning = parsed.get("reasoning")
        result = UrgencyResult.from_score(
            score=score,
            reasoning=reasoning if isinstance(reasoning, str) and reasoning else DEFAULT_AI_REASONING,
            signals=signals,
            source=ResultSource.AI,
        )
        claimed = parsed.get("level")
        if isinstance(claimed, str) and claimed.strip().lower() != result.level.value.lower():
            logger.debug(
                "Model level %r disagrees with score %s; using %s",
                claimed,
                result.score,
                result.level.value,
            )
        return result

    def score_with_rules(
        self,
        message: str,
        category: Category | None = None,
        signals: Signals | None = None,
    ) -> UrgencyResult:
        """Deterministic signal-based urgency scoring."""
        if signals is None:
            signals = detect_signals(message, self.tables.signals)
        return score_urgency_with_rules(signals, category)


def score_urgency_with_rules(signals: Signals, category: Category | None = None) -> UrgencyResult:
    """Start at the base score and apply additive signal and category adjustments."""
    score = BASE_SCORE
    reasons: list[str] = []

    if signals.has_critical_keyword:
        score += 35
        reasons.append("Critical keywords detected indicating urgent issue")

    if signals.has_system_impact:
        score += 20
        reasons.append("Message suggests widespread system impact")

    if signals.has_business_impact:
        score += 15
        reasons.append("Potential business or revenue impact mentioned")

    if signals.has_negative_sentiment:
        score += 15
        reasons.append("Customer expressing frustration or dissatisfaction")

    if category in CATEGORY_ADJUSTMENTS:
        adjustment, reason = CATEGORY_ADJUSTMENTS[category]
        score += adjustment
        reasons.append(reason)

    calm = not signals.has_critical_keyword and not signals.has_negative_sentiment

    if signals.has_positive_sentiment and calm:
        score -= 20
        reasons.append("Positive sentiment suggests non-urgent matter")

    if signals.exclamation_count >= 2 and (
        signals.has_negative_sentiment or signals.has_critical_keyword
    ):
        score += 10
        reasons.append("Emphasis suggests heightened concern")

    if signals.question_count > 0 and calm:
        score -= 10
        reasons.append("Question format suggests inquiry rather than urgent issue")

    reasoning = ". ".join(reasons) + "." if reasons else DEFAULT_FALLBACK_REASONING
    return UrgencyResult.from_score(
        score=score,
        reasoning=reasoning,
        signals=signals,
        source=ResultSource.FALLBACK,
    )


def calculate_urgency_level(message: str, tables: KeywordTables = DEFAULT_TABLES) -> UrgencyLevel:
    """Rule-based urgency level without a model call or category."""
    return score_urgency_with_rules(detect_signals(message, tables.signals)).level

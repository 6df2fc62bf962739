"""Categorization classifier service."""

import logging
from typing import Any

from support_triage.config.constants import Category, ResultSource
from support_triage.config.keywords import DEFAULT_TABLES, KeywordTables
from support_triage.config.prompts import (
    build_categorization_system_prompt,
    build_categorization_user_prompt,
)
from support_triage.config.settings import Settings
from support_triage.infrastructure.llm.errors import InferenceCancelledError, InferenceError
from support_triage.infrastructure.llm.executor import ResilientCallClient
from support_triage.infrastructure.llm.models import InferenceRequest
from support_triage.services.categorization.models import CategoryResult
from support_triage.utils.cancellation import CancellationToken
from support_triage.utils.json_parser import JSONParser
from support_triage.utils.selector import TemplateSelector

logger = logging.getLogger(__name__)

DEFAULT_AI_CONFIDENCE = 0.8
PROSE_MATCH_CONFIDENCE = 0.7


def coerce_confidence(value: Any, default: float = DEFAULT_AI_CONFIDENCE) -> float:
    """Read a model-supplied confidence, clamped to [0, 1]."""
    if isinstance(value, bool) or value is None:
        return default
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return default
    if confidence <= 0:
        return default
    return min(confidence, 1.0)


class CategoryClassifier:
    """Classifies messages into the fixed support category set.

    Never fails outward: any inference failure other than cancellation
    falls back to keyword scoring.
    """

    def __init__(
        self,
        settings: Settings,
        call_client: ResilientCallClient,
        tables: KeywordTables = DEFAULT_TABLES,
        selector: TemplateSelector | None = None,
    ):
        """Initialize categorization classifier."""
        self.settings = settings
        self.call_client = call_client
        self.tables = tables
        self.selector = selector or TemplateSelector(settings.reasoning_seed)
        self._system_prompt = build_categorization_system_prompt(tables.categories)

    async def categorize(self, message: str, cancel_token: CancellationToken) -> CategoryResult:
        """
        Categorize a customer support message.

        Args:
            message: Customer message text
            cancel_token: Analysis-wide cancellation token

        Returns:
            CategoryResult from the model reply, or from keyword scoring

        Raises:
            InferenceCancelledError: If the analysis was cancelled.
        """
        request = InferenceRequest.from_prompts(
            model=self.settings.categorization_model,
            system_prompt=self._system_prompt,
            user_prompt=build_categorization_user_prompt(message),
            temperature=self.settings.categorization_temperature,
            max_tokens=self.settings.categorization_max_tokens,
        )
        try:
            reply = await self.call_client.invoke(request, cancel_token)
        except InferenceCancelledError:
            raise
        except InferenceError as e:
            logger.warning(
                "Categorization call failed (%s), using fallback categorization: %s",
                e.kind.value,
                e,
            )
            return self.categorize_with_rules(message)

        result = self._from_reply(reply)
        if result is None:
            logger.info("No category found in model reply, using fallback categorization")
            return self.categorize_with_rules(message)
        return result

    def _from_reply(self, reply: str) -> CategoryResult | None:
        """Read a category from the model reply: JSON first, then prose."""
        parsed = JSONParser.extract_json(reply)
        if parsed:
            category = self._match_category(parsed.get("category"))
            if category is not None:
                reasoning = parsed.get("reasoning")
                return CategoryResult(
                    category=category,
                    reasoning=reasoning if isinstance(reasoning, str) and reasoning else reply,
                    confidence=coerce_confidence(parsed.get("confidence")),
                    source=ResultSource.AI,
                )
            logger.debug("Model returned unrecognized category: %r", parsed.get("category"))

        lower_reply = reply.lower()
        for category in self.tables.categories:
            if category.value.lower() in lower_reply:
                return CategoryResult(
                    category=category,
                    reasoning=reply,
                    confidence=PROSE_MATCH_CONFIDENCE,
                    source=ResultSource.AI,
                )
        return None

    def _match_category(self, value: Any) -> Category | None:
        if not isinstance(value, str):
            return None
        wanted = value.strip().lower()
        for category in self.tables.categories:
            if category.value.lower() == wanted:
                return category
        return None

    def score_categories(self, message: str) -> dict[Category, int]:
        """Keyword score per category; multi-word keywords weigh more."""
        lower_message = message.lower()
        scores = {
            category: sum(
                len(keyword.split())
                for keyword in definition.keywords
                if keyword in lower_message
            )
            for category, definition in self.tables.categories.items()
        }
        for rule in self.tables.disambiguations:
            if rule.anchor in lower_message and any(q in lower_message for q in rule.qualifiers):
                scores[rule.category] = scores.get(rule.category, 0) + rule.bonus
        return scores

    def categorize_with_rules(self, message: str) -> CategoryResult:
        """Deterministic keyword-scoring categorization."""
        scores = self.score_categories(message)

        best_category = Category.GENERAL_INQUIRY
        best_score = 0
        for category, score in scores.items():
            if score > best_score:
                best_category = category
                best_score = score

        if best_score > 2:
            confidence = 0.8
        elif best_score > 0:
            confidence = 0.6
        else:
            confidence = 0.4

        return CategoryResult(
            category=best_category,
            reasoning=self._fallback_reasoning(best_category),
            confidence=confidence,
            source=ResultSource.FALLBACK,
        )

    def _fallback_reasoning(self, category: Category) -> str:
        templates = self.tables.reasoning_templates.get(
            category, self.tables.reasoning_templates[Category.GENERAL_INQUIRY]
        )
        return self.selector.choose(templates)

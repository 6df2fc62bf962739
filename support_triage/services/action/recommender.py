"""Action recommender service."""

import logging
from typing import Any

from support_triage.config.constants import Category, ResultSource, UrgencyLevel
from support_triage.config.keywords import DEFAULT_TABLES, EscalationTrigger, KeywordTables
from support_triage.config.prompts import build_action_system_prompt, build_action_user_prompt
from support_triage.config.settings import Settings
from support_triage.infrastructure.llm.errors import InferenceCancelledError, InferenceError
from support_triage.infrastructure.llm.executor import ResilientCallClient
from support_triage.infrastructure.llm.models import InferenceRequest
from support_triage.services.action.models import ActionResult
from support_triage.services.signals.detector import contains_any
from support_triage.utils.cancellation import CancellationToken
from support_triage.utils.json_parser import JSONParser

logger = logging.getLogger(__name__)

DEFAULT_AI_ACTION = "Review the message and respond appropriately."
DEFAULT_AI_ESCALATION_REASON = "Escalation recommended by automated analysis."


def find_escalation_trigger(
    message: str,
    triggers: tuple[EscalationTrigger, ...] = DEFAULT_TABLES.escalation_triggers,
) -> EscalationTrigger | None:
    """Return the first trigger group with a keyword in the message."""
    lower_message = message.lower()
    for trigger in triggers:
        if contains_any(lower_message, trigger.keywords):
            return trigger
    return None


def select_action(message: str, category: Category, tables: KeywordTables = DEFAULT_TABLES) -> str:
    """Walk the category playbook: first rule with a keyword hit wins."""
    playbook = tables.playbooks.get(category)
    if playbook is None:
        return tables.clarification_action

    lower_message = message.lower()
    action = playbook.default
    for rule in playbook.rules:
        if contains_any(lower_message, rule.keywords):
            action = rule.action
            break

    if playbook.time_pressure_note and contains_any(lower_message, playbook.time_pressure_keywords):
        action = f"{action} {playbook.time_pressure_note}"
    return action


def should_escalate(
    message: str,
    category: Category,
    urgency: UrgencyLevel,
    tables: KeywordTables = DEFAULT_TABLES,
) -> bool:
    """Rule-based escalation verdict on its own."""
    return recommend_with_rules(message, category, urgency, tables).escalate


def recommend_with_rules(
    message: str,
    category: Category,
    urgency: UrgencyLevel,
    tables: KeywordTables = DEFAULT_TABLES,
) -> ActionResult:
    """Deterministic recommendation from escalation triggers and playbooks."""
    trigger = find_escalation_trigger(message, tables.escalation_triggers)
    if trigger is not None:
        escalate, reason = True, trigger.reason
    elif urgency is UrgencyLevel.HIGH:
        escalate, reason = True, tables.high_urgency_reason
    else:
        escalate, reason = False, None

    return ActionResult(
        action=select_action(message, category, tables),
        escalate=escalate,
        escalate_reason=reason,
        source=ResultSource.FALLBACK,
    )


def _coerce_escalate(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes"}
    return False


class ActionRecommender:
    """Recommends the next support action and whether to escalate."""

    def __init__(
        self,
        settings: Settings,
        call_client: ResilientCallClient,
        tables: KeywordTables = DEFAULT_TABLES,
    ):
        """Initialize action recommender."""
        self.settings = settings
        self.call_client = call_client
        self.tables = tables
        self._system_prompt = build_action_system_prompt()

    async def recommend_action(
        self,
        message: str,
        category: Category,
        urgency: UrgencyLevel,
        cancel_token: CancellationToken,
    ) -> ActionResult:
        """
        Recommend an action for a categorized, scored message.

        Args:
            message: Customer message text
            category: Resolved category
            urgency: Resolved urgency level
            cancel_token: Analysis-wide cancellation token

        Returns:
            ActionResult from the model reply, or from the rule-based playbooks

        Raises:
            InferenceCancelledError: If the analysis was cancelled.
        """
        request = InferenceRequest.from_prompts(
            model=self.settings.action_model,
            system_prompt=self._system_prompt,
            user_prompt=build_action_user_prompt(message, category.value, urgency.value),
            temperature=self.settings.action_temperature,
            max_tokens=self.settings.action_max_tokens,
        )
        try:
            reply = await self.call_client.invoke(request, cancel_token)
        except InferenceCancelledError:
            raise
        except InferenceError as e:
            logger.warning(
                "Action call failed (%s), using fallback recommendation: %s", e.kind.value, e
            )
            return self.recommend_with_rules(message, category, urgency)

        parsed = JSONParser.extract_json(reply)
        if parsed is None:
            logger.info("Action reply was not JSON, using fallback recommendation")
            return self.recommend_with_rules(message, category, urgency)
        return self._from_parsed(parsed)

    def _from_parsed(self, parsed: dict[str, Any]) -> ActionResult:
        action = parsed.get("action")
        escalate = _coerce_escalate(parsed.get("escalate"))
        reason = parsed.get("escalateReason")
        if escalate:
            reason = reason if isinstance(reason, str) and reason.strip() else DEFAULT_AI_ESCALATION_REASON
        else:
            reason = None
        return ActionResult(
            action=action if isinstance(action, str) and action.strip() else DEFAULT_AI_ACTION,
            escalate=escalate,
            escalate_reason=reason,
            source=ResultSource.AI,
        )

    def recommend_with_rules(
        self, message: str, category: Category, urgency: UrgencyLevel
    ) -> ActionResult:
        return recommend_with_rules(message, category, urgency, self.tables)

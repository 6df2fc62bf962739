"""Analysis orchestrator."""

import asyncio
import logging

from support_triage.config.constants import AnalysisStage, AnalysisStatus, ResultSource
from support_triage.config.keywords import DEFAULT_TABLES, KeywordTables
from support_triage.config.settings import Settings
from support_triage.infrastructure.llm.client import LLMClientHandle
from support_triage.infrastructure.llm.errors import InferenceCancelledError
from support_triage.infrastructure.llm.executor import ResilientCallClient
from support_triage.infrastructure.logging.logger import StructuredLogger
from support_triage.orchestrator.models import TriageRecord
from support_triage.orchestrator.state import AnalysisState
from support_triage.orchestrator.step_timer import timed_step
from support_triage.services.action.recommender import ActionRecommender
from support_triage.services.categorization.classifier import CategoryClassifier
from support_triage.services.categorization.models import CategoryResult
from support_triage.services.urgency.models import UrgencyResult
from support_triage.services.urgency.scorer import UrgencyScorer
from support_triage.utils.cancellation import CancellationToken
from support_triage.utils.selector import TemplateSelector

logger = logging.getLogger(__name__)


class AnalysisCancelledError(Exception):
    """Raised by ``analyze`` when its cancellation token fired."""


class AnalysisOrchestrator:
    """Runs categorization and urgency concurrently, then the action stage.

    One analysis is in flight per instance: starting a new one cancels the
    previous one. Engines never fail outward, so the only expected outcomes
    are a ``TriageRecord`` or ``AnalysisCancelledError``.
    """

    def __init__(
        self,
        settings: Settings,
        handle: LLMClientHandle | None = None,
        *,
        call_client: ResilientCallClient | None = None,
        tables: KeywordTables = DEFAULT_TABLES,
        selector: TemplateSelector | None = None,
    ):
        """Initialize orchestrator with settings and the shared client handle."""
        self.settings = settings
        self.handle = handle or LLMClientHandle(settings)
        self.call_client = call_client or ResilientCallClient(settings, self.handle)
        self.categorizer = CategoryClassifier(settings, self.call_client, tables, selector)
        self.urgency = UrgencyScorer(settings, self.call_client, tables)
        self.action = ActionRecommender(settings, self.call_client, tables)
        self.structured_logger = StructuredLogger(__name__)
        self.state = AnalysisState()
        self._active_token: CancellationToken | None = None

    @property
    def status(self) -> AnalysisStatus:
        return self.state.status

    def cancel(self) -> None:
        """Fire the token of the analysis in flight, if any."""
        if self._active_token is not None:
            logger.info("Cancelling analysis in flight")
            self._active_token.cancel()

    async def analyze(
        self,
        message: str,
        cancel_token: CancellationToken | None = None,
    ) -> TriageRecord:
        """
        Triage a customer message.

        Args:
            message: Customer message text
            cancel_token: Token for this analysis; a fresh one is created if omitted

        Returns:
            The assembled TriageRecord

        Raises:
            ValueError: If the message is blank.
            AnalysisCancelledError: If the token fired before the record was assembled.
        """
        if not message or not message.strip():
            raise ValueError("message must not be empty")

        if self._active_token is not None and not self._active_token.cancelled:
            logger.info("New analysis supersedes the one in flight")
            self._active_token.cancel()

        token = cancel_token or CancellationToken()
        self._active_token = token
        state = AnalysisState(message=message, status=AnalysisStatus.RUNNING)
        self.state = state

        try:
            record = await self._run(state, token)
        except InferenceCancelledError as e:
            state.status = AnalysisStatus.CANCELLED
            state.discard_results()
            logger.info("Analysis cancelled by user")
            raise AnalysisCancelledError("Analysis cancelled") from e
        except Exception as e:
            state.status = AnalysisStatus.FAILED
            state.error = str(e)
            self.structured_logger.log_error("analysis", e, {"message_length": len(message)})
            raise
        finally:
            if self._active_token is token:
                self._active_token = None

        state.status = AnalysisStatus.COMPLETED
        return record

    async def _run(self, state: AnalysisState, token: CancellationToken) -> TriageRecord:
        message = state.message

        async with timed_step(AnalysisStage.CLASSIFICATION, self.structured_logger) as step:
            category_result, urgency_result = await self._classify_concurrently(message, token)
            step.set_result({
                "category": category_result.category.value,
                "confidence": category_result.confidence,
                "category_source": category_result.source.value,
                "urgency": urgency_result.level.value,
                "urgency_score": urgency_result.score,
                "urgency_source": urgency_result.source.value,
            })

        # Rule-based urgency can now take the resolved category into account
        if urgency_result.source is ResultSource.FALLBACK:
            urgency_result = self.urgency.score_with_rules(
                message, category_result.category, urgency_result.signals
            )
        state.category_result = category_result
        state.urgency_result = urgency_result

        token.raise_if_cancelled()

        async with timed_step(AnalysisStage.ACTION, self.structured_logger) as step:
            action_result = await self.action.recommend_action(
                message, category_result.category, urgency_result.level, token
            )
            step.set_result({
                "escalate": action_result.escalate,
                "escalate_reason": action_result.escalate_reason,
                "action_source": action_result.source.value,
            })
        state.action_result = action_result

        token.raise_if_cancelled()

        async with timed_step(AnalysisStage.RECORD, self.structured_logger) as step:
            record = TriageRecord.assemble(message, category_result, urgency_result, action_result)
            step.set_result({"timestamp": record.timestamp.isoformat()})
        state.record = record
        return record

    async def _classify_concurrently(
        self, message: str, token: CancellationToken
    ) -> tuple[CategoryResult, UrgencyResult]:
        """Run categorization and urgency side by side; both start without a category."""
        category_task = asyncio.ensure_future(self.categorizer.categorize(message, token))
        urgency_task = asyncio.ensure_future(self.urgency.assess_urgency(message, None, token))
        try:
            category_result, urgency_result = await asyncio.gather(category_task, urgency_task)
        except BaseException:
            for task in (category_task, urgency_task):
                if not task.done():
                    task.cancel()
            raise
        return category_result, urgency_result

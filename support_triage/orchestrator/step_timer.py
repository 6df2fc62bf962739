"""Async context manager for timing and logging analysis stages."""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from support_triage.config.constants import AnalysisStage, AnalysisStageDescription
from support_triage.infrastructure.logging.logger import StructuredLogger

logger = logging.getLogger(__name__)


class StepContext:
    """Mutable context for a timed analysis stage."""

    def __init__(self) -> None:
        self.result: dict[str, Any] | None = None

    def set_result(self, result: dict[str, Any]) -> None:
        self.result = result


@asynccontextmanager
async def timed_step(
    stage: AnalysisStage,
    structured_logger: StructuredLogger,
) -> AsyncGenerator[StepContext, None]:
    """Time an analysis stage and log its result."""
    logger.info(f"{stage.value}: {AnalysisStageDescription[stage.name].value}")
    ctx = StepContext()
    start = time.perf_counter()
    yield ctx
    elapsed_ms = (time.perf_counter() - start) * 1000
    if ctx.result is not None:
        structured_logger.log_step(stage.value, ctx.result, duration_ms=elapsed_ms)

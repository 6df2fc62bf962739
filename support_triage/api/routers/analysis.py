"""Analysis routes."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from support_triage.api.dependencies import ServiceContext, get_service_context
from support_triage.api.models import AnalyzeRequest, HealthResponse, TaxonomyResponse, TriageResponse
from support_triage.config.constants import get_available_categories, get_urgency_levels
from support_triage.config.keywords import get_category_definitions
from support_triage.orchestrator.pipeline import AnalysisCancelledError, AnalysisOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(
    context: ServiceContext = Depends(get_service_context),  # noqa: B008
) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=context.settings.app_version)


@router.get("/taxonomy", response_model=TaxonomyResponse)
async def taxonomy() -> TaxonomyResponse:
    """Category and urgency level names for UI filters."""
    return TaxonomyResponse(
        categories=get_available_categories(),
        urgency_levels=get_urgency_levels(),
        category_definitions=get_category_definitions(),
    )


@router.post("/analyze", response_model=TriageResponse)
async def analyze(
    request: AnalyzeRequest,
    context: ServiceContext = Depends(get_service_context),  # noqa: B008
) -> dict[str, Any]:
    """
    Triage a customer support message.

    Runs categorization and urgency scoring concurrently, then recommends an
    action. Falls back to rule-based analysis when the model is unavailable.
    """
    orchestrator = AnalysisOrchestrator(context.settings, context.llm_handle)
    try:
        record = await orchestrator.analyze(request.message)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except AnalysisCancelledError as e:
        raise HTTPException(status_code=409, detail="Analysis cancelled") from e
    except Exception as e:
        logger.error(f"Error analyzing message: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e
    return record.to_dict()

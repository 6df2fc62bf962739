"""Request/Response models for API endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class AnalyzeRequest(BaseModel):
    """Request model for the analyze endpoint."""

    message: str = Field(..., min_length=1, description="Customer support message to triage")


class TriageResponse(BaseModel):
    """Response model for the analyze endpoint."""

    message: str = Field(..., description="Original customer message")
    category: str = Field(..., description="Support category")
    reasoning: str = Field(..., description="Why the category was chosen")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Category confidence")
    urgency: str = Field(..., description="High, Medium or Low")
    urgencyScore: int = Field(..., ge=0, le=100, description="Urgency score 0-100")
    urgencyReasoning: str = Field(..., description="Why the urgency was assigned")
    recommendedAction: str = Field(..., description="Suggested next step for the agent")
    escalate: bool = Field(..., description="Whether to escalate to a supervisor")
    escalateReason: str | None = Field(None, description="Escalation reason, when escalating")
    timestamp: datetime = Field(..., description="When the analysis completed")


class TaxonomyResponse(BaseModel):
    """Category and urgency names available for filtering."""

    categories: list[str]
    urgency_levels: list[str]
    category_definitions: dict[str, dict[str, object]]


class HealthResponse(BaseModel):
    """Response model for health endpoint."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")

"""API sub-routers assembled into a single api_router."""

from fastapi import APIRouter

from support_triage.api.routers.analysis import router as analysis_router

api_router = APIRouter()

api_router.include_router(analysis_router, tags=["analysis"])

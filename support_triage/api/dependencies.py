"""FastAPI dependencies."""

from dataclasses import dataclass
from functools import lru_cache

from support_triage.config.settings import Settings, get_settings
from support_triage.infrastructure.llm.client import LLMClientHandle


@dataclass
class ServiceContext:
    """Process-scoped services shared by every request."""

    settings: Settings
    llm_handle: LLMClientHandle


@lru_cache
def get_service_context() -> ServiceContext:
    """Create the process-wide service context on first use."""
    settings = get_settings()
    return ServiceContext(settings=settings, llm_handle=LLMClientHandle(settings))
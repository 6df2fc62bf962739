"""Pytest configuration and fixtures."""

from typing import Any

import pytest

from support_triage.config.settings import Settings
from support_triage.infrastructure.llm.client import LLMClientHandle
from support_triage.infrastructure.llm.executor import ResilientCallClient
from support_triage.orchestrator.pipeline import AnalysisOrchestrator
from support_triage.utils.selector import FirstTemplateSelector
from tests.fakes import FakeLLMClient, Responder, SleepRecorder


@pytest.fixture
def settings():
    """Provide settings fixture."""
    return Settings(
        llm_api_key="test-key",
        llm_request_timeout=0.5,
        llm_retry_delay=1.0,
        reasoning_seed=7,
    )


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def make_call_client(settings, sleep_recorder):
    """Build a call client around a fake inference client."""

    def _make(responder: Responder, **overrides: Any) -> tuple[ResilientCallClient, FakeLLMClient]:
        client_settings = settings.model_copy(update=overrides) if overrides else settings
        fake = FakeLLMClient(responder)
        handle = LLMClientHandle(client_settings, client_factory=lambda _: fake)
        return ResilientCallClient(client_settings, handle, sleep=sleep_recorder), fake

    return _make


@pytest.fixture
def make_orchestrator(settings, sleep_recorder):
    """Build an orchestrator around a fake inference client."""

    def _make(responder: Responder) -> tuple[AnalysisOrchestrator, FakeLLMClient]:
        fake = FakeLLMClient(responder)
        handle = LLMClientHandle(settings, client_factory=lambda _: fake)
        call_client = ResilientCallClient(settings, handle, sleep=sleep_recorder)
        orchestrator = AnalysisOrchestrator(
            settings,
            handle,
            call_client=call_client,
            selector=FirstTemplateSelector(),
        )
        return orchestrator, fake

    return _make

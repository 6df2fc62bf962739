"""LLM infrastructure module."""

from support_triage.infrastructure.llm.client import LLMClientHandle, create_openai_client
from support_triage.infrastructure.llm.errors import (
    InferenceAuthError,
    InferenceCancelledError,
    InferenceError,
    InferenceErrorKind,
    InferenceTimeoutError,
    InferenceTransportError,
)
from support_triage.infrastructure.llm.models import ChatMessage, InferenceRequest

__all__ = [
    "ChatMessage",
    "InferenceAuthError",
    "InferenceCancelledError",
    "InferenceError",
    "InferenceErrorKind",
    "InferenceRequest",
    "InferenceTimeoutError",
    "InferenceTransportError",
    "LLMClientHandle",
    "create_openai_client",
]

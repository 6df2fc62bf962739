"""
Resilient executor for single remote inference requests.
"""
import asyncio
import logging
from typing import Any

import httpx
import openai

from support_triage.config.settings import Settings
from support_triage.infrastructure.llm.client import LLMClientHandle
from support_triage.infrastructure.llm.errors import (
    InferenceAuthError,
    InferenceCancelledError,
    InferenceError,
    InferenceTimeoutError,
    InferenceTransportError,
)
from support_triage.infrastructure.llm.models import InferenceRequest
from support_triage.utils.cancellation import CancellationToken
from support_triage.utils.retry import SleepFunc, run_with_retry

logger = logging.getLogger(__name__)

_AUTH_STATUS_CODES = frozenset({401, 403})


def classify_exception(exc: BaseException) -> InferenceError:
    """Map an SDK or transport exception onto the inference error taxonomy."""
    if isinstance(exc, InferenceError):
        return exc
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return InferenceAuthError(str(exc))
    if isinstance(exc, openai.APIStatusError) and exc.status_code in _AUTH_STATUS_CODES:
        return InferenceAuthError(str(exc))
    if isinstance(exc, (openai.APITimeoutError, httpx.TimeoutException, TimeoutError)):
        return InferenceTimeoutError(str(exc) or "Request timed out")
    return InferenceTransportError(str(exc) or type(exc).__name__)


def extract_content(response: Any) -> str:
    """Return the text of the first choice of a chat-completion response."""
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as e:
        raise InferenceTransportError(f"Malformed completion response: {e}") from e
    return content or ""


class ResilientCallClient:
    """Issues one logical inference request with timeout, retry and cancellation.

    Each attempt is bounded by ``llm_request_timeout`` and raced against the
    analysis cancellation token. Timeouts and transport failures are retried
    with exponential backoff; auth failures and cancellation are not.
    """

    def __init__(
        self,
        settings: Settings,
        handle: LLMClientHandle,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.settings = settings
        self.handle = handle
        self._sleep = sleep

    async def invoke(self, request: InferenceRequest, cancel_token: CancellationToken) -> str:
        """
        Run the request and return the reply text.

        Args:
            request: Immutable chat-completion request
            cancel_token: Analysis-wide cancellation token

        Returns:
            Raw text content of the first choice

        Raises:
            InferenceCancelledError: The token fired; no further attempts are made.
            InferenceAuthError: Credentials rejected; surfaced on the first attempt.
            InferenceTimeoutError / InferenceTransportError: Last error after
                retries are exhausted.
        """

        async def _attempt() -> str:
            return await self._run_attempt(request, cancel_token)

        return await run_with_retry(
            _attempt,
            cancel_token,
            max_retries=self.settings.llm_max_retries,
            initial_delay=self.settings.llm_retry_delay,
            backoff_factor=self.settings.llm_retry_backoff_factor,
            sleep=self._sleep,
        )

    async def _run_attempt(self, request: InferenceRequest, cancel_token: CancellationToken) -> str:
        cancel_token.raise_if_cancelled()
        try:
            client = self.handle.get()
        except openai.OpenAIError as e:
            # The SDK refuses to build a client without credentials
            raise InferenceAuthError(str(e)) from e

        call = asyncio.ensure_future(client.chat.completions.create(**request.to_payload()))
        cancelled = asyncio.ensure_future(cancel_token.wait())
        try:
            done, _ = await asyncio.wait(
                {call, cancelled},
                timeout=self.settings.llm_request_timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            cancelled.cancel()
            if not call.done():
                call.cancel()

        if call not in done:
            if cancel_token.cancelled:
                logger.info("Inference request to %s cancelled", request.model)
                raise InferenceCancelledError("Request cancelled")
            raise InferenceTimeoutError(
                f"No response from {request.model} within {self.settings.llm_request_timeout}s"
            )

        exc = call.exception()
        if exc is not None:
            error = classify_exception(exc)
            if isinstance(error, InferenceAuthError):
                logger.error("Inference service rejected credentials: %s", exc)
            if error is exc:
                raise error
            raise error from exc
        return extract_content(call.result())

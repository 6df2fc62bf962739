"""Tests for the resilient call client, retry helpers and the client handle."""

import asyncio
import threading

import httpx
import openai
import pytest

from support_triage.config.settings import Settings
from support_triage.infrastructure.llm.client import LLMClientHandle
from support_triage.infrastructure.llm.errors import (
    InferenceAuthError,
    InferenceCancelledError,
    InferenceErrorKind,
    InferenceTimeoutError,
    InferenceTransportError,
)
from support_triage.infrastructure.llm.executor import (
    ResilientCallClient,
    classify_exception,
    extract_content,
)
from support_triage.infrastructure.llm.models import InferenceRequest
from support_triage.utils.cancellation import CancellationToken
from support_triage.utils.retry import backoff_delay, cancellable_sleep
from tests.fakes import (
    FakeLLMClient,
    auth_error,
    completion,
    connection_error,
    hang,
    unavailable,
)

_REQUEST = httpx.Request("POST", "https://llm.test/v1/chat/completions")


def _request():
    return InferenceRequest.from_prompts(
        model="test-model",
        system_prompt="You are a test.",
        user_prompt="Say hi",
        temperature=0.2,
        max_tokens=50,
    )


# ==========================================
#  Successful calls
# ==========================================


@pytest.mark.asyncio
async def test_returns_reply_text_and_sends_payload(make_call_client):
    async def respond(kwargs):
        return completion("hi there")

    call_client, fake = make_call_client(respond)

    reply = await call_client.invoke(_request(), CancellationToken())

    assert reply == "hi there"
    assert fake.completions.calls == [
        {
            "model": "test-model",
            "messages": [
                {"role": "system", "content": "You are a test."},
                {"role": "user", "content": "Say hi"},
            ],
            "temperature": 0.2,
            "max_tokens": 50,
        }
    ]


@pytest.mark.asyncio
async def test_recovers_after_transient_failure(make_call_client, sleep_recorder):
    outcomes = [connection_error(), completion("second time lucky")]

    async def flaky(kwargs):
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    call_client, fake = make_call_client(flaky)

    reply = await call_client.invoke(_request(), CancellationToken())

    assert reply == "second time lucky"
    assert len(fake.completions.calls) == 2
    assert sleep_recorder.delays == [1.0]


@pytest.mark.asyncio
async def test_empty_content_is_empty_string(make_call_client):
    async def respond(kwargs):
        return completion(None)

    call_client, _ = make_call_client(respond)

    assert await call_client.invoke(_request(), CancellationToken()) == ""


# ==========================================
#  Retry discipline
# ==========================================


@pytest.mark.asyncio
async def test_transport_failure_retried_with_backoff(make_call_client, sleep_recorder):
    call_client, fake = make_call_client(unavailable)

    with pytest.raises(InferenceTransportError):
        await call_client.invoke(_request(), CancellationToken())

    assert len(fake.completions.calls) == 3
    assert sleep_recorder.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_retry_count_follows_settings(make_call_client, sleep_recorder):
    call_client, fake = make_call_client(
        unavailable, llm_max_retries=3, llm_retry_delay=0.5, llm_retry_backoff_factor=3.0
    )

    with pytest.raises(InferenceTransportError):
        await call_client.invoke(_request(), CancellationToken())

    assert len(fake.completions.calls) == 4
    assert sleep_recorder.delays == [0.5, 1.5, 4.5]


@pytest.mark.asyncio
async def test_timeout_is_retried_then_raised(make_call_client, sleep_recorder):
    call_client, fake = make_call_client(hang, llm_request_timeout=0.05)

    with pytest.raises(InferenceTimeoutError):
        await call_client.invoke(_request(), CancellationToken())

    assert len(fake.completions.calls) == 3
    assert sleep_recorder.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_auth_failure_is_not_retried(make_call_client, sleep_recorder):
    async def rejected(kwargs):
        raise auth_error()

    call_client, fake = make_call_client(rejected)

    with pytest.raises(InferenceAuthError):
        await call_client.invoke(_request(), CancellationToken())

    assert len(fake.completions.calls) == 1
    assert sleep_recorder.delays == []


@pytest.mark.asyncio
async def test_missing_api_key_is_auth_failure(monkeypatch, sleep_recorder):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    settings = Settings(llm_api_key=None)
    call_client = ResilientCallClient(settings, LLMClientHandle(settings), sleep=sleep_recorder)

    with pytest.raises(InferenceAuthError):
        await call_client.invoke(_request(), CancellationToken())

    assert sleep_recorder.delays == []


def test_backoff_delay():
    assert [backoff_delay(attempt, 1.0, 2.0) for attempt in range(3)] == [1.0, 2.0, 4.0]


# ==========================================
#  Cancellation
# ==========================================


@pytest.mark.asyncio
async def test_pre_cancelled_token_makes_no_attempt(make_call_client):
    call_client, fake = make_call_client(unavailable)
    token = CancellationToken()
    token.cancel()

    with pytest.raises(InferenceCancelledError):
        await call_client.invoke(_request(), token)

    assert fake.completions.calls == []


@pytest.mark.asyncio
async def test_cancel_during_attempt_aborts_promptly(make_call_client, sleep_recorder):
    call_client, fake = make_call_client(hang, llm_request_timeout=5.0)
    token = CancellationToken()

    task = asyncio.ensure_future(call_client.invoke(_request(), token))
    await asyncio.sleep(0.01)
    token.cancel()

    with pytest.raises(InferenceCancelledError):
        await asyncio.wait_for(task, timeout=1.0)

    assert len(fake.completions.calls) == 1
    assert sleep_recorder.delays == []


@pytest.mark.asyncio
async def test_cancel_during_backoff_stops_retries(settings):
    token = CancellationToken()

    async def sleep_until_cancelled(delay):
        token.cancel()
        await asyncio.Event().wait()

    fake = FakeLLMClient(unavailable)
    handle = LLMClientHandle(settings, client_factory=lambda _: fake)
    call_client = ResilientCallClient(settings, handle, sleep=sleep_until_cancelled)

    with pytest.raises(InferenceCancelledError):
        await asyncio.wait_for(call_client.invoke(_request(), token), timeout=1.0)

    assert len(fake.completions.calls) == 1


@pytest.mark.asyncio
async def test_cancellable_sleep_completes_normally():
    slept = []

    async def record(delay):
        slept.append(delay)

    await cancellable_sleep(0.25, CancellationToken(), record)

    assert slept == [0.25]


def test_token_is_idempotent():
    token = CancellationToken()
    token.cancel()
    token.cancel()

    assert token.cancelled is True
    with pytest.raises(InferenceCancelledError):
        token.raise_if_cancelled()


# ==========================================
#  Error classification
# ==========================================


@pytest.mark.parametrize(
    "exc,expected",
    [
        (auth_error(), InferenceErrorKind.AUTH_FAILURE),
        (
            openai.PermissionDeniedError(
                "forbidden", response=httpx.Response(403, request=_REQUEST), body=None
            ),
            InferenceErrorKind.AUTH_FAILURE,
        ),
        (
            openai.InternalServerError(
                "boom", response=httpx.Response(500, request=_REQUEST), body=None
            ),
            InferenceErrorKind.TRANSPORT_FAILURE,
        ),
        (openai.APITimeoutError(request=_REQUEST), InferenceErrorKind.TIMEOUT),
        (httpx.ReadTimeout("slow", request=_REQUEST), InferenceErrorKind.TIMEOUT),
        (connection_error(), InferenceErrorKind.TRANSPORT_FAILURE),
        (RuntimeError("unexpected"), InferenceErrorKind.TRANSPORT_FAILURE),
    ],
)
def test_classify_exception(exc, expected):
    assert classify_exception(exc).kind is expected


def test_classify_passes_taxonomy_errors_through():
    error = InferenceCancelledError("Request cancelled")

    assert classify_exception(error) is error


def test_only_timeout_and_transport_are_retryable():
    assert InferenceTimeoutError.retryable is True
    assert InferenceTransportError.retryable is True
    assert InferenceAuthError.retryable is False
    assert InferenceCancelledError.retryable is False


def test_malformed_response_is_transport_failure():
    with pytest.raises(InferenceTransportError):
        extract_content(object())


# ==========================================
#  Client handle
# ==========================================


@pytest.mark.asyncio
async def test_handle_constructs_client_once_under_concurrency(settings):
    built = []

    async def respond(kwargs):
        await asyncio.sleep(0)
        return completion("ok")

    def factory(_settings):
        built.append(_settings)
        return FakeLLMClient(respond)

    handle = LLMClientHandle(settings, client_factory=factory)
    call_client = ResilientCallClient(settings, handle)

    replies = await asyncio.gather(
        *(call_client.invoke(_request(), CancellationToken()) for _ in range(5))
    )

    assert replies == ["ok"] * 5
    assert len(built) == 1


def test_handle_get_is_thread_safe(settings):
    built = []
    barrier = threading.Barrier(8)

    def factory(_settings):
        built.append(_settings)
        return object()

    handle = LLMClientHandle(settings, client_factory=factory)
    results = []

    def worker():
        barrier.wait()
        results.append(handle.get())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(built) == 1
    assert all(result is results[0] for result in results)


@pytest.mark.asyncio
async def test_handle_close(settings):
    fake = FakeLLMClient(unavailable)
    handle = LLMClientHandle(settings, client_factory=lambda _: fake)

    assert handle.initialized is False
    handle.get()
    assert handle.initialized is True

    await handle.aclose()

    assert fake.closed is True
    assert handle.initialized is False

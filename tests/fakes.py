"""Fake inference client and helpers shared by the unit tests."""

import asyncio
from collections.abc import Awaitable, Callable
from types import SimpleNamespace
from typing import Any

import httpx
import openai

Responder = Callable[[dict[str, Any]], Awaitable[Any]]

_REQUEST = httpx.Request("POST", "https://llm.test/v1/chat/completions")


def completion(text: str) -> SimpleNamespace:
    """Minimal chat-completion response carrying ``text``."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(request=_REQUEST)


def auth_error() -> openai.AuthenticationError:
    response = httpx.Response(401, request=_REQUEST)
    return openai.AuthenticationError("Invalid API Key", response=response, body=None)


def stage_of(kwargs: dict[str, Any]) -> str:
    """Tell which engine issued a request from its system prompt."""
    system_prompt = kwargs["messages"][0]["content"]
    if "message classifier" in system_prompt:
        return "categorization"
    if "triage specialist" in system_prompt:
        return "urgency"
    return "action"


class FakeCompletions:
    """Stands in for ``client.chat.completions``; delegates to a responder."""

    def __init__(self, responder: Responder):
        self.responder = responder
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        return await self.responder(kwargs)

    def stages(self) -> list[str]:
        return [stage_of(call) for call in self.calls]


class FakeLLMClient:
    def __init__(self, responder: Responder):
        self.completions = FakeCompletions(responder)
        self.chat = SimpleNamespace(completions=self.completions)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


class SleepRecorder:
    """Records requested backoff delays without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


async def unavailable(kwargs: dict[str, Any]) -> Any:
    raise connection_error()


async def hang(kwargs: dict[str, Any]) -> Any:
    await asyncio.Event().wait()

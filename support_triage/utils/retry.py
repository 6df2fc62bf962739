"""
Retry utilities for handling timeouts and transient transport errors.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from support_triage.infrastructure.llm.errors import InferenceError
from support_triage.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]


def backoff_delay(attempt: int, initial_delay: float, backoff_factor: float) -> float:
    """Delay before the retry that follows the zero-based ``attempt``."""
    return initial_delay * (backoff_factor**attempt)


async def cancellable_sleep(
    delay: float,
    cancel_token: CancellationToken,
    sleep: SleepFunc = asyncio.sleep,
) -> None:
    """Sleep for ``delay`` seconds unless the token fires first.

    Raises:
        InferenceCancelledError: If the token fired before or during the sleep.
    """
    cancel_token.raise_if_cancelled()
    sleeper = asyncio.ensure_future(sleep(delay))
    waiter = asyncio.ensure_future(cancel_token.wait())
    try:
        await asyncio.wait({sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        sleeper.cancel()
        waiter.cancel()
    cancel_token.raise_if_cancelled()


async def run_with_retry(
    func: Callable[[], Awaitable[Any]],
    cancel_token: CancellationToken,
    max_retries: int = 2,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    sleep: SleepFunc = asyncio.sleep,
) -> Any:
    """
    Execute an async function with retry logic for retryable inference errors.

    Args:
        func: Async function to execute (no parameters), one call per attempt
        cancel_token: Checked before every attempt and raced against every wait
        max_retries: Retries after the first attempt (total attempts = max_retries + 1)
        initial_delay: Delay in seconds before the first retry
        backoff_factor: Multiplier for delay between retries
        sleep: Sleep coroutine, injectable for tests

    Returns:
        Result from the function

    Raises:
        InferenceError: The first non-retryable error, or the last error once
            retries are exhausted.
    """
    for attempt in range(max_retries + 1):
        cancel_token.raise_if_cancelled()
        try:
            return await func()
        except InferenceError as e:
            if not e.retryable or attempt >= max_retries:
                raise

            wait_time = backoff_delay(attempt, initial_delay, backoff_factor)
            logger.warning(
                "Inference %s error (%s). Attempt %s/%s. Waiting %.1f seconds before retry...",
                e.kind.value,
                e,
                attempt + 1,
                max_retries + 1,
                wait_time,
            )
            await cancellable_sleep(wait_time, cancel_token, sleep)

    raise RuntimeError("Max retries exceeded")

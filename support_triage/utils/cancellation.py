"""Cooperative cancellation shared by the stages of one analysis."""

import asyncio

from support_triage.infrastructure.llm.errors import InferenceCancelledError


class CancellationToken:
    """Single-shot cancellation signal.

    One token is created per analysis and handed to every stage. Firing it
    is idempotent; once cancelled it stays cancelled.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise ``InferenceCancelledError`` if the token has fired."""
        if self._event.is_set():
            raise InferenceCancelledError("Request cancelled")

    async def wait(self) -> None:
        """Block until the token fires."""
        await self._event.wait()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"

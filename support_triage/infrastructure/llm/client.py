"""Shared handle for the remote inference client."""

import logging
import threading
from collections.abc import Callable
from typing import Any

from openai import AsyncOpenAI

from support_triage.config.settings import Settings

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Settings], Any]


def create_openai_client(settings: Settings) -> AsyncOpenAI:
    """Create an OpenAI-compatible async client for the configured endpoint.

    SDK-level retries are disabled; retry and timeout discipline is applied
    by the resilient call client.
    """
    return AsyncOpenAI(
        api_key=settings.llm_api_key,
        base_url=settings.llm_base_url,
        max_retries=0,
        timeout=settings.llm_request_timeout,
    )


class LLMClientHandle:
    """Construct-once, read-many holder of the inference client.

    The client is built on first use and reused for the lifetime of the
    handle. Concurrent stages may call ``get`` at the same time.
    """

    def __init__(self, settings: Settings, client_factory: ClientFactory | None = None):
        self._settings = settings
        self._factory = client_factory or create_openai_client
        self._client: Any = None
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._client is not None

    def get(self) -> Any:
        """Return the shared client, constructing it on first call."""
        if self._client is None:
            with self._lock:
                if self._client is None:
                    if not self._settings.llm_api_key:
                        logger.warning("No llm_api_key configured; remote calls will be rejected")
                    logger.debug("Creating inference client for %s", self._settings.llm_base_url)
                    self._client = self._factory(self._settings)
        return self._client

    async def aclose(self) -> None:
        """Close the client if one was created."""
        with self._lock:
            client, self._client = self._client, None
        if client is not None and hasattr(client, "close"):
            await client.close()
            logger.info("Inference client closed")

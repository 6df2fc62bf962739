"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from support_triage.api.dependencies import get_service_context
from support_triage.api.routers import api_router
from support_triage.config.settings import Settings, get_settings
from support_triage.infrastructure.logging.logger import setup_logging

settings = get_settings()

setup_logging(
    level=settings.log_level,
    json_output=not settings.debug,
    silence_noisy_loggers=True,
)

logger = logging.getLogger(__name__)


def _validate_startup_config(settings: Settings) -> None:
    """Validate required configuration at startup."""
    if not settings.llm_api_key:
        logger.warning(
            "No llm_api_key configured (LLM_API_KEY or GROQ_API_KEY); "
            "all analyses will use rule-based fallbacks"
        )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup and shutdown lifecycle."""
    logger.info("Starting %s", settings.app_name)
    _validate_startup_config(settings)
    yield
    logger.info("Shutting down %s", settings.app_name)
    try:
        await get_service_context().llm_handle.aclose()
    except Exception as e:
        logger.error("Error closing inference client: %s", e, exc_info=True)


app = FastAPI(
    title=settings.app_name,
    description="Categorizes, prioritizes and recommends actions for customer support messages",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials="*" not in settings.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("support_triage.app:app", host="0.0.0.0", port=8000, log_config=None)


if __name__ == "__main__":
    main()

"""Application settings using Pydantic BaseSettings."""

import logging
from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "Support Triage Engine"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_VALID_LOG_LEVELS}, got '{v}'")
        return upper

    @model_validator(mode="after")
    def validate_call_discipline(self) -> "Settings":
        if self.llm_request_timeout <= 0:
            raise ValueError(f"llm_request_timeout must be positive, got {self.llm_request_timeout}")
        if self.llm_max_retries < 0:
            raise ValueError(f"llm_max_retries must not be negative, got {self.llm_max_retries}")
        if self.llm_retry_delay < 0:
            raise ValueError(f"llm_retry_delay must not be negative, got {self.llm_retry_delay}")
        if self.llm_retry_backoff_factor < 1:
            raise ValueError(
                f"llm_retry_backoff_factor must be at least 1, got {self.llm_retry_backoff_factor}"
            )
        return self

    @model_validator(mode="after")
    def validate_engine_sampling(self) -> "Settings":
        for engine in ("categorization", "urgency", "action"):
            temperature = getattr(self, f"{engine}_temperature")
            if not 0.0 <= temperature <= 1.0:
                raise ValueError(
                    f"{engine}_temperature must be within [0, 1], got {temperature}"
                )
            max_tokens = getattr(self, f"{engine}_max_tokens")
            if max_tokens <= 0:
                raise ValueError(f"{engine}_max_tokens must be positive, got {max_tokens}")
        return self

    @model_validator(mode="after")
    def warn_wildcard_origins(self) -> "Settings":
        if self.allowed_origins == ["*"]:
            logging.getLogger(__name__).warning(
                "allowed_origins is set to ['*'], consider restricting in production"
            )
        return self

    # Remote inference service (OpenAI-compatible chat completions)
    llm_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("llm_api_key", "groq_api_key"),
    )
    llm_base_url: str = "https://api.groq.com/openai/v1"

    # Categorization Agent
    categorization_model: str = "llama-3.3-70b-versatile"
    categorization_temperature: float = 0.2
    categorization_max_tokens: int = 300

    # Urgency Agent
    urgency_model: str = "llama-3.3-70b-versatile"
    urgency_temperature: float = 0.3
    urgency_max_tokens: int = 300

    # Action Agent
    action_model: str = "llama-3.3-70b-versatile"
    action_temperature: float = 0.4
    action_max_tokens: int = 300

    # Call discipline
    llm_request_timeout: float = 15.0
    llm_max_retries: int = 2
    llm_retry_delay: float = 1.0
    llm_retry_backoff_factor: float = 2.0

    # Fallback reasoning templates
    reasoning_seed: int | None = None

    # CORS
    allowed_origins: list[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

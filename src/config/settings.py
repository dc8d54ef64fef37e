"""Environment configuration and validation.

This module defines strongly-typed application settings loaded from environment variables
(optionally via a local `.env` file).

It enforces the invariants the runtime depends on, such as a non-negative transcription pacing
interval and an API key whenever LLM extraction is switched on.
"""

from __future__ import annotations

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    telegram_bot_token: str = Field(alias="TELEGRAM_BOT_TOKEN")
    openai_api_key: str = Field(alias="OPENAI_API_KEY")

    router_api_url: str = Field(alias="ROUTER_API_URL")
    router_api_token: str = Field(alias="ROUTER_API_TOKEN")
    router_timeout_s: float = Field(default=20.0, gt=0, alias="ROUTER_TIMEOUT_S")

    llm_enabled: bool = Field(default=False, alias="LLM_ENABLED")
    llm_api_key: str | None = Field(default=None, alias="LLM_API_KEY")

    transcribe_min_interval_ms: int = Field(default=1200, ge=0, alias="TRANSCRIBE_MIN_INTERVAL_MS")
    transcribe_max_retries: int = Field(default=3, ge=0, alias="TRANSCRIBE_MAX_RETRIES")

    ffmpeg_binary: str = Field(default="ffmpeg", alias="FFMPEG_BINARY")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @model_validator(mode="after")
    def validate_llm_config(self) -> Settings:
        """Validate the optional LLM extraction configuration.

        The LLM uses the OpenAI key unless a dedicated `LLM_API_KEY` is provided.
        """

        if self.llm_enabled and not (self.llm_api_key or self.openai_api_key):
            raise ValueError("LLM_API_KEY or OPENAI_API_KEY is required when LLM_ENABLED=true")
        return self

    @property
    def effective_llm_api_key(self) -> str | None:
        return self.llm_api_key or self.openai_api_key or None

    @property
    def transcribe_min_interval_s(self) -> float:
        return self.transcribe_min_interval_ms / 1000.0


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is missing or invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        # Raising here is fine: caller can decide how to handle startup errors.
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc

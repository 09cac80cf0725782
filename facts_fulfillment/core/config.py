"""Application configuration loaded via Pydantic settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    FACTS_LOG_LEVEL: str = Field(default="info")
    FACTS_LOG_DIR: Path | None = Field(default=None)
    FACTS_LOG_SCHEMA_VERSION: str = Field(default="1.0.0")
    # Optional override for the packaged response catalog
    FACTS_RESPONSES_PATH: Path | None = Field(default=None)
    # Seed for the fact selector; unset means system randomness
    FACTS_RANDOM_SEED: int | None = Field(default=None)
    CONTEXT_LIFESPAN: int = Field(default=5, ge=1)
    SESSION_LOCK_TTL_SECONDS: int = Field(default=600)

    DATA_DIR: Path = Field(default=Path("/data"))


settings = Settings()  # type: ignore[call-arg]


__all__ = ["Settings", "settings"]

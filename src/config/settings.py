# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings: generation
service credentials and model candidates, durable cache medium and TTL,
and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL_CANDIDATES = (
    "gemini-flash-latest",
    "gemini-2.5-flash",
    "gemini-2.0-flash",
    "gemini-1.5-flash-latest",
)


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # === Generation service ===
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("gemini_api_key", "api_key", "google_api_key"),
    )
    gemini_model: str = ""
    llm_model_candidates: str = ",".join(DEFAULT_MODEL_CANDIDATES)
    market_country: str = "India"

    # === Cache ===
    cache_backend: Literal["memory", "json", "sqlite", "redis"] = "json"
    cache_root: Path = Path("~/.mpfscore/cache")
    cache_redis_url: str = ""
    cache_ttl_days: float = 30

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("cache_ttl_days")
    @classmethod
    def clamp_cache_ttl(cls, v: float) -> float:  # noqa: N805
        """TTL is expressed in days with a floor of one day."""
        return max(1.0, float(v))

    @field_validator("log_retention")
    @classmethod
    def validate_log_retention(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("log_retention must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if not self.market_country.strip():
            errors.append("MARKET_COUNTRY must not be blank")

        if self.cache_backend == "redis" and not self.cache_redis_url:
            errors.append("CACHE_REDIS_URL must be set when CACHE_BACKEND=redis")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def llm_model_candidates_list(self) -> list[str]:
        """Parse comma-separated model candidates."""
        return [m.strip() for m in self.llm_model_candidates.split(",") if m.strip()]

    @property
    def cache_ttl_ms(self) -> float:
        """TTL converted to milliseconds (cache timestamps are epoch ms)."""
        return self.cache_ttl_days * 24 * 60 * 60 * 1000

    @property
    def generation_enabled(self) -> bool:
        return bool(self.gemini_api_key.strip())


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or one-off runs).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]

"""Client configuration using Pydantic Settings.

Loads configuration from environment variables and a `.env` file with
validation, type coercion, and defaults suitable for the public trace.moe API.

Usage:
    from tracemoe.config import get_settings

    settings = get_settings()  # cached singleton
    print(settings.TRACEMOE_BASE_URL)
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.trace.moe"


class Settings(BaseSettings):
    """Client settings loaded from environment variables / .env file.

    Every field is optional. Without `TRACEMOE_API_KEY` the client runs
    against the anonymous, IP-based quota.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── trace.moe ─────────────────────────────────────────────────────
    TRACEMOE_API_KEY: str | None = Field(default=None, description="API key sent as the x-trace-key header")
    TRACEMOE_BASE_URL: str = Field(default=DEFAULT_BASE_URL, description="trace.moe API base URL")

    # ── Rate limiting ─────────────────────────────────────────────────
    TRACEMOE_RETRY_ON_RATE_LIMIT: bool = Field(
        default=False,
        description="Wait for x-ratelimit-reset and retry when the API returns 429",
    )
    TRACEMOE_MAX_RATE_LIMIT_RETRIES: int | None = Field(
        default=None,
        ge=0,
        description="Cap on 429 retries (unset means retry until the API accepts the request)",
    )

    # ── HTTP Client ───────────────────────────────────────────────────
    HTTP_TIMEOUT: int = Field(default=30, ge=1, le=120, description="HTTP request timeout (seconds)")

    # ── Logging ───────────────────────────────────────────────────────
    LOG_LEVEL: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    LOG_FORMAT: str = Field(default="json", description="Log output format ('json' or 'console')")

    # ── Validators ────────────────────────────────────────────────────

    @field_validator("TRACEMOE_API_KEY")
    @classmethod
    def validate_api_key(cls, v: str | None) -> str | None:
        """Treat a blank key as no key."""
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("TRACEMOE_BASE_URL")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure the base URL doesn't have a trailing slash."""
        return v.rstrip("/")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate log level."""
        v = v.upper().strip()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}, got '{v}'")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        v = v.lower().strip()
        if v not in ("json", "console"):
            raise ValueError("LOG_FORMAT must be 'json' or 'console'")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton Settings instance.

    The `.env` file is only read once per process.
    """
    return Settings()

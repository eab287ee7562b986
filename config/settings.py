"""
Credential client settings loaded from environment variables.

Uses Pydantic Settings for type-safe configuration with validation.
All settings can be overridden via CREDENTIALS_* environment variables or .env file.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CredentialSettings(BaseSettings):
    """
    Credential client configuration.

    Environment variables use the CREDENTIALS_ prefix, e.g.
    CREDENTIALS_SECRET_NAME, CREDENTIALS_CACHE_TTL_SECONDS.
    """

    model_config = SettingsConfigDict(
        env_prefix="CREDENTIALS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unrelated variables sharing the .env file
    )

    secret_name: str = Field(
        default="signal9-advisor/api-credentials",
        min_length=1,
        description="Secret identifier holding the credentials JSON",
    )
    cache_ttl_seconds: float = Field(
        default=300,
        gt=0,
        description="How long validated credentials stay cached (seconds)",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        description="Total fetch attempts per cache miss",
    )
    base_retry_delay_ms: int = Field(
        default=1000,
        ge=0,
        description="Delay before the second attempt; doubles on each further attempt",
    )
    backend: Literal["aws", "env"] = Field(
        default="aws",
        description="Secret store backend (aws for deployed environments, env for local)",
    )
    region: str | None = Field(
        default=None,
        description="AWS region (falls back to AWS_REGION, AWS_DEFAULT_REGION, us-east-1)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @field_validator("backend", mode="before")
    @classmethod
    def _normalize_backend(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("log_level")
    @classmethod
    def _uppercase_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {value}")
        return level


@lru_cache
def get_settings() -> CredentialSettings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.

    Example:
        >>> settings = get_settings()
        >>> settings.secret_name
        'signal9-advisor/api-credentials'
    """
    return CredentialSettings()

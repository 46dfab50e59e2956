"""
Application configuration.

Loads settings from environment variables (and `.env`) with sensible defaults.
Settings are frozen: build once at startup and inject where needed.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # ==========================================================================
    # API Server
    # ==========================================================================

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    # ==========================================================================
    # Authentication
    # ==========================================================================

    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    token_ttl_hours: int = 72
    token_subject: str = "example_user"

    # ==========================================================================
    # Database
    # ==========================================================================

    mongo_uri: str = ""
    mongo_database: str = ""
    mongo_connect_timeout_seconds: float = 30.0
    store_operation_timeout_seconds: float = 10.0

    @field_validator("jwt_algorithm")
    @classmethod
    def _hmac_only(cls, value: str) -> str:
        if value not in HMAC_ALGORITHMS:
            raise ValueError(f"jwt_algorithm must be one of {HMAC_ALGORITHMS}, got {value!r}")
        return value

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def use_mongo(self) -> bool:
        """Whether a MongoDB store should be used."""
        return bool(self.mongo_uri)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""
Core configuration module for the Chat Sessions API.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the CHAT_SESSIONS_ prefix.

Pattern: Pydantic BaseSettings with an lru_cache singleton accessor
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All fields use the CHAT_SESSIONS_ prefix for environment variables.
    Example: CHAT_SESSIONS_REDIS_URL=redis://cache:6379/0
    """

    # =========================================================================
    # Service Configuration
    # =========================================================================
    service_name: str = Field(
        default="chat-sessions",
        description="Name of the service for logging and identification",
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Port the service listens on",
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level for structured logging",
    )
    cors_origins: str = Field(
        default="",
        description="Comma-separated allowed origins outside development",
    )

    # =========================================================================
    # Redis Configuration
    # =========================================================================
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for session storage",
    )
    redis_pool_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Size of the Redis connection pool",
    )
    redis_key_prefix: str = Field(
        default="chat_sessions:",
        min_length=1,
        description="Prefix for every session key written to Redis",
    )

    # =========================================================================
    # Session Rules
    # =========================================================================
    default_list_limit: int = Field(
        default=50,
        ge=0,
        description="Page size used when a list request gives no limit",
    )

    model_config = {
        "env_prefix": "CHAT_SESSIONS_",
        "case_sensitive": False,
        "extra": "ignore",
    }

    # =========================================================================
    # Field Validators
    # =========================================================================
    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v: str) -> str:
        """Validate Redis URL format."""
        if not v.startswith(("redis://", "rediss://")):
            raise ValueError("Redis URL must start with redis:// or rediss://")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def is_production(self) -> bool:
        """True when running with production behaviour (no docs, no traces)."""
        return self.environment == "production"

    def get_cors_origins(self) -> list[str]:
        """
        Get CORS allowed origins based on environment.

        - Development: Allow all origins (["*"])
        - Staging/Production: Use CHAT_SESSIONS_CORS_ORIGINS (comma-separated)
        - If not configured outside development: Empty list

        Returns:
            List of allowed origin strings.
        """
        if self.environment == "development":
            return ["*"]

        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# =============================================================================
# Settings Singleton
# =============================================================================


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses functools.lru_cache to ensure only one Settings instance is created.
    Tests that change the environment should call get_settings.cache_clear().

    Returns:
        Settings: The application settings instance.
    """
    return Settings()

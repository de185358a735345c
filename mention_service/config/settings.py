"""
Application configuration settings using Pydantic Settings.

This module provides centralized configuration management with
environment variable support, validation, and type safety.
"""

from typing import Optional
from string import Formatter
from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings
from pydantic.networks import RedisDsn

from mention_service.config.constants import (
    DEFAULT_MENTIONS_QUEUE_KEY,
    DEFAULT_QUEUE_PUSH_TIMEOUT_SECONDS,
    DEFAULT_DEDUP_TTL_SECONDS,
    DEFAULT_GRAPH_API_BASE_URL,
    DEFAULT_GRAPH_API_VERSION,
    DEFAULT_GRAPH_API_TIMEOUT_SECONDS,
    DEFAULT_REPLY_TEMPLATE,
)


class Environment(str, Enum):
    """Application environment options."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging level options."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Environment Configuration
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Server Configuration
    HOST: str = Field(
        default="0.0.0.0",
        description="Server host address"
    )
    PORT: int = Field(
        default=8001,
        ge=1,
        le=65535,
        description="Server port number"
    )

    # Logging Configuration
    LOG_LEVEL: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level"
    )
    LOG_FORMAT: str = Field(
        default="json",
        pattern=r"^(json|text)$",
        description="Log output format"
    )

    # Webhook Configuration
    META_VERIFY_TOKEN: str = Field(
        default="",
        description="Token the platform echoes during the subscription handshake"
    )
    IG_USERNAME: str = Field(
        default="",
        description="Handle of the tracked Instagram account"
    )

    # Graph API Configuration
    META_ACCESS_TOKEN: Optional[str] = Field(
        default=None,
        description="Graph API bearer credential"
    )
    GRAPH_API_BASE_URL: str = Field(
        default=DEFAULT_GRAPH_API_BASE_URL,
        description="Graph API base URL"
    )
    GRAPH_API_VERSION: str = Field(
        default=DEFAULT_GRAPH_API_VERSION,
        pattern=r"^v\d+\.\d+$",
        description="Graph API version segment"
    )
    GRAPH_API_TIMEOUT_SECONDS: float = Field(
        default=DEFAULT_GRAPH_API_TIMEOUT_SECONDS,
        gt=0,
        le=60,
        description="Ceiling for a single Graph API call in seconds"
    )

    # Redis Queue Configuration
    REDIS_URL: RedisDsn = Field(
        default="redis://localhost:6379",
        description="Redis connection URL"
    )
    REDIS_PASSWORD: Optional[str] = Field(
        default=None,
        description="Redis credential when not embedded in the URL"
    )
    REDIS_SOCKET_TIMEOUT: float = Field(
        default=3.0,
        gt=0,
        le=60,
        description="Redis socket timeout in seconds"
    )
    MENTIONS_QUEUE_KEY: str = Field(
        default=DEFAULT_MENTIONS_QUEUE_KEY,
        min_length=1,
        max_length=200,
        description="Redis list receiving mention jobs"
    )
    QUEUE_PUSH_TIMEOUT_SECONDS: float = Field(
        default=DEFAULT_QUEUE_PUSH_TIMEOUT_SECONDS,
        gt=0,
        le=30,
        description="Ceiling for a single enqueue in seconds"
    )

    # Pipeline Feature Flags
    ENQUEUE_ENABLED: bool = Field(
        default=True,
        description="Push a job for every mention event"
    )
    MENTION_DEDUP_ENABLED: bool = Field(
        default=True,
        description="Skip mentions already enqueued for the same media and comment"
    )
    MENTION_DEDUP_TTL_SECONDS: int = Field(
        default=DEFAULT_DEDUP_TTL_SECONDS,
        ge=1,
        le=2592000,  # 30 days
        description="Lifetime of a dedup marker in seconds"
    )
    AUTO_REPLY_ENABLED: bool = Field(
        default=False,
        description="Reply to mentions on the tracked account's own media"
    )
    AUTO_REPLY_TEMPLATE: str = Field(
        default=DEFAULT_REPLY_TEMPLATE,
        min_length=1,
        max_length=2200,  # Instagram comment limit
        description="Reply text; {username} is replaced by the commenter handle"
    )

    # Monitoring Configuration
    METRICS_ENABLED: bool = Field(
        default=True,
        description="Expose Prometheus metrics"
    )

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        validate_assignment = True
        extra = "ignore"

    @field_validator("IG_USERNAME")
    @classmethod
    def normalize_username(cls, v):
        """Store the handle lower-cased without a leading @."""
        return v.strip().lstrip("@").lower()

    @field_validator("AUTO_REPLY_TEMPLATE")
    @classmethod
    def validate_reply_template(cls, v):
        """Reject templates with placeholders other than a bare {username}."""
        try:
            fields = [
                (name, spec, conversion)
                for _, name, spec, conversion in Formatter().parse(v)
                if name is not None
            ]
        except ValueError as e:
            raise ValueError(f"Invalid reply template: {e}")

        for name, spec, conversion in fields:
            if name != "username" or spec or conversion:
                raise ValueError(
                    f"Invalid reply template placeholder {{{name}}}: only {{username}} is supported"
                )
        return v

    @model_validator(mode='after')
    def validate_environment_consistency(self):
        """Validate environment-specific consistency."""
        if self.ENVIRONMENT == Environment.PRODUCTION:
            if self.DEBUG:
                raise ValueError("Debug mode should not be enabled in production")

            if not self.META_VERIFY_TOKEN:
                raise ValueError("META_VERIFY_TOKEN is required in production")

            if not self.IG_USERNAME:
                raise ValueError("IG_USERNAME is required in production")

        return self

    def graph_api_url(self) -> str:
        """Get versioned Graph API root."""
        return f"{self.GRAPH_API_BASE_URL.rstrip('/')}/{self.GRAPH_API_VERSION}"

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == Environment.DEVELOPMENT


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached singleton).

    Returns:
        Settings: Configured application settings instance
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Force reload of application settings.

    Returns:
        Settings: New settings instance
    """
    get_settings.cache_clear()
    return get_settings()

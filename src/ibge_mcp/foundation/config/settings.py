"""Server configuration read from IBGE_MCP_* environment variables (or .env).

One settings class per concern: cache TTL, upstream retries, the HTTP
client, stderr logging and call metrics. Defaults match what the server
runs with when nothing is set.

Example:
    >>> from ibge_mcp.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.cache.default_ttl_minutes
    15.0
    >>> settings.logging.enabled
    False

    # Overrides:
    # IBGE_MCP_CACHE_DEFAULT_TTL_MINUTES=60
    # IBGE_MCP_LOG_ENABLED=true
    # IBGE_MCP_LOG_LEVEL=debug
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, NonNegativeFloat, PositiveFloat, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseSettings):
    """Request cache configuration."""

    model_config = SettingsConfigDict(env_prefix="IBGE_MCP_CACHE_", extra="ignore")

    default_ttl_minutes: PositiveFloat = Field(default=15.0, description="TTL used when a call gives none")


class RetrySettings(BaseSettings):
    """Default retry configuration for upstream requests."""

    model_config = SettingsConfigDict(env_prefix="IBGE_MCP_RETRY_", extra="ignore")

    max_retries: Annotated[int, Field(ge=0, le=10)] = 4
    initial_delay: NonNegativeFloat = Field(default=2.0, description="First backoff delay in seconds")
    max_delay: NonNegativeFloat = Field(default=16.0, description="Backoff cap in seconds")
    multiplier: PositiveFloat = Field(default=2.0, description="Exponential backoff base")
    retryable_status_codes: frozenset[int] = frozenset({429, 500, 502, 503, 504})


class HttpSettings(BaseSettings):
    """HTTP client defaults."""

    model_config = SettingsConfigDict(env_prefix="IBGE_MCP_HTTP_", extra="ignore")

    timeout: PositiveFloat = Field(default=30.0, description="Request timeout in seconds")
    follow_redirects: bool = True
    user_agent: str = "ibge-mcp/1.1"


class LoggingSettings(BaseSettings):
    """Diagnostic logging configuration.

    Disabled by default: stdout carries the MCP protocol, and anything
    emitted goes to stderr only once explicitly enabled.
    """

    model_config = SettingsConfigDict(env_prefix="IBGE_MCP_LOG_", extra="ignore")

    enabled: bool = False
    level: Literal["debug", "info", "warn", "error"] = "info"
    format: Literal["console", "json"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        if not isinstance(v, str):
            return v
        v = v.lower()
        return "warn" if v == "warning" else v


class MetricsSettings(BaseSettings):
    """Call metrics configuration."""

    model_config = SettingsConfigDict(env_prefix="IBGE_MCP_METRICS_", extra="ignore")

    enabled: bool = True
    max_recent_errors: PositiveInt = 50


class IbgeSettings(BaseSettings):
    """Root settings for the IBGE MCP server.

    Example environment variables:
        IBGE_MCP_CACHE_DEFAULT_TTL_MINUTES=30
        IBGE_MCP_RETRY_MAX_RETRIES=2
        IBGE_MCP_HTTP_TIMEOUT=10
        IBGE_MCP_LOG_ENABLED=true
        IBGE_MCP_METRICS_ENABLED=false
    """

    model_config = SettingsConfigDict(
        env_prefix="IBGE_MCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    server_name: str = "ibge-br-mcp"
    server_version: str = "1.1.0"

    cache: CacheSettings = Field(default_factory=CacheSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    metrics: MetricsSettings = Field(default_factory=MetricsSettings)


@lru_cache(maxsize=1)
def get_settings() -> IbgeSettings:
    """Get the global settings instance (cached)."""
    return IbgeSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()

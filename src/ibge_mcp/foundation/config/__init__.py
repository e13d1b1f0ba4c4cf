"""Configuration management using pydantic-settings, plus static IBGE reference data."""

from . import constants
from .settings import (
    CacheSettings,
    HttpSettings,
    IbgeSettings,
    LoggingSettings,
    MetricsSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "CacheSettings",
    "HttpSettings",
    "IbgeSettings",
    "LoggingSettings",
    "MetricsSettings",
    "RetrySettings",
    "clear_settings_cache",
    "constants",
    "get_settings",
]

"""Tests for environment-driven settings."""

import pytest

from ibge_mcp.foundation.config import IbgeSettings, LoggingSettings, clear_settings_cache, get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    clear_settings_cache()
    yield
    clear_settings_cache()


def test_defaults() -> None:
    s = IbgeSettings()
    assert s.cache.default_ttl_minutes == 15.0
    assert s.retry.max_retries == 4
    assert s.retry.retryable_status_codes == frozenset({429, 500, 502, 503, 504})
    assert s.http.timeout == 30.0
    assert not s.logging.enabled
    assert s.metrics.max_recent_errors == 50


def test_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("IBGE_MCP_CACHE_DEFAULT_TTL_MINUTES", "60")
    monkeypatch.setenv("IBGE_MCP_RETRY_MAX_RETRIES", "1")
    monkeypatch.setenv("IBGE_MCP_LOG_ENABLED", "true")
    monkeypatch.setenv("IBGE_MCP_LOG_LEVEL", "WARNING")

    s = get_settings()
    assert s.cache.default_ttl_minutes == 60
    assert s.retry.max_retries == 1
    assert s.logging.enabled
    assert s.logging.level == "warn"


def test_get_settings_cached() -> None:
    assert get_settings() is get_settings()


def test_invalid_level_rejected() -> None:
    with pytest.raises(ValueError):
        LoggingSettings(level="verbose")

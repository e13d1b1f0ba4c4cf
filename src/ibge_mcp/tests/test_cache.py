"""Tests for the TTL request cache."""

import time

from ibge_mcp.io.cache import CacheTTL, RequestCache


def test_set_then_get(clock) -> None:
    cache = RequestCache(clock=clock)
    value = [{"id": 35, "sigla": "SP"}]
    cache.set("estados", value)
    assert cache.get("estados") is value
    assert cache.has("estados")


def test_unknown_key_is_absent() -> None:
    cache = RequestCache()
    assert cache.get("nope") is None
    assert not cache.has("nope")


def test_entry_expires_after_ttl(clock) -> None:
    cache = RequestCache(clock=clock)
    cache.set("k", "v", ttl_minutes=1)

    clock.advance(60)
    assert cache.get("k") == "v"  # expiry is exclusive of the boundary

    clock.advance(0.001)
    assert cache.get("k") is None
    assert not cache.has("k")
    assert cache.size == 0


def test_short_ttl_real_clock() -> None:
    """0.001 minutes is 60ms; after 100ms the entry is gone."""
    cache = RequestCache()
    cache.set("k", "v", 0.001)
    time.sleep(0.1)
    assert cache.get("k") is None


def test_default_ttl_used_when_none(clock) -> None:
    cache = RequestCache(default_ttl_minutes=2, clock=clock)
    cache.set("k", "v")
    clock.advance(119)
    assert cache.has("k")
    clock.advance(2)
    assert not cache.has("k")


def test_zero_ttl_expires_immediately(clock) -> None:
    cache = RequestCache(clock=clock)
    cache.set("k", "v", ttl_minutes=0)
    clock.advance(0.001)
    assert cache.get("k") is None


def test_set_replaces(clock) -> None:
    cache = RequestCache(clock=clock)
    cache.set("k", "old", ttl_minutes=1)
    cache.set("k", "new", ttl_minutes=10)
    clock.advance(120)
    assert cache.get("k") == "new"


def test_delete_and_clear() -> None:
    cache = RequestCache()
    cache.set("a", 1)
    cache.set("b", 2)
    cache.delete("a")
    cache.delete("missing")
    assert cache.get("a") is None
    assert cache.get("b") == 2

    cache.set("c", 3)
    cache.clear()
    assert all(cache.get(k) is None for k in ("a", "b", "c"))
    assert cache.size == 0


def test_cleanup_removes_only_expired(clock) -> None:
    cache = RequestCache(clock=clock)
    cache.set("short", 1, ttl_minutes=CacheTTL.REALTIME)
    cache.set("medium", 2, ttl_minutes=CacheTTL.MEDIUM)
    cache.set("static", 3, ttl_minutes=CacheTTL.STATIC)

    clock.advance(61 * 60)
    assert cache.size == 3  # nothing swept yet
    assert cache.cleanup() == 2
    assert cache.cleanup() == 0
    assert cache.get("static") == 3

    stats = cache.stats()
    assert stats.size == 1
    assert stats.keys == ["static"]


def test_stats_sweeps_first(clock) -> None:
    cache = RequestCache(clock=clock)
    cache.set("a", 1, ttl_minutes=1)
    cache.set("b", 2, ttl_minutes=5)
    clock.advance(90)
    assert cache.stats().size == 1


def test_ttl_presets() -> None:
    assert (CacheTTL.STATIC, CacheTTL.MEDIUM, CacheTTL.SHORT, CacheTTL.REALTIME) == (1440, 60, 15, 1)


def test_stored_none_is_a_hit(clock) -> None:
    cache = RequestCache(clock=clock)
    cache.set("k", None)
    assert cache.has("k")
    assert cache.lookup("k") == (True, None)
    assert cache.get("k", "absent") is None
    assert cache.lookup("missing") == (False, None)
    assert cache.get("missing", "absent") == "absent"

"""In-memory request cache with TTL support.

Prevents repeated upstream calls for identical queries. Entries expire
lazily: an expired entry is dropped the first time it is looked up, and
`cleanup()` sweeps everything that has expired so far.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Final

DEFAULT_TTL_MINUTES: Final[float] = 15.0


class CacheTTL:
    """TTL presets in minutes, selected by tools according to data volatility."""

    STATIC: Final = 60 * 24  # states, municipalities, meshes
    MEDIUM: Final = 60  # semi-static lists (names, indicators)
    SHORT: Final = 15  # occasionally changing data (SIDRA, news)
    REALTIME: Final = 1  # live projections


@dataclass(slots=True)
class CacheEntry:
    """A cached value with its absolute expiry timestamp (seconds since epoch)."""
    data: object
    expires_at: float

    def expired(self, now: float) -> bool:
        return now > self.expires_at


@dataclass(frozen=True, slots=True)
class CacheStats:
    size: int
    keys: list[str] = field(default_factory=list)


class RequestCache:
    """Thread-safe key/value store with per-entry expiry.

    Each operation holds the lock only for its own duration, so the lock is
    never held across a network call.

    Args:
        default_ttl_minutes: TTL applied when `set` is called without one
        clock: Time source returning seconds; defaults to `time.time`

    Example:
        >>> cache = RequestCache(default_ttl_minutes=15)
        >>> cache.set("estados", [{"sigla": "SP"}])
        >>> cache.get("estados")
        [{'sigla': 'SP'}]
    """

    __slots__ = ("_entries", "_default_ttl", "_clock", "_lock")

    def __init__(
        self,
        default_ttl_minutes: float = DEFAULT_TTL_MINUTES,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._default_ttl = default_ttl_minutes
        self._clock = clock
        self._lock = threading.RLock()  # stats() calls cleanup() while holding it

    @property
    def default_ttl_minutes(self) -> float:
        return self._default_ttl

    def lookup(self, key: str) -> tuple[bool, object]:
        """Return `(hit, value)`. A stored None is a hit; value is None on a miss."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False, None
            if entry.expired(self._clock()):
                del self._entries[key]
                return False, None
            return True, entry.data

    def get(self, key: str, default: object = None) -> object:
        """Return the cached value, or `default` when absent or expired."""
        hit, value = self.lookup(key)
        return value if hit else default

    def set(self, key: str, value: object, ttl_minutes: float | None = None) -> None:
        """Store value, replacing any previous entry under the same key."""
        ttl = self._default_ttl if ttl_minutes is None else ttl_minutes
        with self._lock:
            self._entries[key] = CacheEntry(data=value, expires_at=self._clock() + ttl * 60.0)

    def has(self, key: str) -> bool:
        return self.lookup(key)[0]

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def cleanup(self) -> int:
        """Remove every expired entry. Returns how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if e.expired(now)]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def stats(self) -> CacheStats:
        """Sweep expired entries, then report the live ones."""
        with self._lock:
            self.cleanup()
            return CacheStats(size=len(self._entries), keys=list(self._entries))

    @property
    def size(self) -> int:
        """Number of stored entries, including any not yet swept."""
        with self._lock:
            return len(self._entries)

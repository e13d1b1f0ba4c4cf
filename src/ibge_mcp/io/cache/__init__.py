"""Request caching with TTL support.

- RequestCache: thread-safe in-memory store with lazy expiry
- CacheTTL: TTL presets (minutes) chosen by tools
- cache_key: order-independent key from URL plus params
- cached_fetch: cache-through wrapper around the retrying transport
"""

from .cache import DEFAULT_TTL_MINUTES, CacheEntry, CacheStats, CacheTTL, RequestCache
from .fetch import FetchProbe, cached_fetch
from .keys import cache_key

__all__ = [
    "DEFAULT_TTL_MINUTES",
    "CacheEntry",
    "CacheStats",
    "CacheTTL",
    "RequestCache",
    "FetchProbe",
    "cached_fetch",
    "cache_key",
]

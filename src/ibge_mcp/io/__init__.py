"""IO layer: request caching and cache-through fetch."""

from .cache import CacheTTL, RequestCache, cache_key, cached_fetch

__all__ = ["CacheTTL", "RequestCache", "cache_key", "cached_fetch"]

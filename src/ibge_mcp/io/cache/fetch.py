"""Cache-through fetch: serve from the request cache, else hit the transport and populate."""

from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING

import orjson

from ibge_mcp.foundation.errors import HttpStatusError, ParseError

if TYPE_CHECKING:
    from ibge_mcp.runtime.retry import RetryOptions, Transport

    from .cache import RequestCache

# Hit/miss outcomes of every cached_fetch inside the current instrumented call
_fetch_probe: ContextVar[list[bool] | None] = ContextVar("fetch_probe", default=None)


class FetchProbe:
    """Collects cache outcomes of the fetches made while it is active.

    Used by the instrumentation wrapper to decide whether a tool call was
    served entirely from cache.

    Example:
        >>> with FetchProbe() as probe:
        ...     await cached_fetch(...)
        >>> probe.all_hits
        True
    """

    __slots__ = ("outcomes", "_token")

    def __init__(self) -> None:
        self.outcomes: list[bool] = []
        self._token = None

    def __enter__(self) -> FetchProbe:
        self._token = _fetch_probe.set(self.outcomes)
        return self

    def __exit__(self, *_: object) -> None:
        if self._token is not None:
            _fetch_probe.reset(self._token)
            self._token = None

    @property
    def all_hits(self) -> bool:
        """True when at least one fetch happened and every one was a cache hit."""
        return bool(self.outcomes) and all(self.outcomes)


def _report(hit: bool) -> None:
    if (outcomes := _fetch_probe.get()) is not None:
        outcomes.append(hit)


async def cached_fetch(
    url: str,
    cache_key_str: str,
    ttl_minutes: float | None = None,
    retry_options: RetryOptions | None = None,
    *,
    cache: RequestCache,
    transport: Transport,
) -> object:
    """Return the cached value for `cache_key_str`, fetching `url` on a miss.

    Args:
        url: Upstream URL, requested with GET and no body
        cache_key_str: Key addressing the cached value
        ttl_minutes: TTL for the stored value; the cache default when None
        retry_options: Passed through to the transport
        cache: Store consulted and populated
        transport: Retrying transport used on a miss

    Raises:
        HttpStatusError: Upstream answered with a non-success status
        ParseError: Body was not valid JSON
        NetworkError: Propagated unchanged from the transport
    """
    hit, cached = cache.lookup(cache_key_str)
    if hit:
        _report(True)
        return cached

    _report(False)
    response = await transport.fetch(url, options=retry_options)

    if not response.is_success:
        raise HttpStatusError(response.status_code, response.reason_phrase, url=url)

    try:
        data = orjson.loads(response.content)
    except orjson.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON from {url}: {e}", url=url) from e

    cache.set(cache_key_str, data, ttl_minutes)
    return data

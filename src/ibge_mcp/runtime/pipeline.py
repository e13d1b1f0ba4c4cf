"""Request pipeline shared by every tool call.

Bundles the request cache, the retrying transport, the metrics collector
and the logger into one explicitly constructed object. Tools receive it as
an argument instead of reaching for module-level state, so tests can build
an isolated pipeline per case.

Example:
    >>> async with Pipeline() as pipeline:
    ...     estados = await pipeline.instrument(
    ...         "ibge_estados", "localidades",
    ...         lambda: pipeline.fetch(url, cache_key(url), CacheTTL.STATIC),
    ...     )
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

from ibge_mcp.foundation.config import IbgeSettings, get_settings
from ibge_mcp.io.cache import RequestCache, cache_key, cached_fetch

from .observability import Logger, MetricsCollector, configure_logging, with_metrics
from .retry import HttpTransport, RetryOptions, Transport

if TYPE_CHECKING:
    from types import TracebackType

T = TypeVar("T")


class Pipeline:
    """Cache, transport, metrics and logger with an explicit lifecycle.

    Any component not supplied is built from `settings`.
    """

    __slots__ = ("settings", "cache", "metrics", "logger", "transport")

    def __init__(
        self,
        settings: IbgeSettings | None = None,
        *,
        cache: RequestCache | None = None,
        metrics: MetricsCollector | None = None,
        logger: Logger | None = None,
        transport: Transport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.logger = logger or configure_logging(self.settings.logging)
        self.cache = cache or RequestCache(self.settings.cache.default_ttl_minutes)
        self.metrics = metrics or MetricsCollector(
            max_recent_errors=self.settings.metrics.max_recent_errors,
            enabled=self.settings.metrics.enabled,
        )
        self.transport: Transport = transport or HttpTransport(settings=self.settings, logger=self.logger)

    async def fetch(
        self,
        url: str,
        key: str | None = None,
        ttl_minutes: float | None = None,
        retry_options: RetryOptions | None = None,
    ) -> object:
        """Cache-through GET of `url`; `key` defaults to the URL itself."""
        key = key if key is not None else cache_key(url)
        return await cached_fetch(
            url, key, ttl_minutes, retry_options, cache=self.cache, transport=self.transport,
        )

    async def instrument(
        self,
        tool: str,
        api: str | None,
        fn: Callable[[], Awaitable[T]],
        cached: bool | None = None,
    ) -> T:
        """Run `fn` under metrics; by default the cache flag is detected from its fetches."""
        return await with_metrics(self.metrics, tool, api, fn, cached, logger=self.logger)

    def reset(self) -> None:
        """Drop every cached entry and all accumulated metrics."""
        self.cache.clear()
        self.metrics.reset()

    async def aclose(self) -> None:
        aclose = getattr(self.transport, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> Pipeline:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

"""Retrying HTTP transport over httpx.

Retries retryable statuses and transient connection failures with backoff.
A non-retryable status is handed back to the caller untouched; deciding what
a 404 means is the caller's job.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import httpx

from ibge_mcp.foundation.errors import NetworkError, RequestTimeoutError, RetryExhaustedError

from .policy import RetryOptions, is_network_error

if TYPE_CHECKING:
    from types import TracebackType

    from ibge_mcp.foundation.config import IbgeSettings
    from ibge_mcp.runtime.observability.logging import Logger


@runtime_checkable
class Transport(Protocol):
    """Anything that can GET a URL with retry semantics."""

    async def fetch(self, url: str, *, options: RetryOptions | None = None) -> httpx.Response: ...


class HttpTransport:
    """GET-only transport with exponential backoff.

    Owns its httpx.AsyncClient unless one is injected; an injected client is
    never closed here.

    Example:
        >>> async with HttpTransport() as transport:
        ...     response = await transport.fetch(url, options=RETRY_PRESETS["QUICK"])
    """

    __slots__ = ("_client", "_owns_client", "_settings", "_options", "_logger", "_sleep")

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        settings: IbgeSettings | None = None,
        logger: Logger | None = None,
        *,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        if settings is None:
            from ibge_mcp.foundation.config import get_settings
            settings = get_settings()
        self._settings = settings
        self._client = client
        self._owns_client = client is None
        self._options = RetryOptions.from_settings(settings.retry)
        self._logger = logger
        self._sleep = sleep

    @property
    def default_options(self) -> RetryOptions:
        return self._options

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            http = self._settings.http
            self._client = httpx.AsyncClient(
                timeout=http.timeout,
                follow_redirects=http.follow_redirects,
                headers={"User-Agent": http.user_agent, "Accept": "application/json"},
            )
        return self._client

    async def fetch(self, url: str, *, options: RetryOptions | None = None) -> httpx.Response:
        """GET `url`, retrying per `options` (transport defaults when None).

        Raises:
            RetryExhaustedError: Retryable status persisted past the retry budget
            RequestTimeoutError: Timed out on the final attempt
            NetworkError: Connection failure on the final attempt
        """
        opts = options if options is not None else self._options
        client = self._get_client()
        attempt = 0

        while True:
            try:
                response = await client.get(url)
            except httpx.TransportError as e:
                if attempt < opts.max_retries and is_network_error(e):
                    await self._backoff(opts, attempt, url, reason=type(e).__name__)
                    attempt += 1
                    continue
                raise _wrap_transport_error(e, url) from e

            if not opts.is_retryable_status(response.status_code):
                return response

            if attempt < opts.max_retries:
                await response.aclose()
                await self._backoff(opts, attempt, url, reason=f"HTTP {response.status_code}")
                attempt += 1
                continue

            if opts.is_disabled:
                return response
            await response.aclose()
            raise RetryExhaustedError(
                response.status_code, response.reason_phrase, retries=opts.max_retries, url=url,
            )

    async def _backoff(self, opts: RetryOptions, attempt: int, url: str, *, reason: str) -> None:
        delay = opts.get_delay(attempt)
        if self._logger is not None:
            self._logger.warn(
                "Retrying request",
                {"url": url, "attempt": attempt + 1, "max_retries": opts.max_retries, "delay_s": delay, "reason": reason},
            )
        await self._sleep(delay)

    async def aclose(self) -> None:
        """Close the client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def _wrap_transport_error(exc: httpx.TransportError, url: str) -> NetworkError:
    if isinstance(exc, httpx.TimeoutException):
        return RequestTimeoutError(f"Request timed out: {url}", url=url)
    return NetworkError(f"Network error: {exc}", url=url)

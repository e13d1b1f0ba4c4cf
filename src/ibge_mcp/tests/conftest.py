"""Shared fixtures: fake clock, fake IBGE API and an isolated pipeline."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import orjson
import pytest

from ibge_mcp.foundation.config import (
    CacheSettings,
    IbgeSettings,
    LoggingSettings,
    MetricsSettings,
    RetrySettings,
)
from ibge_mcp.io.cache import RequestCache
from ibge_mcp.runtime import HttpTransport, Logger, MetricsCollector, Pipeline
from ibge_mcp.runtime.observability import NoOpRenderer

Route = httpx.Response | Exception | Callable[[httpx.Request], httpx.Response]


class FakeClock:
    """Manually advanced time source (seconds)."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeApi:
    """httpx.MockTransport handler routing on URL path.

    A route is a response, an exception to raise, a callable, or a list of
    those consumed in order (the last one repeats).
    """

    def __init__(self) -> None:
        self.routes: dict[str, Route | list[Route]] = {}
        self.requests: list[httpx.Request] = []

    def json(self, path: str, payload: object, status: int = 200) -> None:
        self.routes[path] = httpx.Response(status, content=orjson.dumps(payload))

    def status(self, path: str, *statuses: int) -> None:
        self.routes[path] = [httpx.Response(s, json={"erro": s}) for s in statuses]

    def calls(self, path: str) -> int:
        return sum(1 for r in self.requests if r.url.path == path)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"erro": "not found"})
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        # fresh copy, a response object is consumed once
        return httpx.Response(route.status_code, headers=route.headers, content=route.content)


class SleepRecorder:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def settings() -> IbgeSettings:
    return IbgeSettings(
        cache=CacheSettings(default_ttl_minutes=15.0),
        retry=RetrySettings(max_retries=2, initial_delay=0.5, max_delay=4.0, multiplier=2.0),
        logging=LoggingSettings(enabled=False),
        metrics=MetricsSettings(enabled=True, max_recent_errors=50),
    )


@pytest.fixture
def logger() -> Logger:
    return Logger(level="debug", enabled=True, renderer=NoOpRenderer())


@pytest.fixture
def transport(api: FakeApi, settings: IbgeSettings, logger: Logger, sleeps: SleepRecorder) -> HttpTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(api))
    return HttpTransport(client=client, settings=settings, logger=logger, sleep=sleeps)


@pytest.fixture
def pipeline(
    settings: IbgeSettings, transport: HttpTransport, logger: Logger, clock: FakeClock,
) -> Pipeline:
    return Pipeline(
        settings,
        cache=RequestCache(settings.cache.default_ttl_minutes, clock=clock),
        metrics=MetricsCollector(clock=clock),
        logger=logger,
        transport=transport,
    )

"""Tests for cache-through fetch."""

import httpx
import pytest

from ibge_mcp.foundation.errors import HttpStatusError, NetworkError, ParseError
from ibge_mcp.io.cache import FetchProbe, RequestCache, cached_fetch
from ibge_mcp.runtime.retry import RETRY_PRESETS

URL = "https://servicodados.ibge.gov.br/api/v1/localidades/estados"
PATH = "/api/v1/localidades/estados"


class CountingCache(RequestCache):
    """RequestCache that counts writes."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.writes = 0

    def set(self, key, value, ttl_minutes=None) -> None:
        self.writes += 1
        super().set(key, value, ttl_minutes)


@pytest.mark.asyncio
async def test_second_call_served_from_cache(api, transport) -> None:
    """One network call and one write on miss; nothing on hit."""
    api.json(PATH, [{"id": 35, "sigla": "SP"}])
    cache = CountingCache()

    first = await cached_fetch(URL, "estados", cache=cache, transport=transport)
    second = await cached_fetch(URL, "estados", cache=cache, transport=transport)

    assert first == [{"id": 35, "sigla": "SP"}]
    assert second is first
    assert api.calls(PATH) == 1
    assert cache.writes == 1


@pytest.mark.asyncio
async def test_null_body_is_cached(api, transport) -> None:
    api.json(PATH, None)
    cache = CountingCache()

    assert await cached_fetch(URL, "k", cache=cache, transport=transport) is None
    assert await cached_fetch(URL, "k", cache=cache, transport=transport) is None

    assert api.calls(PATH) == 1
    assert cache.writes == 1
    assert cache.has("k")


@pytest.mark.asyncio
async def test_ttl_applied(api, transport, clock) -> None:
    api.json(PATH, [1])
    cache = RequestCache(clock=clock)

    await cached_fetch(URL, "k", 1, cache=cache, transport=transport)
    clock.advance(61)
    await cached_fetch(URL, "k", 1, cache=cache, transport=transport)

    assert api.calls(PATH) == 2


@pytest.mark.asyncio
async def test_http_error_raised_and_not_cached(api, transport) -> None:
    api.status(PATH, 404)
    cache = RequestCache()

    with pytest.raises(HttpStatusError) as exc_info:
        await cached_fetch(URL, "k", cache=cache, transport=transport)

    assert exc_info.value.status == 404
    assert exc_info.value.status_text == "Not Found"
    assert str(exc_info.value) == "HTTP 404: Not Found"
    assert cache.size == 0


@pytest.mark.asyncio
async def test_invalid_json_is_parse_error(api, transport) -> None:
    api.routes[PATH] = httpx.Response(200, content=b"<html>manutencao</html>")
    cache = RequestCache()

    with pytest.raises(ParseError):
        await cached_fetch(URL, "k", cache=cache, transport=transport)
    assert cache.size == 0


@pytest.mark.asyncio
async def test_network_error_propagates(api, transport) -> None:
    api.routes[PATH] = httpx.ConnectError("connection refused")

    with pytest.raises(NetworkError):
        await cached_fetch(URL, "k", retry_options=RETRY_PRESETS["NONE"], cache=RequestCache(), transport=transport)


@pytest.mark.asyncio
async def test_probe_reports_hits(api, transport) -> None:
    api.json(PATH, [1])
    cache = RequestCache()

    with FetchProbe() as probe:
        await cached_fetch(URL, "k", cache=cache, transport=transport)
    assert probe.outcomes == [False]
    assert not probe.all_hits

    with FetchProbe() as probe:
        await cached_fetch(URL, "k", cache=cache, transport=transport)
    assert probe.all_hits


def test_probe_without_fetches_is_not_a_hit() -> None:
    with FetchProbe() as probe:
        pass
    assert not probe.all_hits

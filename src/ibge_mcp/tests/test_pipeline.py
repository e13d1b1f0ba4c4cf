"""Tests for the request pipeline."""

import pytest

from ibge_mcp.foundation.errors import HttpStatusError
from ibge_mcp.io.cache import CacheTTL
from ibge_mcp.runtime import Pipeline
from ibge_mcp.runtime.retry import HttpTransport

URL = "https://servicodados.ibge.gov.br/api/v1/localidades/estados?orderBy=nome"
PATH = "/api/v1/localidades/estados"


def test_components_built_from_settings(settings) -> None:
    pipeline = Pipeline(settings)
    assert pipeline.cache.default_ttl_minutes == 15.0
    assert pipeline.metrics.enabled
    assert not pipeline.logger.enabled
    assert isinstance(pipeline.transport, HttpTransport)
    assert pipeline.transport.default_options.max_retries == 2


def test_pipelines_are_isolated(settings) -> None:
    a, b = Pipeline(settings), Pipeline(settings)
    a.cache.set("k", 1)
    assert b.cache.get("k") is None
    assert a.metrics is not b.metrics


@pytest.mark.asyncio
async def test_fetch_defaults_key_to_url(pipeline, api) -> None:
    api.json(PATH, [{"id": 35}])
    assert await pipeline.fetch(URL, ttl_minutes=CacheTTL.STATIC) == [{"id": 35}]
    assert pipeline.cache.has(URL)
    assert await pipeline.fetch(URL) == [{"id": 35}]
    assert api.calls(PATH) == 1


@pytest.mark.asyncio
async def test_instrument_detects_cache(pipeline, api) -> None:
    api.json(PATH, [])
    for _ in range(3):
        await pipeline.instrument("ibge_estados", "localidades", lambda: pipeline.fetch(URL))

    m = pipeline.metrics.get_metrics()
    assert (m.total_cache_misses, m.total_cache_hits) == (1, 2)
    assert m.by_api["localidades"].calls == 3


@pytest.mark.asyncio
async def test_instrument_reraises(pipeline, api) -> None:
    api.status(PATH, 404)
    with pytest.raises(HttpStatusError):
        await pipeline.instrument("ibge_estados", "localidades", lambda: pipeline.fetch(URL))
    assert pipeline.metrics.get_metrics().total_failures == 1


@pytest.mark.asyncio
async def test_reset(pipeline, api) -> None:
    api.json(PATH, [])
    await pipeline.instrument("ibge_estados", "localidades", lambda: pipeline.fetch(URL))
    pipeline.reset()
    assert pipeline.cache.size == 0
    assert pipeline.metrics.get_metrics().total_calls == 0


@pytest.mark.asyncio
async def test_context_manager_closes_owned_client(settings) -> None:
    async with Pipeline(settings) as pipeline:
        transport = pipeline.transport
        transport._get_client()
    assert transport._client is None

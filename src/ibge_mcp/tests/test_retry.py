"""Tests for backoff, retry options and the retrying transport."""

import httpx
import pytest
from pydantic import ValidationError

from ibge_mcp.foundation.config import RetrySettings
from ibge_mcp.foundation.errors import NetworkError, RequestTimeoutError, RetryExhaustedError
from ibge_mcp.runtime.retry import (
    RETRY_PRESETS,
    ConstantBackoff,
    ExponentialBackoff,
    RetryOptions,
    is_network_error,
)

URL = "https://servicodados.ibge.gov.br/api/v3/noticias"
PATH = "/api/v3/noticias"


# ═══════════════════════════════════════════════════════════════════════════════
# Backoff & Options
# ═══════════════════════════════════════════════════════════════════════════════


def test_exponential_backoff_caps() -> None:
    backoff = ExponentialBackoff(initial_delay=2.0, max_delay=16.0)
    assert [backoff.delay(n) for n in range(5)] == [2.0, 4.0, 8.0, 16.0, 16.0]


def test_constant_backoff() -> None:
    assert ConstantBackoff(0.25).delay(7) == 0.25


def test_options_defaults() -> None:
    opts = RetryOptions()
    assert opts.max_retries == 4
    assert opts.retryable_status_codes == frozenset({429, 500, 502, 503, 504})
    assert opts.is_retryable_status(503)
    assert not opts.is_retryable_status(404)
    assert not opts.is_disabled


def test_options_bounds() -> None:
    with pytest.raises(ValidationError):
        RetryOptions(max_retries=11)
    with pytest.raises(ValidationError):
        RetryOptions(max_retries=-1)


def test_options_from_settings() -> None:
    opts = RetryOptions.from_settings(
        RetrySettings(max_retries=3, initial_delay=1.0, max_delay=3.0, multiplier=3.0, retryable_status_codes=[503]),
    )
    assert opts.max_retries == 3
    assert [opts.get_delay(n) for n in range(3)] == [1.0, 3.0, 3.0]
    assert opts.retryable_status_codes == frozenset({503})


def test_presets() -> None:
    assert RETRY_PRESETS["NONE"].is_disabled
    assert RETRY_PRESETS["QUICK"].max_retries == 2
    assert RETRY_PRESETS["AGGRESSIVE"].get_delay(10) == 30.0
    with pytest.raises(TypeError):
        RETRY_PRESETS["CUSTOM"] = RetryOptions()  # type: ignore[index]


@pytest.mark.parametrize("exc,expected", [
    (httpx.ConnectError("boom"), True),
    (httpx.ReadTimeout("slow"), True),
    (OSError("ECONNRESET by peer"), True),
    (RuntimeError("socket hang up"), True),
    (ValueError("bad input"), False),
])
def test_is_network_error(exc: BaseException, expected: bool) -> None:
    assert is_network_error(exc) is expected


# ═══════════════════════════════════════════════════════════════════════════════
# Transport
# ═══════════════════════════════════════════════════════════════════════════════


class TestHttpTransport:
    """Retry loop against a fake upstream; sleeps are recorded, not awaited."""

    @pytest.mark.asyncio
    async def test_success_first_try(self, api, transport, sleeps) -> None:
        api.json(PATH, {"items": []})
        response = await transport.fetch(URL)
        assert response.status_code == 200
        assert api.calls(PATH) == 1
        assert sleeps.delays == []

    @pytest.mark.asyncio
    async def test_retries_retryable_status(self, api, transport, sleeps) -> None:
        api.status(PATH, 503, 502, 200)
        response = await transport.fetch(URL)
        assert response.status_code == 200
        assert api.calls(PATH) == 3
        assert sleeps.delays == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_non_retryable_status_returned(self, api, transport, sleeps) -> None:
        api.status(PATH, 404)
        response = await transport.fetch(URL)
        assert response.status_code == 404
        assert api.calls(PATH) == 1
        assert sleeps.delays == []

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise(self, api, transport, sleeps) -> None:
        api.status(PATH, 503)
        with pytest.raises(RetryExhaustedError) as exc_info:
            await transport.fetch(URL)
        assert exc_info.value.status == 503
        assert exc_info.value.retries == 2
        assert "(after 2 retries)" in str(exc_info.value)
        assert api.calls(PATH) == 3
        assert len(sleeps.delays) == 2

    @pytest.mark.asyncio
    async def test_disabled_retries_return_response(self, api, transport, sleeps) -> None:
        api.status(PATH, 503)
        response = await transport.fetch(URL, options=RETRY_PRESETS["NONE"])
        assert response.status_code == 503
        assert api.calls(PATH) == 1

    @pytest.mark.asyncio
    async def test_network_error_retried(self, api, transport, sleeps) -> None:
        api.routes[PATH] = [httpx.ConnectError("connection refused"), httpx.Response(200, json=[])]
        response = await transport.fetch(URL)
        assert response.status_code == 200
        assert sleeps.delays == [0.5]

    @pytest.mark.asyncio
    async def test_network_error_after_budget(self, api, transport) -> None:
        api.routes[PATH] = httpx.ConnectError("connection refused")
        with pytest.raises(NetworkError) as exc_info:
            await transport.fetch(URL)
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert api.calls(PATH) == 3

    @pytest.mark.asyncio
    async def test_timeout_wrapped(self, api, transport) -> None:
        api.routes[PATH] = httpx.ReadTimeout("read timed out")
        with pytest.raises(RequestTimeoutError):
            await transport.fetch(URL, options=RetryOptions(max_retries=1, backoff=ConstantBackoff(0)))
        assert api.calls(PATH) == 2

    @pytest.mark.asyncio
    async def test_custom_options(self, api, transport, sleeps) -> None:
        api.status(PATH, 404, 200)
        opts = RetryOptions(max_retries=1, backoff=ConstantBackoff(0.1), retryable_status_codes={404})
        response = await transport.fetch(URL, options=opts)
        assert response.status_code == 200
        assert sleeps.delays == [0.1]

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self, api, transport) -> None:
        api.json(PATH, [])
        await transport.aclose()
        response = await transport.fetch(URL)
        assert response.status_code == 200

"""Tests for error classification and ToolError rendering."""

import httpx
import pytest
from pydantic import BaseModel, ValidationError

from ibge_mcp.foundation.errors import (
    ErrorKind,
    HttpStatusError,
    NetworkError,
    ParseError,
    RequestTimeoutError,
    RetryExhaustedError,
    ToolError,
    classify_exception,
)


class _Model(BaseModel):
    n: int


def _validation_error() -> ValidationError:
    try:
        _Model(n="x")
    except ValidationError as e:
        return e
    raise AssertionError("expected ValidationError")


@pytest.mark.parametrize("exc,kind", [
    (HttpStatusError(404, "Not Found"), ErrorKind.HTTP_STATUS),
    (RetryExhaustedError(503, "Service Unavailable", retries=4), ErrorKind.HTTP_STATUS),
    (NetworkError("refused"), ErrorKind.NETWORK),
    (RequestTimeoutError("slow"), ErrorKind.TIMEOUT),
    (ParseError("bad json"), ErrorKind.PARSE),
    (httpx.ReadTimeout("slow"), ErrorKind.TIMEOUT),
    (httpx.ConnectError("refused"), ErrorKind.NETWORK),
    (KeyError("x"), ErrorKind.UNKNOWN),
])
def test_classify(exc: BaseException, kind: ErrorKind) -> None:
    assert classify_exception(exc) is kind


def test_classify_validation() -> None:
    assert classify_exception(_validation_error()) is ErrorKind.VALIDATION


def test_error_messages() -> None:
    assert str(HttpStatusError(500, "Internal Server Error")) == "HTTP 500: Internal Server Error"
    assert str(HttpStatusError(418)) == "HTTP 418"
    err = RetryExhaustedError(503, "Service Unavailable", retries=4, url="https://x")
    assert str(err) == "HTTP 503: Service Unavailable (after 4 retries)"
    assert err.url == "https://x"
    assert isinstance(err, HttpStatusError)


def test_render_known_status() -> None:
    err = ToolError.from_exception(
        "ibge_sidra", HttpStatusError(500, "Internal Server Error"),
        params={"tabela": "6579", "classificacoes": None}, related_tools=("ibge_populacao",),
    )
    text = err.render()
    assert text.startswith("## Erro: ibge_sidra\n\n")
    assert "**Código HTTP:** 500" in text
    assert "**Mensagem:** Erro interno do servidor IBGE" in text
    assert "- **tabela:** 6579" in text
    assert "classificacoes" not in text
    assert "### Sugestão\n\nTente novamente em alguns minutos." in text
    assert "- `ibge_populacao`" in text
    assert err.is_retryable


def test_render_network_suggestion() -> None:
    text = ToolError.from_exception("ibge_estados", NetworkError("Network error: refused")).render()
    assert "**Mensagem:** Network error: refused" in text
    assert "Verifique sua conexão com a internet" in text
    assert "Código HTTP" not in text


def test_helpers() -> None:
    not_found = ToolError.not_found("ibge_malhas", "Malha para localidade 99", "ibge_estados")
    assert not_found.message == "Malha para localidade 99 não encontrado"
    assert "Use ibge_estados para buscar o item correto." in not_found.render()

    empty = ToolError.empty_result("ibge_sidra")
    assert "Tente ajustar os parâmetros de busca." in empty.render()

    invalid = ToolError.invalid_value("ibge_municipios", "uf", "XX", "sigla do estado")
    assert invalid.kind is ErrorKind.VALIDATION
    assert not invalid.is_retryable
    assert 'Valor inválido para "uf": "XX"' in str(invalid)

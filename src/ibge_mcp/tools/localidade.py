"""ibge_localidade: details of a state, municipality or district by IBGE code."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ibge_mcp.foundation.config import constants
from ibge_mcp.foundation.errors import HttpStatusError
from ibge_mcp.io.cache import CacheTTL, cache_key

from .base import ibge_tool
from .formatters import key_value_table

if TYPE_CHECKING:
    from ibge_mcp.runtime import Pipeline

Tipo = Literal["estado", "municipio", "distrito"]

_PATHS: dict[str, str] = {"estado": "estados", "municipio": "municipios", "distrito": "distritos"}


class LocalidadeParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    codigo: int = Field(
        ..., ge=1,
        description="Código IBGE da localidade (estado: 2 dígitos, município: 7 dígitos, distrito: 9 dígitos)",
    )
    tipo: Tipo | None = Field(
        default=None, description="Tipo da localidade. Se não informado, será inferido pelo tamanho do código.",
    )


def infer_tipo(codigo: int) -> Tipo:
    digits = len(str(codigo))
    if digits <= 2:
        return "estado"
    return "municipio" if digits <= 7 else "distrito"


def _uf_label(uf: dict[str, Any]) -> str:
    return f"{uf['nome']} ({uf['sigla']})"


def _format_estado(estado: dict[str, Any]) -> str:
    regiao = estado["regiao"]
    return f"## Estado: {estado['nome']}\n\n" + key_value_table({
        "**Código IBGE**": estado["id"],
        "**Sigla**": estado["sigla"],
        "**Nome**": estado["nome"],
        "**Região**": f"{regiao['nome']} ({regiao['sigla']})",
    })


def _format_municipio(municipio: dict[str, Any]) -> str:
    data: dict[str, object] = {"**Código IBGE**": municipio["id"], "**Nome**": municipio["nome"]}

    if micro := municipio.get("microrregiao"):
        data["**Microrregião**"] = micro["nome"]
        if meso := micro.get("mesorregiao"):
            data["**Mesorregião**"] = meso["nome"]
            if uf := meso.get("UF"):
                data["**Estado**"] = _uf_label(uf)
                data["**Região**"] = uf["regiao"]["nome"]

    if imediata := municipio.get("regiao-imediata"):
        data["**Região Imediata**"] = imediata["nome"]
        if intermediaria := imediata.get("regiao-intermediaria"):
            data["**Região Intermediária**"] = intermediaria["nome"]

    return f"## Município: {municipio['nome']}\n\n" + key_value_table(data)


def _format_distrito(distrito: dict[str, Any]) -> str:
    data: dict[str, object] = {"**Código IBGE**": distrito["id"], "**Nome**": distrito["nome"]}
    if municipio := distrito.get("municipio"):
        data["**Município**"] = municipio["nome"]
        uf = ((municipio.get("microrregiao") or {}).get("mesorregiao") or {}).get("UF")
        if uf:
            data["**Estado**"] = _uf_label(uf)
    return f"## Distrito: {distrito['nome']}\n\n" + key_value_table(data)


_FORMATTERS = {"estado": _format_estado, "municipio": _format_municipio, "distrito": _format_distrito}


@ibge_tool(
    "ibge_localidade",
    """
Retorna detalhes de uma localidade específica pelo código IBGE.

Funcionalidades:
- Estados (código de 2 dígitos), municípios (7 dígitos) e distritos (9 dígitos)
- Retorna hierarquia completa (região, mesorregião, microrregião)

Exemplo de uso:
- Detalhes de São Paulo (estado): codigo=35
- Detalhes de São Paulo (município): codigo=3550308
""",
    LocalidadeParams,
    api="localidades",
    related_tools=("ibge_estados", "ibge_municipios"),
)
async def ibge_localidade(pipeline: Pipeline, params: LocalidadeParams) -> str:
    tipo = params.tipo or infer_tipo(params.codigo)
    url = f"{constants.LOCALIDADES}/{_PATHS[tipo]}/{params.codigo}"
    not_found = f"Localidade não encontrada com o código {params.codigo}."

    try:
        data = await pipeline.fetch(url, cache_key(url), CacheTTL.STATIC)
    except HttpStatusError as e:
        if e.status == 404:
            return not_found
        raise

    # Some endpoints answer with a list, an unknown code with an empty one
    localidade = (data[0] if data else None) if isinstance(data, list) else data
    if not localidade:
        return not_found
    return _FORMATTERS[tipo](localidade)

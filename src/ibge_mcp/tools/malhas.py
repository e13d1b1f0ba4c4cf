"""ibge_malhas: geographic meshes (GeoJSON, TopoJSON or SVG)."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any, Literal

import orjson
from pydantic import BaseModel, ConfigDict, Field

from ibge_mcp.foundation.config import constants
from ibge_mcp.foundation.errors import HttpStatusError, ToolError
from ibge_mcp.io.cache import CacheTTL, cache_key

from .base import ibge_tool
from .formatters import build_query_string, markdown_table

if TYPE_CHECKING:
    from ibge_mcp.runtime import Pipeline

MAX_INLINE_JSON = 10_000
SAMPLE_FEATURES = 5

_MEDIA_TYPES: dict[str, str] = {
    "geojson": "application/vnd.geo+json",
    "topojson": "application/json",
    "svg": "image/svg+xml",
}

_RESOLUCOES: dict[str, str] = {
    "0": "Sem divisões internas",
    "1": "Macrorregiões",
    "2": "Unidades da Federação",
    "3": "Mesorregiões",
    "4": "Microrregiões",
    "5": "Municípios",
}


class MalhasParams(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    localidade: str = Field(..., min_length=1, description="Código IBGE ou sigla da localidade (ex: 'BR', 'SP', '35', '3550308')")
    tipo: Literal[
        "paises", "regioes", "estados", "mesorregioes", "microrregioes",
        "municipios", "distritos", "regioes-imediatas", "regioes-intermediarias",
    ] | None = Field(default=None, description="Tipo de divisão territorial")
    formato: Literal["geojson", "topojson", "svg"] = Field(default="geojson", description="Formato de saída (padrão: geojson)")
    resolucao: Literal["0", "1", "2", "3", "4", "5"] = Field(
        default="0",
        description="Divisões internas: 0=nenhuma, 1=macrorregiões (só BR), 2=UFs, 3=mesorregiões, 4=microrregiões, 5=municípios",
    )
    qualidade: Literal["1", "2", "3", "4"] = Field(
        default="4", description="Qualidade do traçado: 1=mínima, 2=baixa, 3=intermediária, 4=máxima",
    )
    intrarregiao: str | None = Field(default=None, description="Código de região para filtrar (apenas quando localidade=BR)")


def mesh_path(localidade: str, tipo: str | None) -> str:
    """Endpoint path, inferred from the shape of `localidade` when no tipo is given."""
    if tipo:
        return f"{tipo}/{localidade}"
    loc = localidade.upper()
    if loc == "BR":
        return "paises/BR"
    if len(loc) == 2 and not loc.isdigit():
        return f"estados/{loc}"
    if len(localidade) == 7:
        return f"municipios/{localidade}"
    return f"estados/{localidade}"


def build_mesh_url(params: MalhasParams) -> str:
    query = build_query_string({
        "formato": _MEDIA_TYPES[params.formato],
        "resolucao": params.resolucao if params.resolucao != "0" else None,
        "qualidade": params.qualidade,
        "intrarregiao": params.intrarregiao,
    })
    return f"{constants.MALHAS}/{mesh_path(params.localidade, params.tipo)}?{query}"


def _settings_table(params: MalhasParams, formato: str) -> str:
    return markdown_table(
        ["Parâmetro", "Valor"],
        [
            ("**Localidade**", params.localidade),
            ("**Formato**", formato),
            ("**Resolução**", f"{params.resolucao} - {_RESOLUCOES.get(params.resolucao, 'Desconhecido')}"),
            ("**Qualidade**", params.qualidade),
        ],
    )


def _format_svg(url: str, params: MalhasParams) -> str:
    return (
        f"## Malha Geográfica (SVG): {params.localidade.upper()}\n\n"
        "### Configurações\n\n"
        f"{_settings_table(params, 'SVG')}\n"
        "### URL para Download/Visualização\n\n"
        f"```\n{url}\n```\n\n"
        "### Como usar\n\n"
        "- Abra a URL acima no navegador para visualizar o mapa\n"
        "- Use em tags `<img>` ou `<object>` em HTML\n"
        "- Pode ser editado em softwares como Inkscape ou Illustrator\n"
    )


def _geojson_summary(data: dict[str, Any]) -> tuple[list[tuple[str, str]], list[dict[str, Any]]]:
    info: list[tuple[str, str]] = []
    features: list[dict[str, Any]] = []
    kind = data.get("type")
    if kind is None:
        return info, features
    info.append(("**Tipo**", str(kind)))

    if kind == "FeatureCollection":
        features = data.get("features") or []
        info.append(("**Número de features**", str(len(features))))
        geom = Counter((f.get("geometry") or {}).get("type", "Unknown") for f in features)
        info.append(("**Tipos de geometria**", ", ".join(f"{k}: {v}" for k, v in geom.items())))
        if features and features[0].get("properties"):
            info.append(("**Propriedades**", ", ".join(features[0]["properties"])))
    elif kind == "Feature":
        info.append(("**Tipo de geometria**", (data.get("geometry") or {}).get("type", "Unknown")))
        if props := data.get("properties"):
            info.append(("**Propriedades**", ", ".join(props)))
    return info, features


def _format_mesh(data: dict[str, Any], url: str, params: MalhasParams) -> str:
    out = [f"## Malha Geográfica: {params.localidade.upper()}\n\n"]
    out.append("### Configurações\n\n" + _settings_table(params, params.formato) + "\n")

    info, features = _geojson_summary(data)
    out.append("### Informações do GeoJSON\n\n")
    if info:
        out.append(markdown_table(["Campo", "Valor"], info))
    out.append("\n")

    if features and (keys := list(features[0].get("properties") or {})[:SAMPLE_FEATURES]):
        sample = features[:SAMPLE_FEATURES]
        out.append(f"### Amostra de Features (primeiras {len(sample)})\n\n")
        rows = [[(f.get("properties") or {}).get(k) for k in keys] for f in sample]
        out.append(markdown_table(keys, rows))
        if len(features) > SAMPLE_FEATURES:
            out.append(f"\n_... e mais {len(features) - SAMPLE_FEATURES} features_\n")
        out.append("\n")

    out.append(f"### URL para Download\n\n```\n{url}\n```\n\n")

    body = orjson.dumps(data, option=orjson.OPT_INDENT_2).decode()
    if len(body) <= MAX_INLINE_JSON:
        out.append(f"### Conteúdo GeoJSON\n\n```json\n{body}\n```\n")
    else:
        out.append(
            "### Nota\n\n"
            f"O conteúdo GeoJSON é muito grande ({round(len(body) / 1024)}KB) para exibir completamente.\n"
            "Use a URL acima para baixar o arquivo completo.\n"
        )
    return "".join(out)


@ibge_tool(
    "ibge_malhas",
    """
Obtém malhas geográficas (mapas) do IBGE em formato GeoJSON, TopoJSON ou SVG.

Tipos de localidade:
- "BR" = Brasil inteiro
- Sigla do estado (ex: "SP") ou código do estado (ex: "35")
- Código do município (7 dígitos, ex: "3550308")

Para SVG é retornada apenas a URL da imagem.

Exemplos: localidade="BR", resolucao="2"; localidade="SP", resolucao="5"; localidade="BR", formato="svg"
""",
    MalhasParams,
    api="malhas",
    related_tools=("ibge_estados", "ibge_municipios"),
)
async def ibge_malhas(pipeline: Pipeline, params: MalhasParams) -> str:
    url = build_mesh_url(params)
    if params.formato == "svg":
        return _format_svg(url, params)

    try:
        data = await pipeline.fetch(url, cache_key(url), CacheTTL.STATIC)
    except HttpStatusError as e:
        if e.status == 404:
            return ToolError.not_found(
                "ibge_malhas", f"Malha para localidade {params.localidade}", "ibge_municipios ou ibge_estados",
            ).render()
        raise
    return _format_mesh(data, url, params)

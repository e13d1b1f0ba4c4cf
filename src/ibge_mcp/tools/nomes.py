"""ibge_nomes: birth-name frequency and rankings from the census."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Literal
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from ibge_mcp.foundation.config import constants
from ibge_mcp.foundation.errors import HttpStatusError
from ibge_mcp.io.cache import CacheTTL, cache_key

from .base import ibge_tool
from .formatters import build_query_string, format_number, markdown_table

if TYPE_CHECKING:
    from ibge_mcp.runtime import Pipeline

Sexo = Literal["M", "F"]

_SEXO_LABEL: dict[str, str] = {"M": "Masculino", "F": "Feminino"}
_FONTE = "\n**Fonte:** IBGE - Censo Demográfico\n"


class NomesParams(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    tipo: Literal["frequencia", "ranking"] = Field(
        ...,
        description="Tipo de consulta: 'frequencia' para buscar nomes específicos ou 'ranking' para ver os mais populares",
    )
    nomes: str | None = Field(default=None, description="Para tipo='frequencia': Nome ou nomes separados por vírgula")
    decada: int | None = Field(
        default=None, ge=1930, le=2010,
        description="Para tipo='ranking': Década do ranking (ex: 1990, 2000, 2010)",
    )
    sexo: Sexo | None = Field(default=None, description="Filtrar por sexo: M (masculino) ou F (feminino)")
    localidade: str | None = Field(
        default=None, description="Código IBGE da localidade (UF: 2 dígitos, Município: 7 dígitos)",
    )
    limite: int = Field(default=20, ge=1, le=100, description="Para tipo='ranking': Número de nomes (padrão: 20)")


def _with_query(base: str, query: str) -> str:
    return f"{base}?{query}" if query else base


@ibge_tool(
    "ibge_nomes",
    """
Consulta frequência e ranking de nomes no Brasil (IBGE).

Funcionalidades:
1. **Frequência de nomes** (tipo='frequencia'):
   - Busca a frequência de nascimentos por década
   - Aceita múltiplos nomes separados por vírgula
   - Filtra por sexo e localidade

2. **Ranking de nomes** (tipo='ranking'):
   - Lista os nomes mais populares
   - Filtra por década, sexo e localidade

Décadas disponíveis: 1930, 1940, 1950, 1960, 1970, 1980, 1990, 2000, 2010

Exemplos de uso:
- Frequência de "Maria": tipo="frequencia", nomes="Maria"
- Comparar nomes: tipo="frequencia", nomes="João,José,Pedro"
- Ranking anos 2000: tipo="ranking", decada=2000
- Nomes femininos mais populares: tipo="ranking", sexo="F"
""",
    NomesParams,
    api="nomes",
)
async def ibge_nomes(pipeline: Pipeline, params: NomesParams) -> str:
    if params.tipo == "ranking":
        return await _ranking(pipeline, params)
    if not params.nomes:
        return "Para consultar a frequência, informe o(s) nome(s) no parâmetro 'nomes'."
    return await _frequencia(pipeline, params.nomes, params)


async def _frequencia(pipeline: Pipeline, nomes: str, params: NomesParams) -> str:
    # the API separates multiple names with "|"
    joined = re.sub(r"\s+", "", nomes).upper().replace(",", "|")
    query = build_query_string({"sexo": params.sexo, "localidade": params.localidade})
    url = _with_query(f"{constants.NOMES}/{quote(joined, safe='')}", query)
    empty = f"Nenhum dado encontrado para o(s) nome(s): {nomes}"

    try:
        data = await pipeline.fetch(url, cache_key(url), CacheTTL.MEDIUM)
    except HttpStatusError as e:
        if e.status == 404:
            return empty
        raise
    if not data:
        return empty

    out = ["## Frequência de Nomes no Brasil\n\n"]
    for nome in data:
        out.append(f"### {nome['nome']}\n\n")
        if sexo := nome.get("sexo"):
            out.append(f"**Sexo:** {_SEXO_LABEL.get(sexo, sexo)}\n")
        if (localidade := nome.get("localidade")) and localidade != "BR":
            out.append(f"**Localidade:** {localidade}\n")

        rows: list[tuple[str, str]] = [(p["periodo"], format_number(p["frequencia"])) for p in nome["res"]]
        total = sum(p["frequencia"] for p in nome["res"])
        rows.append(("**Total**", f"**{format_number(total)}**"))
        out.append("\n" + markdown_table(["Período", "Frequência"], rows, alignment=["left", "right"]) + "\n")

    out.append(_FONTE)
    out.append("_Nota: Os dados são baseados nos registros de nascimentos dos Censos Demográficos._\n")
    return "".join(out)


async def _ranking(pipeline: Pipeline, params: NomesParams) -> str:
    query = build_query_string({"decada": params.decada, "sexo": params.sexo, "localidade": params.localidade})
    url = _with_query(f"{constants.NOMES}/ranking", query)

    data = await pipeline.fetch(url, cache_key(url), CacheTTL.MEDIUM)
    if not data:
        return "Nenhum dado encontrado para o ranking."

    ranking = data[0]
    out = ["## Ranking de Nomes mais Frequentes\n\n"]
    out.append(f"**Década:** {params.decada}\n" if params.decada else "**Período:** Todas as décadas\n")
    if params.sexo:
        out.append(f"**Sexo:** {_SEXO_LABEL[params.sexo]}\n")
    if (localidade := ranking.get("localidade")) and localidade != "BR":
        out.append(f"**Localidade:** {localidade}\n")

    rows = [(f"{item['ranking']}º", item["nome"], format_number(item["frequencia"])) for item in ranking["res"][: params.limite]]
    out.append("\n" + markdown_table(["Posição", "Nome", "Frequência"], rows, alignment=["right", "left", "right"]))
    out.append(_FONTE)
    return "".join(out)

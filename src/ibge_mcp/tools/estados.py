"""ibge_estados: Brazilian states, optionally filtered by region."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field

from ibge_mcp.foundation.config import constants
from ibge_mcp.io.cache import CacheTTL, cache_key

from .base import ibge_tool
from .formatters import markdown_table

if TYPE_CHECKING:
    from ibge_mcp.runtime import Pipeline


class EstadosParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    regiao: Literal["N", "NE", "SE", "S", "CO"] | None = Field(
        default=None,
        description="Filtrar por região: N (Norte), NE (Nordeste), SE (Sudeste), S (Sul), CO (Centro-Oeste)",
    )
    ordenar: Literal["id", "nome", "sigla"] = Field(default="nome", description="Campo para ordenação dos resultados")


@ibge_tool(
    "ibge_estados",
    """
Lista todos os estados brasileiros do IBGE.

Funcionalidades:
- Lista todos os 27 estados (26 estados + DF)
- Filtra por região (Norte, Nordeste, Sudeste, Sul, Centro-Oeste)
- Ordena por ID, nome ou sigla
""",
    EstadosParams,
    api="localidades",
    related_tools=("ibge_municipios", "ibge_localidade"),
)
async def ibge_estados(pipeline: Pipeline, params: EstadosParams) -> str:
    if params.regiao:
        region_id = constants.REGION_CODES[params.regiao]
        url = f"{constants.LOCALIDADES}/regioes/{region_id}/estados"
    else:
        url = f"{constants.LOCALIDADES}/estados"
    url += f"?orderBy={params.ordenar}"

    estados = await pipeline.fetch(url, cache_key(url), CacheTTL.STATIC)
    if not estados:
        return "Nenhum estado encontrado."

    title = "## Estados Brasileiros"
    if params.regiao:
        title += f" - Região {constants.REGION_NAMES[constants.REGION_CODES[params.regiao]]}"

    rows = [(e["id"], e["sigla"], e["nome"], e["regiao"]["nome"]) for e in estados]
    return (
        f"{title}\n\nTotal: {len(estados)} estados\n\n"
        + markdown_table(["ID", "Sigla", "Nome", "Região"], rows, alignment=["right", "center", "left", "left"])
    )

"""ibge_municipios: municipalities of one state or of the whole country."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from ibge_mcp.foundation.config import constants
from ibge_mcp.foundation.errors import ToolError
from ibge_mcp.io.cache import CacheTTL, cache_key

from .base import ibge_tool
from .formatters import markdown_table, normalize_text
from .validation import normalize_uf

if TYPE_CHECKING:
    from ibge_mcp.runtime import Pipeline


class MunicipiosParams(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    uf: str | None = Field(
        default=None, min_length=2, max_length=2,
        description="Sigla (ex: SP, RJ, MG) ou código (ex: 35) do estado. Se não informado, retorna todos os municípios do Brasil.",
    )
    busca: str | None = Field(default=None, description="Termo para buscar no nome do município")
    limite: int = Field(default=100, ge=1, le=5570, description="Número máximo de resultados (padrão: 100, máximo: 5570)")


@ibge_tool(
    "ibge_municipios",
    """
Lista municípios brasileiros do IBGE.

Funcionalidades:
- Lista municípios de um estado específico (usando a sigla da UF)
- Lista todos os municípios do Brasil (5.570 municípios)
- Busca por nome do município, ignorando acentos
- Retorna código IBGE de 7 dígitos
""",
    MunicipiosParams,
    api="localidades",
    related_tools=("ibge_estados", "ibge_localidade"),
)
async def ibge_municipios(pipeline: Pipeline, params: MunicipiosParams) -> str:
    uf = None
    if params.uf:
        uf_id = normalize_uf(params.uf)
        if uf_id is None:
            return ToolError.invalid_value(
                "ibge_municipios", "uf", params.uf, "sigla do estado (ex: SP, RJ, MG) ou código (ex: 35)",
            ).render()
        uf = constants.UF_SIGLAS[uf_id]
        url = f"{constants.LOCALIDADES}/estados/{uf_id}/municipios?orderBy=nome"
    else:
        url = f"{constants.LOCALIDADES}/municipios?orderBy=nome"

    municipios = await pipeline.fetch(url, cache_key(url), CacheTTL.STATIC)

    if params.busca:
        term = normalize_text(params.busca)
        municipios = [m for m in municipios if term in normalize_text(m["nome"])]

    total = len(municipios)
    shown = municipios[: params.limite]

    if not shown:
        if params.busca:
            where = f" em {uf}" if uf else ""
            return f'Nenhum município encontrado com o termo "{params.busca}"{where}.'
        return "Nenhum município encontrado."

    out = [f"## Municípios{f' - {uf}' if uf else ' do Brasil'}\n\n"]
    if params.busca:
        out.append(f'Busca: "{params.busca}"\n')
    out.append(f"Mostrando: {len(shown)} de {total} municípios\n\n")
    out.append(markdown_table(["Código IBGE", "Nome"], [(m["id"], m["nome"]) for m in shown], alignment=["right", "left"]))
    if len(shown) < total:
        out.append(f"\n_Resultados limitados a {params.limite}. Use o parâmetro 'limite' para ver mais._\n")
    return "".join(out)

"""ibge_metricas: the server's own call metrics and cache state."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from .base import ibge_tool
from .formatters import key_value_table

if TYPE_CHECKING:
    from ibge_mcp.runtime import Pipeline

MAX_LISTED_KEYS = 20


class MetricasParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reset: bool = Field(default=False, description="Zerar métricas e limpar o cache após gerar o relatório")
    mostrar_chaves: bool = Field(default=False, description="Listar as chaves atualmente em cache")


@ibge_tool(
    "ibge_metricas",
    """
Mostra métricas de uso do servidor: chamadas por ferramenta e por API,
taxa de sucesso, tempo médio, taxa de acerto do cache e erros recentes.
""",
    MetricasParams,
)
async def ibge_metricas(pipeline: Pipeline, params: MetricasParams) -> str:
    stats = pipeline.cache.stats()
    out = [pipeline.metrics.get_report(), "\n### Cache\n\n"]
    out.append(key_value_table({
        "**Entradas ativas**": stats.size,
        "**TTL padrão**": f"{pipeline.cache.default_ttl_minutes:g} minutos",
    }))
    if params.mostrar_chaves and stats.keys:
        out.append("\n")
        out.extend(f"- `{key}`\n" for key in stats.keys[:MAX_LISTED_KEYS])
        if len(stats.keys) > MAX_LISTED_KEYS:
            out.append(f"\n_... e mais {len(stats.keys) - MAX_LISTED_KEYS} chaves_\n")
    if params.reset:
        pipeline.reset()
        out.append("\n_Métricas e cache foram zerados._\n")
    return "".join(out)

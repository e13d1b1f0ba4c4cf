"""ibge_populacao: real-time population projection."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field

from ibge_mcp.foundation.config import constants
from ibge_mcp.io.cache import CacheTTL, cache_key

from .base import ibge_tool
from .formatters import format_number, markdown_table

if TYPE_CHECKING:
    from ibge_mcp.runtime import Pipeline


class PopulacaoParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    localidade: Literal["BR"] = Field(
        default="BR", description="Localidade para projeção populacional (atualmente apenas BR disponível)",
    )


def format_seconds(seconds: float) -> str:
    """Humanize an interval: "18 segundos", "1 min 5 seg", "2h 3min"."""
    if seconds < 60:
        return f"{math.floor(seconds + 0.5)} segundos"
    minutes = int(seconds // 60)
    rest = math.floor(seconds % 60 + 0.5)
    if minutes < 60:
        return f"{minutes} min {rest} seg" if rest > 0 else f"{minutes} minutos"
    return f"{minutes // 60}h {minutes % 60}min"


@ibge_tool(
    "ibge_populacao",
    """
Retorna a projeção da população brasileira em tempo real.

Funcionalidades:
- Estimativa da população atual do Brasil
- Tempo médio entre nascimentos e entre óbitos
- Incremento populacional diário

Nota: Para dados históricos ou por município, use ibge_sidra com as tabelas
6579 (Estimativas de população) ou 9514 (População do Censo 2022).
""",
    PopulacaoParams,
    api="populacao",
    related_tools=("ibge_sidra",),
)
async def ibge_populacao(pipeline: Pipeline, params: PopulacaoParams) -> str:
    url = f"{constants.POPULACAO}/{params.localidade}"
    data = await pipeline.fetch(url, cache_key(url), CacheTTL.REALTIME)

    projecao = data["projecao"]
    periodo = projecao["periodoMedio"]
    indicadores = markdown_table(
        ["Indicador", "Valor"],
        [
            ("Incremento populacional", f"{format_number(periodo['incrementoPopulacional'])} por dia"),
            ("Nascimentos", f"1 a cada {format_seconds(periodo['nascimento'])}"),
            ("Óbitos", f"1 a cada {format_seconds(periodo['obito'])}"),
        ],
        alignment=["left", "right"],
    )
    return (
        "## Projeção da População do Brasil\n\n"
        f"**Data/Hora da consulta:** {data['horario']}\n\n"
        "### População Atual\n\n"
        f"**{format_number(projecao['populacao'])}** habitantes\n\n"
        "### Indicadores (Período Médio)\n\n"
        f"{indicadores}"
        "\n### Notas\n\n"
        "- Os dados são projeções em tempo real baseadas em modelos estatísticos do IBGE\n"
        "- O incremento populacional considera nascimentos menos óbitos\n"
        "- Fonte: IBGE - Projeção da População\n"
    )

"""ibge_sidra: queries against SIDRA aggregate tables."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Literal

import orjson
from pydantic import BaseModel, ConfigDict, Field

from ibge_mcp.foundation.config import constants
from ibge_mcp.foundation.errors import ToolError
from ibge_mcp.io.cache import CacheTTL, cache_key

from .base import ibge_tool
from .formatters import format_number, markdown_table
from .validation import is_valid_period, is_valid_territorial_level, parse_localidades

if TYPE_CHECKING:
    from ibge_mcp.runtime import Pipeline

MAX_TABLE_ROWS = 50
VALUE_COLUMN = "V"
# levels whose locations are plain IBGE region, state, municipality or district codes
CODED_LEVELS = frozenset({"2", "3", "6", "10"})

_CLASSIFICATION_RE = re.compile(r"(\d+)\[([^\]]+)\]")
_NUMERIC_RE = re.compile(r"^-?\d+(\.\d+)?$")


class SidraParams(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    tabela: str = Field(
        ..., pattern=r"^\d+$",
        description="Código da tabela SIDRA (ex: 6579 para estimativas de população, 9514 para censo 2022)",
    )
    variaveis: str = Field(default="allxp", description="IDs das variáveis separados por vírgula, ou 'allxp' para todas")
    nivel_territorial: str = Field(
        default="1",
        description=(
            "Nível territorial (código N sem o prefixo): 1=Brasil, 2=Grande Região, 3=UF, 6=Município, "
            "7=Região Metropolitana, 8=Mesorregião, 9=Microrregião, 10=Distrito, 11=Subdistrito, "
            "13=RM e RIDE, 14=RIDE, 15=Aglomeração Urbana, 17=Região Geográfica Imediata, "
            "18=Região Geográfica Intermediária, 105=Macrorregião de Saúde, 106=Região de Saúde, "
            "114=Aglomerado Subnormal, 127=Amazônia Legal, 128=Semiárido"
        ),
    )
    localidades: str = Field(default="all", description="Códigos das localidades separados por vírgula, ou 'all' para todas")
    periodos: str = Field(
        default="last",
        description="Períodos: 'last' para último, 'all' para todos, ou anos específicos (ex: 2020,2021,2022)",
    )
    classificacoes: str | None = Field(
        default=None, description="Classificações no formato 'id[categorias]' (ex: '2[6794]' para sexo masculino)",
    )
    formato: Literal["json", "tabela"] = Field(
        default="tabela", description="Formato de saída: 'json' para dados brutos ou 'tabela' para formato legível",
    )


def build_sidra_url(params: SidraParams) -> str:
    """/t/{tabela}/n{nivel}/{localidades}/v/{variaveis}/p/{periodos}[/c{id}/{categorias}]"""
    path = (
        f"/t/{params.tabela}/n{params.nivel_territorial}/{params.localidades}"
        f"/v/{params.variaveis}/p/{params.periodos}"
    )
    if params.classificacoes and (match := _CLASSIFICATION_RE.search(params.classificacoes)):
        path += f"/c{match.group(1)}/{match.group(2)}"
    return constants.SIDRA + path


def _cell(column: str, value: str | None) -> str:
    # only the value column is numeric; codes and years stay verbatim
    if column == VALUE_COLUMN and value and len(value) > 3 and _NUMERIC_RE.match(value):
        return format_number(float(value))
    return value or "-"


def format_sidra_table(data: list[dict[str, str]], tabela: str) -> str:
    """First record carries the column labels; the rest are values."""
    header_row, rows = data[0], data[1:]
    title = constants.COMMON_SIDRA_TABLES.get(tabela, f"Tabela {tabela}")
    out = f"## SIDRA - {title}\n\nTotal de registros: {len(rows)}\n\n"
    if not rows:
        return out + "Nenhum dado encontrado para os filtros aplicados."

    columns = list(header_row)
    out += markdown_table(
        [header_row.get(c) or c for c in columns],
        [[_cell(c, row.get(c)) for c in columns] for row in rows],
        max_rows=MAX_TABLE_ROWS,
    )
    if len(rows) > MAX_TABLE_ROWS:
        out += "_Use formato 'json' para dados completos._\n"
    return out


@ibge_tool(
    "ibge_sidra",
    """
Consulta tabelas do SIDRA (Sistema IBGE de Recuperação Automática).

Tabelas mais utilizadas:
- 6579: Estimativas de população (anual)
- 9514: População do Censo 2022
- 200: População dos Censos (1970-2010)
- 4714: Taxa de desocupação (PNAD Contínua)
- 6706: PIB a preços correntes

Exemplos de uso:
- População do Brasil 2023: tabela="6579", periodos="2023"
- População por Região: tabela="6579", nivel_territorial="2"
- Censo 2022 em SP capital: tabela="9514", nivel_territorial="6", localidades="3550308"
""",
    SidraParams,
    api="sidra",
    related_tools=("ibge_populacao",),
)
async def ibge_sidra(pipeline: Pipeline, params: SidraParams) -> str:
    if not is_valid_territorial_level(params.nivel_territorial):
        return ToolError.invalid_value(
            "ibge_sidra", "nivel_territorial", params.nivel_territorial,
            "1 (Brasil), 2 (Região), 3 (UF), 6 (Município), etc.",
        ).render()
    if not is_valid_period(params.periodos):
        return ToolError.invalid_value(
            "ibge_sidra", "periodos", params.periodos,
            "'last', 'all', ano (YYYY), intervalo (YYYY-YYYY), ou múltiplos separados por vírgula",
        ).render()
    if params.nivel_territorial in CODED_LEVELS:
        if invalid := parse_localidades(params.localidades).invalid:
            return ToolError.invalid_value(
                "ibge_sidra", "localidades", ",".join(invalid), "códigos IBGE separados por vírgula, ou 'all'",
            ).render()

    url = build_sidra_url(params)
    data = await pipeline.fetch(url, cache_key(url), CacheTTL.SHORT)

    if not data:
        return ToolError.empty_result(
            "ibge_sidra", "Verifique se a tabela e os parâmetros estão corretos.",
        ).render()
    if params.formato == "json":
        return orjson.dumps(data, option=orjson.OPT_INDENT_2).decode()
    return format_sidra_table(data, params.tabela)

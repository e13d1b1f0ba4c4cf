"""ibge_sidra_metadados: structure of a SIDRA table before querying it.

Shows the table's survey, periodicity, territorial levels, variables with
their classifications, and optionally the available periods.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from pydantic import BaseModel, ConfigDict, Field

from ibge_mcp.foundation.config import constants
from ibge_mcp.foundation.errors import FetchError, HttpStatusError
from ibge_mcp.io.cache import CacheTTL, cache_key

from .base import ibge_tool
from .formatters import key_value_table, markdown_table, truncate

if TYPE_CHECKING:
    from ibge_mcp.runtime import Pipeline

MAX_LISTED_CATEGORIES = 20
CATEGORY_SAMPLE = 10
MAX_LISTED_PERIODS = 20
PERIOD_SAMPLE = 5

LEVEL_NAMES: Final[dict[str, str]] = {
    "N1": "Brasil",
    "N2": "Grande Região",
    "N3": "Unidade da Federação",
    "N6": "Município",
    "N7": "Região Metropolitana",
    "N8": "Mesorregião",
    "N9": "Microrregião",
    "N10": "Distrito",
    "N11": "Subdistrito",
    "N13": "Região Metropolitana e RIDE",
    "N14": "Região Integrada de Desenvolvimento",
    "N15": "Aglomeração Urbana",
    "N17": "Região Geográfica Imediata",
    "N18": "Região Geográfica Intermediária",
    "N101": "País do Mercosul, Bolívia e Chile",
    "N102": "Município do Mercosul, Bolívia e Chile",
    "N103": "UF do Mercosul, Bolívia e Chile",
    "N104": "Aglomerado Subnormal",
    "N105": "Macrorregião de Saúde",
    "N106": "Região de Saúde",
    "N107": "Bacia Hidrográfica",
    "N108": "Sub-bacia Hidrográfica",
}

_LEVEL_GROUPS = ("Administrativo", "Especial", "IBGE")


class SidraMetadadosParams(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    tabela: str = Field(
        ..., pattern=r"^\d+$", description="Código da tabela/agregado SIDRA (ex: '6579', '9514', '4714')",
    )
    incluir_periodos: bool = Field(
        default=True, description="Incluir lista de períodos disponíveis (padrão: true)",
    )


def _period_line(periodo: dict[str, Any]) -> str:
    return f"- {periodo['id']}: {', '.join(periodo.get('literals', []))}\n"


def _format_classificacoes(variavel: dict[str, Any]) -> list[str]:
    out = [f"#### Classificações da Variável {variavel['id']} ({truncate(variavel['nome'], 40)})\n\n"]
    for classificacao in variavel["classificacoes"]:
        categorias = classificacao.get("categorias", [])
        out.append(f"**{classificacao['id']} - {classificacao['nome']}:**\n")
        if len(categorias) <= MAX_LISTED_CATEGORIES:
            rows = [(str(c["id"]), truncate(c["nome"], 60)) for c in categorias]
        else:
            out.append(f"_{len(categorias)} categorias disponíveis. Primeiras {CATEGORY_SAMPLE}:_\n")
            rows = [(str(c["id"]), truncate(c["nome"], 60)) for c in categorias[:CATEGORY_SAMPLE]]
            rows.append(("...", f"_e mais {len(categorias) - CATEGORY_SAMPLE} categorias_"))
        out.append(markdown_table(["ID", "Categoria"], rows, alignment=["right", "left"]) + "\n")
    return out


def format_metadados(meta: dict[str, Any], periodos: list[dict[str, Any]]) -> str:
    periodicidade = meta.get("periodicidade") or {}
    out = [f"## Metadados da Tabela {meta['id']}\n\n", "### Informações Gerais\n\n"]
    out.append(key_value_table({
        "**Código**": meta["id"],
        "**Nome**": truncate(meta["nome"], 80),
        "**Pesquisa**": meta.get("pesquisa"),
        "**Assunto**": meta.get("assunto"),
        "**Periodicidade**": periodicidade.get("frequencia"),
        "**Período**": f"{periodicidade.get('inicio')} a {periodicidade.get('fim')}" if periodicidade else None,
        "**URL**": meta.get("URL"),
    }) + "\n")

    out.append("### Níveis Territoriais Disponíveis\n\n")
    niveis_por_grupo = meta.get("nivelTerritorial") or {}
    niveis = [n for group in _LEVEL_GROUPS for n in niveis_por_grupo.get(group) or []]
    if niveis:
        rows = [(n, LEVEL_NAMES.get(n, n)) for n in niveis]
        out.append(markdown_table(["Código", "Nível"], rows, alignment=["left", "left"]) + "\n")
    else:
        out.append("_Informação não disponível_\n\n")

    out.append("### Variáveis\n\n")
    if variaveis := meta.get("variaveis"):
        rows = [(str(v["id"]), truncate(v["nome"], 60), v.get("unidade") or "-") for v in variaveis]
        out.append(markdown_table(["ID", "Nome", "Unidade"], rows, alignment=["right", "left", "left"]) + "\n")
        for variavel in variaveis:
            if variavel.get("classificacoes"):
                out.extend(_format_classificacoes(variavel))
    else:
        out.append("_Nenhuma variável encontrada_\n\n")

    if periodos:
        out.append("### Períodos Disponíveis\n\n")
        if len(periodos) > MAX_LISTED_PERIODS:
            out.append(f"_{len(periodos)} períodos disponíveis:_\n\n**Primeiros períodos:**\n")
            out.extend(_period_line(p) for p in periodos[:PERIOD_SAMPLE])
            out.append("\n**Últimos períodos:**\n")
            out.extend(_period_line(p) for p in periodos[-PERIOD_SAMPLE:])
        else:
            out.extend(_period_line(p) for p in periodos)
        out.append("\n")

    out.append(
        "---\n\n### Como usar esta tabela\n\n```\n"
        f'ibge_sidra(tabela="{meta["id"]}", variaveis="allxp", nivel_territorial="1", '
        'localidades="all", periodos="last")\n'
        "```\n"
        "_nivel_territorial: 1=Brasil, 3=UF, 6=Município_\n"
    )
    return "".join(out)


@ibge_tool(
    "ibge_sidra_metadados",
    """
Retorna os metadados de uma tabela SIDRA específica.

Funcionalidades:
- Informações gerais (nome, pesquisa, assunto, periodicidade)
- Níveis territoriais disponíveis (Brasil, UF, município, etc.)
- Lista de variáveis com unidades
- Classificações e categorias de cada variável
- Períodos disponíveis

Use esta ferramenta para entender a estrutura de uma tabela
ANTES de consultar os dados com ibge_sidra.

Exemplos de uso:
- Metadados da tabela de população: tabela="6579"
- Metadados do Censo 2022: tabela="9514"
- Sem períodos: tabela="6579", incluir_periodos=false
""",
    SidraMetadadosParams,
    api="agregados",
    related_tools=("ibge_sidra_tabelas",),
)
async def ibge_sidra_metadados(pipeline: Pipeline, params: SidraMetadadosParams) -> str:
    url = f"{constants.AGREGADOS}/{params.tabela}/metadados"
    try:
        meta = await pipeline.fetch(url, cache_key(url), CacheTTL.STATIC)
    except HttpStatusError as e:
        if e.status == 404:
            return (
                f"Tabela {params.tabela} não encontrada. "
                "Use ibge_sidra_tabelas para listar tabelas disponíveis."
            )
        raise

    periodos: list[dict[str, Any]] = []
    if params.incluir_periodos:
        periodos_url = f"{constants.AGREGADOS}/{params.tabela}/periodos"
        try:
            periodos = await pipeline.fetch(periodos_url, cache_key(periodos_url), CacheTTL.STATIC) or []
        except FetchError as e:
            # metadata alone is still useful
            pipeline.logger.warn("SIDRA periods unavailable", {"tabela": params.tabela, "error": str(e)})

    return format_metadados(meta, periodos)

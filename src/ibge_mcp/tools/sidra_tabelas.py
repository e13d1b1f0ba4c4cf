"""ibge_sidra_tabelas: search the SIDRA aggregate tables across surveys."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from .base import ibge_tool
from .formatters import markdown_table, normalize_text
from .pesquisas import fetch_pesquisas, matches_pesquisa

if TYPE_CHECKING:
    from ibge_mcp.runtime import Pipeline

Tabela = tuple[dict[str, Any], dict[str, Any]]  # (pesquisa, agregado)


class SidraTabelasParams(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    busca: str | None = Field(default=None, description="Termo para buscar no nome das tabelas/agregados")
    pesquisa: str | None = Field(
        default=None, description="Filtrar por código ou nome da pesquisa (ex: 'censo', 'pnad', 'pib')",
    )
    limite: int = Field(default=20, ge=1, le=100, description="Número máximo de resultados (padrão: 20)")


def _format(tabelas: list[Tabela], total: int, params: SidraTabelasParams) -> str:
    out = ["## Tabelas SIDRA (Agregados)\n\n"]
    if params.busca:
        out.append(f'**Busca:** "{params.busca}"\n')
    if params.pesquisa:
        out.append(f'**Pesquisa:** "{params.pesquisa}"\n')
    out.append(f"**Mostrando:** {len(tabelas)} de {total} tabelas\n\n")

    by_pesquisa: dict[str, list[tuple[str, str]]] = {}
    for pesquisa, agregado in tabelas:
        group = f"{pesquisa['id']} - {pesquisa['nome']}"
        by_pesquisa.setdefault(group, []).append((agregado["id"], agregado["nome"]))

    for group, rows in by_pesquisa.items():
        out.append(f"### {group}\n\n")
        out.append(markdown_table(["Código", "Nome da Tabela"], rows, alignment=["right", "left"]) + "\n")

    out.append("---\n\n")
    out.append("_Use `ibge_sidra_metadados` com o código da tabela para ver detalhes._\n")
    out.append("_Use `ibge_sidra` com o código da tabela para consultar os dados._\n")
    return "".join(out)


@ibge_tool(
    "ibge_sidra_tabelas",
    """
Lista e busca tabelas disponíveis no SIDRA (Sistema IBGE de Recuperação Automática).

Funcionalidades:
- Lista todas as tabelas (agregados) do SIDRA
- Busca por termo no nome da tabela
- Filtra por pesquisa (Censo, PNAD, PIB, etc.)
- Mostra o código e nome de cada tabela

Exemplos de uso:
- Listar tabelas: (sem parâmetros)
- Buscar tabelas de população: busca="população"
- Tabelas do Censo: pesquisa="censo"
- Tabelas de emprego: busca="desocupação"
""",
    SidraTabelasParams,
    api="agregados",
    related_tools=("ibge_pesquisas", "ibge_sidra_metadados"),
)
async def ibge_sidra_tabelas(pipeline: Pipeline, params: SidraTabelasParams) -> str:
    pesquisas = await fetch_pesquisas(pipeline)
    if params.pesquisa:
        pesquisas = [p for p in pesquisas if matches_pesquisa(p, params.pesquisa)]

    tabelas: list[Tabela] = [(p, a) for p in pesquisas for a in p.get("agregados", [])]
    if params.busca:
        term = normalize_text(params.busca)
        tabelas = [(p, a) for p, a in tabelas if term in str(a["id"]) or term in normalize_text(a["nome"])]

    shown = tabelas[: params.limite]
    if not shown:
        if params.busca or params.pesquisa:
            return "Nenhuma tabela encontrada para os critérios especificados."
        return "Nenhuma tabela encontrada."
    return _format(shown, len(tabelas), params)

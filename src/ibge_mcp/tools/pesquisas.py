"""ibge_pesquisas: IBGE surveys and the SIDRA tables each one publishes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from pydantic import BaseModel, ConfigDict, Field

from ibge_mcp.foundation.config import constants
from ibge_mcp.io.cache import CacheTTL, cache_key

from .base import ibge_tool
from .formatters import markdown_table, normalize_text, truncate

if TYPE_CHECKING:
    from ibge_mcp.runtime import Pipeline

Pesquisa = dict[str, Any]

# First category whose term appears in the survey name wins
CATEGORIES: Final[dict[str, tuple[str, ...]]] = {
    "Censos": ("censo", "contagem"),
    "Trabalho e Renda": ("pnad", "trabalho", "emprego", "rendimento", "ocupacao"),
    "Economia": ("pib", "contas", "producao", "industrial", "comercio", "servicos"),
    "Agropecuária": ("agricola", "agropecuaria", "pecuaria", "safra", "abate"),
    "Preços": ("preco", "inflacao", "ipca", "inpc", "custo"),
    "Saúde": ("saude", "pns"),
    "Educação": ("educacao", "ensino"),
    "Demografia": ("populacao", "natalidade", "mortalidade", "nupcialidade"),
}
OTHER_CATEGORY = "Outras"


class PesquisasParams(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    busca: str | None = Field(default=None, description="Termo para buscar no nome ou ID da pesquisa")
    detalhes: str | None = Field(
        default=None, description="Código da pesquisa para ver detalhes e tabelas disponíveis",
    )


async def fetch_pesquisas(pipeline: Pipeline) -> list[Pesquisa]:
    """Every survey with its aggregate tables. Also backs ibge_sidra_tabelas."""
    url = constants.AGREGADOS
    return await pipeline.fetch(url, cache_key(url), CacheTTL.STATIC) or []


def matches_pesquisa(pesquisa: Pesquisa, term: str) -> bool:
    """Accent-insensitive substring match on the survey code or name."""
    needle = normalize_text(term)
    return needle in normalize_text(str(pesquisa["id"])) or needle in normalize_text(pesquisa["nome"])


def categorize(pesquisas: list[Pesquisa]) -> dict[str, list[Pesquisa]]:
    groups: dict[str, list[Pesquisa]] = {}
    for pesquisa in pesquisas:
        nome = normalize_text(pesquisa["nome"])
        category = next(
            (c for c, terms in CATEGORIES.items() if any(t in nome for t in terms)), OTHER_CATEGORY,
        )
        groups.setdefault(category, []).append(pesquisa)
    return groups


def _format_lista(pesquisas: list[Pesquisa], busca: str | None) -> str:
    out = ["## Pesquisas do IBGE\n\n"]
    if busca:
        out.append(f'**Busca:** "{busca}"\n')
    out.append(f"**Total:** {len(pesquisas)} pesquisas\n\n")

    rows = [(p["id"], truncate(p["nome"], 60), len(p.get("agregados", []))) for p in pesquisas]
    out.append(markdown_table(["Código", "Pesquisa", "Tabelas"], rows, alignment=["left", "left", "right"]))
    out.append("\n---\n\n")

    groups = categorize(pesquisas)
    if len(groups) > 1:
        out.append("### Pesquisas por Categoria\n\n")
        out.extend(f"**{category}:** {len(items)} pesquisas\n" for category, items in groups.items())
        out.append("\n")

    out.append('_Use `ibge_pesquisas(detalhes="CODIGO")` para ver as tabelas de uma pesquisa._\n')
    out.append('_Use `ibge_sidra_tabelas(pesquisa="CODIGO")` para buscar tabelas específicas._\n')
    return "".join(out)


def _format_detalhes(pesquisa: Pesquisa) -> str:
    agregados = pesquisa.get("agregados", [])
    rows = [(a["id"], truncate(a["nome"], 70)) for a in agregados]
    return (
        f"## Pesquisa: {pesquisa['nome']}\n\n"
        f"**Código:** {pesquisa['id']}\n"
        f"**Total de tabelas:** {len(agregados)}\n\n"
        "### Tabelas Disponíveis\n\n"
        + markdown_table(["Código", "Nome da Tabela"], rows, alignment=["right", "left"])
        + "\n---\n\n"
        '_Use `ibge_sidra_metadados(tabela="CODIGO")` para ver detalhes de uma tabela._\n'
        '_Use `ibge_sidra(tabela="CODIGO")` para consultar os dados._\n'
    )


@ibge_tool(
    "ibge_pesquisas",
    """
Lista as pesquisas disponíveis no IBGE e suas tabelas.

Funcionalidades:
- Lista todas as pesquisas do IBGE (Censos, PNAD, PIB, etc.)
- Busca por nome ou código da pesquisa
- Mostra detalhes e tabelas de uma pesquisa específica
- Categoriza pesquisas por tema

Exemplos de uso:
- Listar todas as pesquisas: (sem parâmetros)
- Buscar pesquisas de população: busca="população"
- Detalhes da PNAD: detalhes="pnad"
- Detalhes do Censo: detalhes="CD"
""",
    PesquisasParams,
    api="agregados",
    related_tools=("ibge_sidra_tabelas",),
)
async def ibge_pesquisas(pipeline: Pipeline, params: PesquisasParams) -> str:
    pesquisas = await fetch_pesquisas(pipeline)

    if params.detalhes:
        # exact code, or a fragment of the survey name
        code, term = params.detalhes.lower(), normalize_text(params.detalhes)
        pesquisa = next(
            (p for p in pesquisas if str(p["id"]).lower() == code or term in normalize_text(p["nome"])),
            None,
        )
        if pesquisa is None:
            return (
                f'Pesquisa "{params.detalhes}" não encontrada. '
                "Use ibge_pesquisas() sem parâmetros para listar todas."
            )
        return _format_detalhes(pesquisa)

    if params.busca:
        pesquisas = [p for p in pesquisas if matches_pesquisa(p, params.busca)]
    if not pesquisas:
        return f'Nenhuma pesquisa encontrada para: "{params.busca}"' if params.busca else "Nenhuma pesquisa encontrada."
    return _format_lista(pesquisas, params.busca)

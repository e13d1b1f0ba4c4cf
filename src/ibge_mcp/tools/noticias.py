"""ibge_noticias: IBGE news and press releases."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ibge_mcp.foundation.config import constants
from ibge_mcp.io.cache import CacheTTL, cache_key

from .base import ibge_tool
from .formatters import build_query_string, decode_html_entities, format_date
from .validation import is_valid_date_format

if TYPE_CHECKING:
    from ibge_mcp.runtime import Pipeline


class NoticiasParams(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    busca: str | None = Field(default=None, description="Termo para buscar nas notícias")
    quantidade: int = Field(default=10, ge=1, le=100, description="Quantidade de notícias a retornar (padrão: 10, máximo: 100)")
    pagina: int = Field(default=1, ge=1, description="Número da página para paginação")
    de: str | None = Field(default=None, description="Data inicial no formato MM-DD-AAAA (ex: 01-01-2024)")
    ate: str | None = Field(default=None, description="Data final no formato MM-DD-AAAA (ex: 12-31-2024)")
    tipo: Literal["release", "noticia"] | None = Field(default=None, description="Tipo de publicação: 'release' ou 'noticia'")
    destaque: bool | None = Field(default=None, description="Filtrar apenas notícias em destaque")

    @field_validator("de", "ate")
    @classmethod
    def _check_date(cls, v: str | None) -> str | None:
        if v is not None and not is_valid_date_format(v):
            raise ValueError("data deve estar no formato MM-DD-AAAA")
        return v


def _format_noticia(noticia: dict[str, Any]) -> str:
    badge = "📢" if noticia.get("tipo") == "Release" else "📰"
    out = [f"### {badge} {noticia['titulo']}\n\n"]
    out.append(f"**Data:** {format_date(noticia.get('data_publicacao'), style='long')}\n")
    if editorias := noticia.get("editorias"):
        out.append(f"**Editoria:** {editorias}\n")
    if (produtos := noticia.get("produtos")) and produtos != "null":
        out.append(f"**Produtos:** {produtos}\n")
    if noticia.get("destaque"):
        out.append("**⭐ Destaque**\n")
    out.append("\n")
    if intro := decode_html_entities(noticia.get("introducao")):
        out.append(f"{intro}\n\n")
    out.append(f"🔗 [Leia mais]({noticia['link']})\n")
    return "".join(out)


@ibge_tool(
    "ibge_noticias",
    """
Busca notícias e releases do IBGE.

Funcionalidades:
- Lista as últimas notícias e releases, com busca por termo
- Filtra por período (de/ate no formato MM-DD-AAAA), tipo e destaque
- Suporta paginação

Exemplos: busca="censo"; de="01-01-2024", ate="12-31-2024"; tipo="release"; pagina=2
""",
    NoticiasParams,
    api="noticias",
)
async def ibge_noticias(pipeline: Pipeline, params: NoticiasParams) -> str:
    query = build_query_string({
        "qtd": params.quantidade,
        "page": params.pagina,
        "busca": params.busca,
        "de": params.de,
        "ate": params.ate,
        "tipo": params.tipo,
        "destaque": None if params.destaque is None else ("1" if params.destaque else "0"),
    })
    url = f"{constants.NOTICIAS}?{query}"

    data = await pipeline.fetch(url, cache_key(url), CacheTTL.SHORT)
    items = data.get("items") or []
    if not items:
        return f'Nenhuma notícia encontrada para: "{params.busca}"' if params.busca else "Nenhuma notícia encontrada."

    out = ["## Notícias e Releases do IBGE\n\n"]
    if params.busca:
        out.append(f'**Busca:** "{params.busca}"\n')
    out.append(f"**Total:** {data.get('count', len(items))} notícias encontradas\n")
    page, total_pages = data.get("page", params.pagina), data.get("totalPages", 1)
    out.append(f"**Página:** {page} de {total_pages}\n")
    out.append(f"**Mostrando:** {data.get('showingFrom', 1)} a {data.get('showingTo', len(items))}\n\n")
    out.append("---\n\n")
    for noticia in items:
        out.append(_format_noticia(noticia))
        out.append("\n---\n\n")

    if total_pages > 1:
        out.append(f"_Página {page} de {total_pages}. ")
        if next_page := data.get("nextPage"):
            out.append(f"Use pagina={next_page} para a próxima página.")
        out.append("_\n")
    return "".join(out)

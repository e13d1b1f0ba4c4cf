"""IBGE tools: registered handlers plus the formatting and validation helpers they share.

Importing this package registers every tool in TOOLS.
"""

from . import (
    estados,
    localidade,
    malhas,
    metricas,
    municipios,
    nomes,
    noticias,
    pesquisas,
    populacao,
    sidra,
    sidra_metadados,
    sidra_tabelas,
)
from .base import TOOLS, ToolSpec, ibge_tool
from .formatters import (
    build_query_string,
    decode_html_entities,
    format_date,
    format_number,
    key_value_table,
    markdown_table,
    normalize_text,
    truncate,
)

__all__ = [
    "TOOLS",
    "ToolSpec",
    "ibge_tool",
    "build_query_string",
    "decode_html_entities",
    "format_date",
    "format_number",
    "key_value_table",
    "markdown_table",
    "normalize_text",
    "truncate",
    # tool modules
    "estados",
    "localidade",
    "malhas",
    "metricas",
    "municipios",
    "nomes",
    "noticias",
    "pesquisas",
    "populacao",
    "sidra",
    "sidra_metadados",
    "sidra_tabelas",
]

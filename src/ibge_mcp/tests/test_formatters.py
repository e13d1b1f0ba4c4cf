"""Tests for the Markdown and pt-BR formatting helpers."""

import math

from ibge_mcp.tools.formatters import (
    NO_DATA,
    build_query_string,
    decode_html_entities,
    format_date,
    format_number,
    key_value_table,
    markdown_table,
    normalize_text,
    truncate,
)


def test_format_number() -> None:
    assert format_number(203062512) == "203.062.512"
    assert format_number(1234.5) == "1.234,5"
    assert format_number(1234.5, min_fraction=2) == "1.234,50"
    assert format_number(0.125, max_fraction=1) == "0,1"
    assert format_number(None) == "-"
    assert format_number(math.nan) == "-"


def test_markdown_table() -> None:
    table = markdown_table(["ID", "Nome"], [(35, "São Paulo"), (33, None)], alignment=["right", "left"])
    assert table == "| ID | Nome |\n|---:|:---|\n| 35 | São Paulo |\n| 33 | - |\n"
    assert markdown_table(["A"], []) == NO_DATA


def test_markdown_table_truncates() -> None:
    table = markdown_table(["n"], [(i,) for i in range(5)], max_rows=2)
    assert "| 1 |" in table
    assert "| 2 |" not in table
    assert "_Mostrando 2 de 5 registros._" in table


def test_key_value_table_skips_none() -> None:
    table = key_value_table({"Sigla": "SP", "Região": None})
    assert "| Sigla | SP |" in table
    assert "Região" not in table


def test_text_helpers() -> None:
    assert decode_html_entities("<p>Popula&ccedil;&atilde;o&nbsp;cresce</p>") == "População cresce"
    assert decode_html_entities(None) == ""
    assert truncate("abcdefghij", 6) == "abc..."
    assert truncate("abc", 6) == "abc"
    assert normalize_text("  São Paulo ") == "sao paulo"


def test_build_query_string() -> None:
    assert build_query_string({"qtd": 10, "busca": "", "tipo": None, "destaque": True}) == "qtd=10&destaque=true"
    assert build_query_string({"busca": "censo 2022"}) == "busca=censo+2022"


def test_format_date() -> None:
    assert format_date("15/03/2024 10:00:00") == "15/03/2024"
    assert format_date("15/03/2024 10:00:00", style="long") == "15 de março de 2024"
    assert format_date("12-31-2024", style="iso") == "2024-12-31"
    assert format_date("ontem") == "ontem"
    assert format_date(None) == "-"

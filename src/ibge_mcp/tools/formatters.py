"""Markdown and pt-BR formatting helpers shared by the tools."""

from __future__ import annotations

import html
import math
import re
import unicodedata
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Literal
from urllib.parse import urlencode

Alignment = Literal["left", "right", "center"]

_ALIGN_MARKERS: dict[str, str] = {"left": ":---", "right": "---:", "center": ":---:"}
_TAG_RE = re.compile(r"<[^>]*>")

NO_DATA = "_Sem dados disponíveis._\n"


# ═══════════════════════════════════════════════════════════════════════════════
# Numbers
# ═══════════════════════════════════════════════════════════════════════════════


def _pt_br(value: float, min_fraction: int, max_fraction: int) -> str:
    text = f"{value:,.{max_fraction}f}"
    if "." in text:
        whole, frac = text.split(".")
        frac = frac.rstrip("0")
        frac = frac.ljust(min_fraction, "0")
        text = f"{whole}.{frac}" if frac else whole
    # 1,234.5 -> 1.234,5
    return text.replace(",", "\0").replace(".", ",").replace("\0", ".")


def format_number(
    value: float | int | None,
    *,
    min_fraction: int = 0,
    max_fraction: int = 2,
) -> str:
    """Format a number the Brazilian way ("1.234.567,89").

    Example:
        >>> format_number(203062512)
        '203.062.512'
    """
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "-"
    return _pt_br(value, min_fraction, max_fraction)


# ═══════════════════════════════════════════════════════════════════════════════
# Markdown
# ═══════════════════════════════════════════════════════════════════════════════


def markdown_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[object]],
    *,
    alignment: Sequence[Alignment] | None = None,
    max_rows: int | None = None,
    show_row_count: bool = True,
) -> str:
    """Render rows as a Markdown table; None cells render as "-"."""
    if not headers or not rows:
        return NO_DATA

    align = alignment or ["left"] * len(headers)
    out = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join(_ALIGN_MARKERS.get(a, "---") for a in align) + "|",
    ]
    shown = rows[:max_rows] if max_rows else rows
    out += ["| " + " | ".join("-" if c is None else str(c) for c in row) + " |" for row in shown]

    text = "\n".join(out) + "\n"
    if max_rows and len(rows) > max_rows and show_row_count:
        text += f"\n_Mostrando {max_rows} de {len(rows)} registros._\n"
    return text


def key_value_table(
    data: Mapping[str, object],
    *,
    key_header: str = "Campo",
    value_header: str = "Valor",
) -> str:
    """Two-column table; None values are skipped."""
    rows = [(k, str(v)) for k, v in data.items() if v is not None]
    return markdown_table([key_header, value_header], rows, alignment=["left", "right"])


# ═══════════════════════════════════════════════════════════════════════════════
# Text
# ═══════════════════════════════════════════════════════════════════════════════


def decode_html_entities(text: str | None) -> str:
    """Decode HTML entities and strip tags from IBGE news snippets."""
    if not text:
        return ""
    return _TAG_RE.sub("", html.unescape(text)).replace("\xa0", " ").strip()


def truncate(text: str, max_length: int) -> str:
    if not text or len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def normalize_text(text: str) -> str:
    """Lowercase and strip accents so "São Paulo" matches "sao paulo"."""
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).strip()


def build_query_string(params: Mapping[str, str | int | float | bool | None]) -> str:
    """URL-encode params, skipping None and empty strings."""
    return urlencode({
        k: (str(v).lower() if isinstance(v, bool) else str(v))
        for k, v in params.items()
        if v is not None and v != ""
    })


_MESES = (
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
)
_DATE_FORMATS = ("%d/%m/%Y %H:%M:%S", "%d/%m/%Y", "%m-%d-%Y", "%Y-%m-%d")


def format_date(text: str | None, *, style: Literal["short", "long", "iso"] = "short") -> str:
    """Reformat an IBGE date ("DD/MM/YYYY[ HH:MM:SS]", "MM-DD-YYYY" or ISO); unparseable input is returned as-is."""
    if not text:
        return "-"
    for fmt in _DATE_FORMATS:
        try:
            parsed = datetime.strptime(text.strip(), fmt)
            break
        except ValueError:
            continue
    else:
        return text
    if style == "iso":
        return parsed.date().isoformat()
    if style == "long":
        return f"{parsed.day} de {_MESES[parsed.month - 1]} de {parsed.year}"
    return parsed.strftime("%d/%m/%Y")

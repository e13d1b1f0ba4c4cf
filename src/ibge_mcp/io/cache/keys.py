"""Deterministic cache keys from a base identifier plus request parameters."""

from __future__ import annotations

import unicodedata
from collections.abc import Mapping

ParamValue = str | int | float | bool | None


def _render(value: str | int | float | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _collation(key: str) -> tuple[str, str, str, str]:
    # Base letters, then accents, then case (lowercase first); raw key keeps it total
    folded = unicodedata.normalize("NFD", key.casefold())
    base = "".join(ch for ch in folded if not unicodedata.combining(ch))
    return base, folded, key.swapcase(), key


def cache_key(base: str, params: Mapping[str, ParamValue] | None = None) -> str:
    """Build a cache key that is independent of parameter insertion order.

    None values are dropped. Remaining pairs are sorted by key and joined as
    a query string appended to `base`.

    Example:
        >>> cache_key("https://x/data", {"z": "2", "a": "1", "skip": None})
        'https://x/data?a=1&z=2'
        >>> cache_key("https://x/data")
        'https://x/data'
    """
    if not params:
        return base
    pairs = sorted(((k, v) for k, v in params.items() if v is not None), key=lambda kv: _collation(kv[0]))
    query = "&".join(f"{k}={_render(v)}" for k, v in pairs)
    return f"{base}?{query}" if query else base

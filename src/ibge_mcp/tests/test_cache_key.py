"""Tests for cache key construction."""

import itertools

from ibge_mcp.io.cache import cache_key


def test_sorted_query_string() -> None:
    assert cache_key("https://x/data", {"z": "2", "a": "1"}) == "https://x/data?a=1&z=2"


def test_no_params_returns_base() -> None:
    assert cache_key("https://x/data") == "https://x/data"
    assert cache_key("https://x/data", {}) == "https://x/data"


def test_none_values_dropped() -> None:
    assert cache_key("estados", {"regiao": None, "ordem": "nome"}) == "estados?ordem=nome"
    assert cache_key("estados", {"regiao": None}) == "estados"


def test_insertion_order_independent() -> None:
    """Every permutation of the same params yields one key."""
    items = [("uf", "SP"), ("busca", "santo"), ("limite", 10), ("extra", None)]
    keys = {cache_key("municipios", dict(p)) for p in itertools.permutations(items)}
    assert keys == {"municipios?busca=santo&limite=10&uf=SP"}


def test_value_rendering() -> None:
    key = cache_key("b", {"flag": True, "off": False, "n": 2.0, "x": 1.5, "i": 3})
    assert key == "b?flag=true&i=3&n=2&off=false&x=1.5"


def test_case_insensitive_ordering() -> None:
    assert cache_key("b", {"b": 1, "A": 2, "a": 3}) == "b?a=3&A=2&b=1"


def test_accented_keys_sort_with_their_base_letter() -> None:
    assert cache_key("b", {"b": 1, "A": 2, "a": 3, "é": 4, "f": 5}) == "b?a=3&A=2&b=1&é=4&f=5"
    assert cache_key("b", {"é": 1, "f": 3, "e": 2}) == "b?e=2&é=1&f=3"

"""Tests for input validation helpers."""

import pytest

from ibge_mcp.tools.validation import (
    is_valid_date_format,
    is_valid_ibge_code,
    is_valid_period,
    is_valid_territorial_level,
    normalize_uf,
    parse_localidades,
)


@pytest.mark.parametrize("code,expected", [
    ("3", True), ("9", False),
    ("35", True), ("99", False),
    ("3550308", True), ("9950308", False),
    ("355030805", True),
    ("1234", False), ("", False),
])
def test_ibge_code(code: str, expected: bool) -> None:
    assert is_valid_ibge_code(code) is expected


def test_normalize_uf() -> None:
    assert normalize_uf("sp") == 35
    assert normalize_uf("35") == 35
    assert normalize_uf("XX") is None
    assert normalize_uf("99") is None


@pytest.mark.parametrize("value,expected", [
    ("01-31-2024", True), ("13-01-2024", False), ("2024-01-31", False), ("01-01-1900", False),
])
def test_date_format(value: str, expected: bool) -> None:
    assert is_valid_date_format(value) is expected


@pytest.mark.parametrize("period,expected", [
    ("last", True), ("ALL", True), ("last 5", True),
    ("2022", True), ("1800", False),
    ("2010-2022", True), ("2022-2010", False),
    ("202312", True), ("202313", False),
    ("2020,2021,2022", True), ("2020,abc", False),
    ("ontem", False),
])
def test_period(period: str, expected: bool) -> None:
    assert is_valid_period(period) is expected


def test_territorial_level() -> None:
    assert is_valid_territorial_level("1")
    assert is_valid_territorial_level("6")
    assert not is_valid_territorial_level("4")
    assert not is_valid_territorial_level("N6")


def test_parse_localidades() -> None:
    assert parse_localidades("all").valid == ["all"]
    parsed = parse_localidades("35, 3550308, 99, abc")
    assert parsed.valid == ["35", "3550308"]
    assert parsed.invalid == ["99", "abc"]

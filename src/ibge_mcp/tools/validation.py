"""Input checks for IBGE codes, dates and SIDRA query fragments."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Final

from ibge_mcp.foundation.config import constants

MIN_YEAR: Final = 1970
MAX_YEAR: Final = 2100

VALID_TERRITORIAL_LEVELS: Final[frozenset[str]] = frozenset(constants.TERRITORIAL_LEVEL_NAMES)

_DATE_RE = re.compile(r"^\d{2}-\d{2}-\d{4}$")
_LAST_N_RE = re.compile(r"^last\s+\d+$", re.IGNORECASE)


def _year_ok(year: int) -> bool:
    return MIN_YEAR <= year <= MAX_YEAR


def is_valid_ibge_code(code: str) -> bool:
    """Region (1 digit), state (2), municipality (7) or district (9)."""
    digits = re.sub(r"\D", "", code)
    match len(digits):
        case 1:
            return int(digits) in constants.REGION_NAMES
        case 2:
            return int(digits) in constants.UF_SIGLAS
        case 7 | 9:
            return int(digits[:2]) in constants.UF_SIGLAS
        case _:
            return False


def normalize_uf(value: str) -> int | None:
    """State code from an abbreviation ("SP") or a numeric code ("35")."""
    if (code := constants.uf_code(value)) is not None:
        return code
    try:
        code = int(value.strip())
    except ValueError:
        return None
    return code if code in constants.UF_SIGLAS else None


def is_valid_date_format(value: str) -> bool:
    """MM-DD-YYYY, as the news API expects."""
    if not _DATE_RE.match(value):
        return False
    month, day, year = (int(part) for part in value.split("-"))
    return 1 <= month <= 12 and 1 <= day <= 31 and _year_ok(year)


def is_valid_period(period: str) -> bool:
    """SIDRA period: last/all/first, "last N", YYYY, YYYY-YYYY, YYYYMM, or a comma list of those."""
    period = period.strip()
    if period.lower() in ("last", "all", "first"):
        return True
    if _LAST_N_RE.match(period):
        return True
    if re.fullmatch(r"\d{4}", period):
        return _year_ok(int(period))
    if re.fullmatch(r"\d{4}-\d{4}", period):
        start, end = (int(p) for p in period.split("-"))
        return start >= MIN_YEAR and end <= MAX_YEAR and start <= end
    if re.fullmatch(r"\d{6}", period):
        return _year_ok(int(period[:4])) and 1 <= int(period[4:]) <= 12
    if "," in period:
        return all(is_valid_period(p) for p in period.split(","))
    return False


def is_valid_territorial_level(level: str) -> bool:
    return level in VALID_TERRITORIAL_LEVELS


@dataclass(frozen=True, slots=True)
class ParsedLocalidades:
    valid: list[str] = field(default_factory=list)
    invalid: list[str] = field(default_factory=list)


def parse_localidades(value: str) -> ParsedLocalidades:
    """Split a comma list of codes into valid and invalid ones; "all" passes through."""
    if value.strip().lower() == "all":
        return ParsedLocalidades(valid=["all"])
    parsed = ParsedLocalidades()
    for code in (c.strip() for c in value.split(",")):
        (parsed.valid if is_valid_ibge_code(code) else parsed.invalid).append(code)
    return parsed

"""Endpoints, geographic codes and SIDRA reference tables."""

from __future__ import annotations

from typing import Final

# ═══════════════════════════════════════════════════════════════════════════════
# API Endpoints
# ═══════════════════════════════════════════════════════════════════════════════

_SERVICODADOS = "https://servicodados.ibge.gov.br/api"

LOCALIDADES: Final = f"{_SERVICODADOS}/v1/localidades"
NOMES: Final = f"{_SERVICODADOS}/v2/censos/nomes"
AGREGADOS: Final = f"{_SERVICODADOS}/v3/agregados"
MALHAS: Final = f"{_SERVICODADOS}/v3/malhas"
NOTICIAS: Final = f"{_SERVICODADOS}/v3/noticias"
POPULACAO: Final = f"{_SERVICODADOS}/v1/projecoes/populacao"
SIDRA: Final = "https://apisidra.ibge.gov.br/values"

# ═══════════════════════════════════════════════════════════════════════════════
# Geographic Codes
# ═══════════════════════════════════════════════════════════════════════════════

UF_CODES: Final[dict[str, int]] = {
    # Norte
    "RO": 11, "AC": 12, "AM": 13, "RR": 14, "PA": 15, "AP": 16, "TO": 17,
    # Nordeste
    "MA": 21, "PI": 22, "CE": 23, "RN": 24, "PB": 25, "PE": 26, "AL": 27, "SE": 28, "BA": 29,
    # Sudeste
    "MG": 31, "ES": 32, "RJ": 33, "SP": 35,
    # Sul
    "PR": 41, "SC": 42, "RS": 43,
    # Centro-Oeste
    "MS": 50, "MT": 51, "GO": 52, "DF": 53,
}

UF_SIGLAS: Final[dict[int, str]] = {code: sigla for sigla, code in UF_CODES.items()}

UF_NAMES: Final[dict[str, str]] = {
    "AC": "Acre", "AL": "Alagoas", "AM": "Amazonas", "AP": "Amapá", "BA": "Bahia",
    "CE": "Ceará", "DF": "Distrito Federal", "ES": "Espírito Santo", "GO": "Goiás",
    "MA": "Maranhão", "MG": "Minas Gerais", "MS": "Mato Grosso do Sul", "MT": "Mato Grosso",
    "PA": "Pará", "PB": "Paraíba", "PE": "Pernambuco", "PI": "Piauí", "PR": "Paraná",
    "RJ": "Rio de Janeiro", "RN": "Rio Grande do Norte", "RO": "Rondônia", "RR": "Roraima",
    "RS": "Rio Grande do Sul", "SC": "Santa Catarina", "SE": "Sergipe", "SP": "São Paulo",
    "TO": "Tocantins",
}

REGION_CODES: Final[dict[str, int]] = {"N": 1, "NE": 2, "SE": 3, "S": 4, "CO": 5}

REGION_NAMES: Final[dict[int, str]] = {
    1: "Norte", 2: "Nordeste", 3: "Sudeste", 4: "Sul", 5: "Centro-Oeste",
}

# ═══════════════════════════════════════════════════════════════════════════════
# SIDRA
# ═══════════════════════════════════════════════════════════════════════════════

TERRITORIAL_LEVEL_NAMES: Final[dict[str, str]] = {
    "1": "Brasil",
    "2": "Grande Região",
    "3": "Unidade da Federação",
    "6": "Município",
    "7": "Região Metropolitana",
    "8": "Mesorregião",
    "9": "Microrregião",
    "10": "Distrito",
    "11": "Subdistrito",
    "13": "Região Metropolitana/RIDE",
    "14": "RIDE",
    "15": "Aglomeração Urbana",
    "17": "Região Geográfica Imediata",
    "18": "Região Geográfica Intermediária",
    "105": "Macrorregião de Saúde",
    "106": "Região de Saúde",
    "114": "Aglomerado Subnormal",
    "127": "Amazônia Legal",
    "128": "Semiárido",
}

COMMON_SIDRA_TABLES: Final[dict[str, str]] = {
    "6579": "Estimativas de população",
    "9514": "População residente (Censo 2022)",
    "200": "População residente (Censos 1970-2010)",
    "1705": "Área territorial",
    "1712": "Densidade demográfica",
    "4714": "PNAD Contínua - Taxa de desocupação",
    "6381": "PNAD Contínua - Rendimento médio",
    "6706": "PIB a preços correntes",
    "5938": "Produto Interno Bruto per capita",
}


def uf_code(sigla: str) -> int | None:
    """IBGE code for a state abbreviation (case-insensitive)."""
    return UF_CODES.get(sigla.strip().upper())

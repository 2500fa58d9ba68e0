"""Parsers for values encoded inside part numbers.

Each parser takes the raw code captured from an MPN and returns a comparable
value, or None if the code is unparseable. Parsers never raise.
"""

import re
from typing import Any, Callable


# =============================================================================
# PRE-COMPILED REGEX PATTERNS
# =============================================================================

_VERSION_PATTERN = re.compile(r"(\d+(?:[._]\d+)*)")
_EIA_CODE_PATTERN = re.compile(r"^(\d)(\d)(\d)$")
_R_NOTATION_PATTERN = re.compile(r"^(\d*)R(\d*)$", re.IGNORECASE)
_VOLTAGE_V_NOTATION_PATTERN = re.compile(r"^(\d+)V(\d*)$", re.IGNORECASE)
_NUMBER_PATTERN = re.compile(r"(\d+(?:\.\d+)?)")


# =============================================================================
# PARSERS
# =============================================================================


def parse_version(s: str) -> tuple[int, int, int] | None:
    """Parse a dotted version: '5.3' -> (5, 3, 0), 'BT5' -> (5, 0, 0).

    Components are zero-padded to three so that '5' and '5.0' compare equal.
    """
    if not s:
        return None
    match = _VERSION_PATTERN.search(s)
    if not match:
        return None
    parts = [int(p) for p in re.split(r"[._]", match.group(1))][:3]
    while len(parts) < 3:
        parts.append(0)
    return (parts[0], parts[1], parts[2])


def parse_number(s: str) -> float | None:
    """Parse the first plain number: '128' -> 128.0, 'x2.5' -> 2.5"""
    if not s:
        return None
    match = _NUMBER_PATTERN.search(s)
    return float(match.group(1)) if match else None


def parse_eia_capacitance(s: str) -> float | None:
    """Parse an EIA capacitance code in farads.

    '104' -> 100nF (1e-7), '106' -> 10uF, '1R5' -> 1.5pF, 'R47' -> 0.47pF
    """
    if not s:
        return None
    s = s.strip().upper()
    match = _EIA_CODE_PATTERN.match(s)
    if match:
        significand = int(match.group(1) + match.group(2))
        exponent = int(match.group(3))
        if exponent > 9:
            return None
        return significand * (10 ** exponent) * 1e-12
    match = _R_NOTATION_PATTERN.match(s)
    if match and (match.group(1) or match.group(2)):
        return float(f"{match.group(1) or '0'}.{match.group(2) or '0'}") * 1e-12
    return None


def parse_eia_resistance(s: str) -> float | None:
    """Parse an EIA resistance code in ohms: '103' -> 10000, '4R7' -> 4.7"""
    if not s:
        return None
    s = s.strip().upper()
    match = _EIA_CODE_PATTERN.match(s)
    if match:
        return float(int(match.group(1) + match.group(2)) * (10 ** int(match.group(3))))
    match = _R_NOTATION_PATTERN.match(s)
    if match and (match.group(1) or match.group(2)):
        return float(f"{match.group(1) or '0'}.{match.group(2) or '0'}")
    return None


def parse_voltage_code(s: str) -> float | None:
    """Parse a voltage encoded in an MPN.

    '3V3' -> 3.3, '5V' -> 5.0, '1.8' -> 1.8, '05' -> 5.0, '12' -> 12.0
    """
    if not s:
        return None
    s = s.strip()
    match = _VOLTAGE_V_NOTATION_PATTERN.match(s)
    if match:
        return float(f"{match.group(1)}.{match.group(2) or '0'}")
    return parse_number(s)


def parse_flash_density(s: str) -> float | None:
    """Parse a serial flash density code in Mbit.

    '16' -> 16, '128' -> 128, '01' -> 1024 (1Gbit), '02' -> 2048.
    Legacy two-digit codes ending in zero carry a trailing zero:
    '80' -> 8, '40' -> 4.
    """
    if not s or not s.isdigit():
        return None
    if len(s) == 2 and s.startswith("0"):
        return float(int(s) * 1024)
    if len(s) == 2 and s.endswith("0"):
        return float(int(s) // 10)
    return float(int(s))


# =============================================================================
# PARSER LOOKUP
# =============================================================================
# Rule tables refer to parsers by name so they can be loaded from JSON.

VALUE_PARSERS: dict[str, Callable[[str], Any]] = {
    "version": parse_version,
    "number": parse_number,
    "eia_capacitance": parse_eia_capacitance,
    "eia_resistance": parse_eia_resistance,
    "voltage": parse_voltage_code,
    "flash_density": parse_flash_density,
    "text": lambda s: s.strip().upper() if s else None,
}


def get_parser(name: str) -> Callable[[str], Any]:
    """Resolve a parser by name.

    Raises:
        KeyError: unknown parser name.
    """
    return VALUE_PARSERS[name]

"""Package code resolution and mounting type detection.

Manufacturers encode the package as a suffix on the part number
("LM358N" -> DIP, "ATMEGA328P-AU" -> TQFP). The shared STANDARD_PACKAGE_CODES
table covers the suffixes most vendors agree on; providers layer their own
tables on top.
"""

from typing import Mapping


# Shared suffix code -> normalized package name
STANDARD_PACKAGE_CODES: dict[str, str] = {
    # DIP
    "N": "DIP",
    "P": "DIP",
    "PU": "PDIP",
    # Atmel/Microchip style
    "AU": "TQFP",
    "MU": "QFN",
    "SU": "SOIC",
    "XU": "TSSOP",
    "CU": "WLCSP",
    # SOIC
    "D": "SOIC",
    "DR": "SOIC",
    "M": "SOIC",
    "DW": "SOIC-Wide",
    # TSSOP / MSOP
    "PW": "TSSOP",
    "PWR": "TSSOP",
    "DT": "TSSOP",
    "PT": "TSSOP",
    "DGK": "MSOP",
    # SOT
    "DBV": "SOT-23",
    "DBVR": "SOT-23",
    "MP": "SOT-223",
    "DCY": "SOT-223",
    "DRL": "SOT-553",
    "DRV": "SON",
    # TO
    "T": "TO-220",
    "CT": "TO-220",
    "TA": "TO-220F",
    "FP": "TO-220F",
    "K": "TO-3",
    "H": "TO-39",
    "KC": "TO-252",
    "KV": "TO-252",
    "TU": "TO-251",
    "S": "D2PAK",
    "L": "DPAK",
    # Diodes
    "RL": "DO-41",
    # Generic
    "SMD": "SMD",
    "THT": "THT",
}

# Checked before SMD_PATTERNS
THROUGH_HOLE_PATTERNS = frozenset({
    "DIP", "PDIP", "SIP",
    "TO-92", "TO-126", "TO-220", "TO-247", "TO-3", "TO-39", "TO-251",
    "DO-41", "DO-35", "DO-201",
    "THT", "AXIAL", "RADIAL", "HC-49",
})

SMD_PATTERNS = frozenset({
    "0201", "0402", "0603", "0805", "1206", "1210", "1812", "2010", "2512", "01005",
    "SOT", "SOD", "SOP", "SOIC", "SSOP", "TSSOP", "MSOP",
    "QFP", "TQFP", "LQFP", "QFN", "DFN", "SON", "WSON", "USON",
    "BGA", "CSP", "WLCSP", "LGA", "PLCC",
    "TO-252", "TO-263", "DPAK", "D2PAK",
    "DO-214", "SMA", "SMB", "SMC", "MELF", "SMD",
})


def suffix_after_hyphen(mpn: str) -> str:
    """'ATMEGA328P-AU' -> 'AU'; '' if there is no non-empty tail."""
    head, sep, tail = mpn.rpartition("-")
    if sep and head and tail:
        return tail
    return ""


def trailing_letters(mpn: str) -> str:
    """Letters after the last digit: 'LM7805CT' -> 'CT', 'LM358N' -> 'N'."""
    for i in range(len(mpn) - 1, -1, -1):
        if mpn[i].isdigit():
            return mpn[i + 1:] if i < len(mpn) - 1 else ""
    return ""


def resolve_package_code(
    mpn: str | None,
    codes: Mapping[str, str] | None = None,
    use_standard: bool = True,
) -> str:
    """Resolve the package suffix of an MPN to a normalized package name.

    Order: hyphen suffix, then trailing letters after the last digit. Each
    suffix is looked up in ``codes`` first, then in the shared table.
    Reel/tape markers ("/TR", "#PBF") are stripped before lookup.

    Args:
        mpn: Part number (any case).
        codes: Provider-specific suffix table.
        use_standard: Whether to fall back to STANDARD_PACKAGE_CODES.

    Returns:
        Normalized package name, or "" if nothing is recognized.
    """
    if not mpn:
        return ""
    upper = mpn.strip().upper().split("/")[0].split("#")[0]
    tables: list[Mapping[str, str]] = []
    if codes:
        tables.append({k.upper(): v for k, v in codes.items()})
    if use_standard:
        tables.append(STANDARD_PACKAGE_CODES)

    for suffix in (suffix_after_hyphen(upper), trailing_letters(upper)):
        if not suffix:
            continue
        for table in tables:
            if suffix in table:
                return table[suffix]
    return ""


def detect_mounting_type(package: str | None) -> str:
    """Determine mounting type from a normalized package name.

    Returns:
        "smd", "through_hole", or "not_sure" if the package is empty or unknown.
    """
    if not package:
        return "not_sure"
    pkg_upper = package.upper()

    # D2PAK/TO-252/TO-263 are surface-mount members of the TO family
    for pattern in ("TO-252", "TO-263", "DPAK", "D2PAK"):
        if pattern in pkg_upper:
            return "smd"
    for pattern in THROUGH_HOLE_PATTERNS:
        if pattern in pkg_upper:
            return "through_hole"
    for pattern in SMD_PATTERNS:
        if pattern in pkg_upper:
            return "smd"
    return "not_sure"

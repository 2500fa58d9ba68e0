"""Murata MLCCs and chip inductors.

GRM188R71H104KA93D decodes as: GRM (general purpose MLCC) 18 (0603)
8 (0.8mm thick) R7 (X7R) 1H (50V) 104 (100nF) K (+/-10%) A93D (packaging).
"""

# Two-digit case code -> EIA inch size
_CASE_SIZES = {
    "02": "01005",
    "03": "0201",
    "15": "0402",
    "18": "0603",
    "21": "0805",
    "31": "1206",
    "32": "1210",
    "43": "1812",
    "55": "2220",
}

# Rated voltage code -> volts
_VOLTAGE_CODES = {
    "0E": 2.5, "0G": 4, "0J": 6.3, "1A": 10, "1C": 16, "1E": 25,
    "YA": 35, "1V": 35, "1H": 50, "2A": 100, "2D": 200, "2E": 250, "2J": 630,
}

# Temperature characteristic code -> EIA dielectric
_DIELECTRIC_CODES = {
    "5C": "C0G",
    "R6": "X5R",
    "R7": "X7R",
    "C7": "X7S",
    "D7": "X7T",
    "C8": "X6S",
    "E7": "X7U",
    "F5": "Y5V",
}

# Tighter tolerance ranks higher
_TOLERANCE_GRADES = {"Z": 0, "M": 1, "K": 2, "J": 3, "G": 4, "F": 5, "D": 6, "C": 7, "B": 8}

_MLCC_BODY = r"^G[RC]M[0-9]{2}[0-9A-Z]"

MURATA_RULES = {
    "owner": "murata",
    "name": "Murata Manufacturing",
    "patterns": [
        ("CAPACITOR_CERAMIC_MURATA", r"^GRM[0-9][0-9A-Z]{2}[A-Z0-9]*"),
        ("CAPACITOR_CERAMIC_MURATA", r"^GCM[0-9][0-9A-Z]{2}[A-Z0-9]*"),  # Automotive
        ("CAPACITOR_CERAMIC_MURATA", r"^KC[ABMZ][0-9][0-9A-Z]{2}[A-Z0-9]*"),  # High voltage
        ("INDUCTOR", r"^LQ[MGWH][0-9]{2}[A-Z0-9]*"),
        ("INDUCTOR", r"^DFE[0-9]{6}[A-Z0-9-]*"),
    ],
    "series": [r"^(GRM|GCM|KC[ABMZ]|LQ[MGWH]|DFE)"],
    # Automotive grade is qualified to everything the commercial grade is
    "families": [
        {"name": "mlcc", "pattern": r"G[RC]M", "ranks": {"GRM": 1, "GCM": 2}},
    ],
    "package_rules": [
        {"pattern": r"^G[RC]M([0-9]{2})", "codes": _CASE_SIZES},
        {"pattern": r"^LQ[MGWH]([0-9]{2})", "codes": {"15": "0402", "18": "0603", "21": "0805", "31": "1206"}},
    ],
    "use_standard_packages": False,
    "match_package": True,
    "capabilities": [
        {"name": "dielectric", "kind": "set", "pattern": _MLCC_BODY + r"([0-9A-Z]{2})", "codes": _DIELECTRIC_CODES},
        {"name": "voltage_rating", "kind": "numeric_range", "pattern": _MLCC_BODY + r"[0-9A-Z]{2}([0-9Y][A-Z])", "codes": _VOLTAGE_CODES},
        {
            "name": "capacitance",
            "kind": "numeric_range",
            "pattern": _MLCC_BODY + r"[0-9A-Z]{2}[0-9Y][A-Z]([0-9]{3}|[0-9]?R[0-9]+)",
            "parser": "eia_capacitance",
            "exact": True,
        },
        {
            "name": "tolerance_grade",
            "kind": "ordinal",
            "pattern": _MLCC_BODY + r"[0-9A-Z]{2}[0-9Y][A-Z](?:[0-9]{3}|[0-9]?R[0-9]+)([A-Z])",
            "codes": _TOLERANCE_GRADES,
        },
    ],
}

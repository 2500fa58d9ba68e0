"""Generic rules for parts no manufacturer rule set claims.

Only consulted when the caller enables the fallback provider. The patterns
are reference-designator style prefixes and JEDEC numbering, so they would
produce false matches if allowed to compete with manufacturer rules.
"""

GENERIC_RULES = {
    "owner": "generic",
    "name": "Generic / unknown manufacturer",
    "priority": -100,
    "patterns": [
        ("RESISTOR", r"^R[0-9].*"),
        ("CAPACITOR", r"^C[0-9].*"),
        ("INDUCTOR", r"^L[0-9].*"),
        ("DIODE", r"^1N[0-9].*"),
        ("DIODE", r"^D[0-9].*"),
        ("TRANSISTOR", r"^2N[0-9].*"),
        ("TRANSISTOR", r"^B[CD][0-9].*"),
        ("TRANSISTOR", r"^Q[0-9].*"),
        ("LOGIC_IC", r"^74[0-9].*"),
        ("LOGIC_IC", r"^CD4[0-9].*"),
        ("IC", r"^IC[0-9].*"),
        ("IC", r"^U[0-9].*"),
        ("CRYSTAL", r"^[XY][0-9].*"),
        ("OSCILLATOR", r"^OSC.*"),
        ("LED", r"^LED.*"),
        ("LED", r"^LD[0-9].*"),
    ],
    "series": [
        {"pattern": r"^74", "template": "74-SERIES"},
        {"pattern": r"^CD4", "template": "CD4000"},
        {"pattern": r"^1N", "template": "1N-DIODE"},
        {"pattern": r"^2N", "template": "2N-TRANSISTOR"},
        {"pattern": r"^BC", "template": "BC-TRANSISTOR"},
        {"pattern": r"^BD", "template": "BD-TRANSISTOR"},
    ],
    "package_rules": [
        {"pattern": r"-(0402|0603|0805|1206|1210|2010|2512)$"},
        {"pattern": r"-(TO92|TO220|TO247|DIP[0-9]+|SOP[0-9]+|SOIC[0-9]+)$"},
        {"pattern": r"(SMD|DIP|SOIC|QFP|QFN|BGA|SOT23|TO220|TO247)$"},
    ],
    "use_standard_packages": False,
}

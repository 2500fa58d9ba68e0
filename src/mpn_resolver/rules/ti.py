"""Texas Instruments op-amps, regulators, logic, motor drivers and sensors."""

_REGULATOR_78XX = r"(?:LM|UA|MC)?78(?:M)?[0-9]{2}"
_REGULATOR_79XX = r"(?:LM|UA|MC)?79(?:M)?[0-9]{2}"
_POWER_PACKAGES = "TO-220/TO-252/SOT-223"

TI_RULES = {
    "owner": "ti",
    "name": "Texas Instruments",
    # Pattern order is precedence: LM358 must be tried before the LM35 sensor
    "patterns": [
        ("OPAMP_TI", r"^LM358.*"),
        ("OPAMP_TI", r"^LM324.*"),
        ("OPAMP_TI", r"^TL07[124].*"),
        ("OPAMP_TI", r"^OPA[0-9]+.*"),
        ("VOLTAGE_REGULATOR_LINEAR_TI", r"^LM317.*"),
        ("VOLTAGE_REGULATOR_LINEAR_TI", rf"^{_REGULATOR_78XX}.*"),
        ("VOLTAGE_REGULATOR_LINEAR_TI", rf"^{_REGULATOR_79XX}.*"),
        ("VOLTAGE_REGULATOR_LINEAR_TI", r"^(?:LM|TLV)1117.*"),
        ("VOLTAGE_REGULATOR_SWITCHING", r"^TPS5[0-9]{3}.*"),
        ("VOLTAGE_REGULATOR_SWITCHING", r"^LM2596.*"),
        ("TEMPERATURE_SENSOR_TI", r"^LM35.*"),
        ("TEMPERATURE_SENSOR_TI", r"^TMP[0-9]+.*"),
        ("MOTOR_DRIVER_TI", r"^DRV8[0-9]{3}.*"),
        ("LOGIC_IC", r"^(?:SN)?74[A-Z]*[0-9]+.*"),
        ("LOGIC_IC", r"^CD4[0-9]{3}.*"),
    ],
    # The regulator and logic patterns overlap other vendors' generic
    # prefixes, so they are decided before the scoped lookup
    "fast_paths": [
        (rf"^{_REGULATOR_78XX}.*", "VOLTAGE_REGULATOR_LINEAR_TI"),
        (r"^(?:SN)?74(?:HC|HCT|LS|AHC|AHCT|LVC|ALS|F|ABT|AC|ACT)?[0-9]+.*", "LOGIC_IC"),
    ],
    "series": [
        {"pattern": r"^(?:LM|UA|MC)?78M?[0-9]{2}", "template": "78XX"},
        {"pattern": r"^(?:LM|UA|MC)?79M?[0-9]{2}", "template": "79XX"},
        r"^(?:SN)?(74[A-Z]*[0-9]+)",
        r"^(LM317|LM358|LM324|LM2596|LM35|TL07[124]|(?:LM|TLV)1117)",
        r"^(OPA[0-9]+|TPS5[0-9]{3}|TMP[0-9]+|DRV8[0-9]{3}|CD4[0-9]{3})",
    ],
    "families": [
        # TL071/TL072/TL074: single, dual, quad
        {"name": "tl07x", "pattern": r"TL07[124]"},
    ],
    "package_rules": [
        # Grade and temperature letters sit between the part number and the package code
        {
            "pattern": r"^(?:LM358|LM324|TL07[124])[AB]?[CI]?([A-Z]+)",
            "codes": {
                "D": "SOIC", "DR": "SOIC", "N": "DIP", "P": "DIP",
                "DGK": "MSOP", "DGKR": "MSOP", "PW": "TSSOP", "PWR": "TSSOP",
            },
        },
        {
            "pattern": r"^(?:LM|TLV)1117I?(MPX?|DTX?|SX?|T)-",
            "codes": {
                "MP": "SOT-223", "MPX": "SOT-223", "DT": "TO-252", "DTX": "TO-252",
                "S": "D2PAK", "SX": "D2PAK", "T": "TO-220",
            },
        },
    ],
    "package_codes": {
        "DGKR": "MSOP",
        "KCS": "TO-220",
        "CKCS": "TO-220",
        "KCT": "TO-220",
        "KTT": "D2PAK",
        "KTTR": "D2PAK",
        "DCYR": "SOT-223",
        "NSR": "SO",
        "DRVR": "SON",
        "LP": "TO-92",
        "LPR": "TO-92",
        "PWPR": "HTSSOP",
        "DDA": "HSOIC",
        "DDAR": "HSOIC",
    },
    "match_package": True,
    # Footprints that drop into the same board position
    "package_classes": [
        {"pattern": r"^(?:LM358|LM324|TL07[124]|OPA)", "classes": {"DIP": "DIP/SOIC", "SOIC": "DIP/SOIC"}},
        {
            "pattern": rf"^(?:LM317|{_REGULATOR_78XX}|{_REGULATOR_79XX}|(?:LM|TLV)1117)",
            "classes": {"TO-220": _POWER_PACKAGES, "TO-252": _POWER_PACKAGES, "SOT-223": _POWER_PACKAGES},
        },
    ],
    "capabilities": [
        {"name": "output_voltage", "kind": "numeric_range", "pattern": r"^(?:LM|UA|MC)?7[89]M?([0-9]{2})", "parser": "voltage", "exact": True},
        {"name": "output_voltage", "kind": "numeric_range", "pattern": r"^(?:LM|TLV)1117[A-Z]*-([0-9](?:\.[0-9]+|V[0-9]+)?)", "parser": "voltage", "exact": True},
        {"name": "adjustable", "kind": "set", "pattern": r"^LM317|^(?:LM|TLV)1117[A-Z]*-ADJ", "value": "ADJ"},
        {"name": "channels", "kind": "numeric_range", "pattern": r"^(LM358|LM324|TL07[124])", "codes": {"LM358": 2, "LM324": 4, "TL071": 1, "TL072": 2, "TL074": 4}, "exact": True},
        {"name": "precision", "kind": "set", "pattern": r"^(?:LM358|LM324|TL07[124])A", "value": "A-GRADE"},
    ],
    # ST's L78xx is the same die as the TI LM78xx at the same rail
    "cross_references": [
        (r"(?:LM|UA|MC)?7805.*", r"L7805.*"),
        (r"(?:LM|UA|MC)?7833.*", r"L7833.*"),
        (r"(?:LM|UA|MC)?7812.*", r"L7812.*"),
    ],
}

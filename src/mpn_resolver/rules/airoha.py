"""Airoha Technology Bluetooth audio SoCs (AB155x-AB158x)."""

AIROHA_RULES = {
    "owner": "airoha",
    "name": "Airoha Technology",
    "patterns": [
        ("BLUETOOTH_AUDIO_SOC", r"^AB155[0-9].*"),  # TWS earbuds
        ("BLUETOOTH_AUDIO_SOC", r"^AB156[0-9].*"),  # ANC earbuds
        ("BLUETOOTH_AUDIO_SOC", r"^AB157[0-9].*"),  # Premium audio
        ("BLUETOOTH_AUDIO_SOC", r"^AB158[0-9].*"),  # Ultra-low power
    ],
    "series": [r"^(AB15[5-8][0-9])"],
    # Product lines are separate families; a higher model replaces a lower one
    # only within its own line
    "families": [
        {"name": "AB155x", "pattern": r"AB155[0-9]"},
        {"name": "AB156x", "pattern": r"AB156[0-9]"},
        {"name": "AB157x", "pattern": r"AB157[0-9]"},
        {"name": "AB158x", "pattern": r"AB158[0-9]"},
    ],
    "package_rules": [
        {
            "pattern": r"^AB15[5-8][0-9].*?(WLCSP|FCBGA|QFN|BGA|CSP)",
            "codes": {
                "WLCSP": "Wafer Level CSP",
                "FCBGA": "Flip-Chip BGA",
                "QFN": "QFN",
                "BGA": "BGA",
                "CSP": "CSP",
            },
        },
    ],
    # Single-letter variant suffixes (A, M, E) are not package codes
    "use_standard_packages": False,
    "capabilities": [
        {"name": "bt_version", "kind": "ordinal", "pattern": r"BT([0-9](?:\.[0-9])?)", "parser": "version"},
        {"name": "bt_version", "kind": "ordinal", "pattern": r"^AB158", "value": "5.3", "parser": "version"},
        {"name": "bt_version", "kind": "ordinal", "pattern": r"^AB15[67]", "value": "5.2", "parser": "version"},
        {"name": "bt_version", "kind": "ordinal", "pattern": r"^AB155", "value": "5.0", "parser": "version"},
        {"name": "features", "kind": "set", "pattern": r"ANC|^AB156", "value": "ANC"},
        {"name": "features", "kind": "set", "pattern": r"HIFI|^AB157", "value": "HIFI"},
    ],
}

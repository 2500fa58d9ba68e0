"""STMicroelectronics STM32/STM8 microcontrollers and L78xx regulators.

STM32F103C8T6 decodes as: STM32 F1 03 (line) C (48 pins) 8 (64KB flash)
T (LQFP) 6 (-40..85C).
"""

_PIN_COUNTS = {
    "F": 20, "G": 28, "K": 32, "T": 36, "S": 44, "C": 48, "R": 64,
    "M": 80, "O": 90, "V": 100, "Q": 132, "Z": 144, "I": 176, "B": 208, "N": 216,
}

_FLASH_KB = {
    "4": 16, "6": 32, "8": 64, "B": 128, "C": 256, "D": 384,
    "E": 512, "F": 768, "G": 1024, "H": 1536, "I": 2048,
}

_STM32 = r"^STM32[A-Z][0-9]{3}"

ST_RULES = {
    "owner": "st",
    "name": "STMicroelectronics",
    "patterns": [
        ("MICROCONTROLLER_ST", r"^STM32[FGHLUWC][0-9][0-9A-Z]*"),
        ("MICROCONTROLLER_ST", r"^STM8[SLAT][0-9A-Z]*"),
        ("VOLTAGE_REGULATOR_LINEAR", r"^L78[0-9]{2}.*"),
        ("VOLTAGE_REGULATOR_LINEAR", r"^L79[0-9]{2}.*"),
        ("VOLTAGE_REGULATOR_LINEAR", r"^LD1117.*"),
        # Second source of the industry-standard dual op-amp
        ("OPAMP", r"^LM358.*"),
    ],
    "series": [
        r"^(STM32[A-Z][0-9]{3})",
        r"^(STM8[SLAT][0-9]{3})",
        {"pattern": r"^L78[0-9]{2}", "template": "L78XX"},
        {"pattern": r"^L79[0-9]{2}", "template": "L79XX"},
        r"^(LD1117|LM358)",
    ],
    # F101 < F102 < F103 < F105 < F107: each line adds peripherals
    "families": [
        {"name": "stm32f10x", "pattern": r"STM32F10[0-9]"},
    ],
    "package_rules": [
        {
            "pattern": _STM32 + r"[A-Z][0-9A-Z]([A-Z])[0-9]",
            "codes": {"T": "LQFP", "H": "BGA", "U": "UFQFPN", "Y": "WLCSP", "P": "TSSOP", "I": "UFBGA", "K": "UFBGA"},
        },
        # L7805CD2T: the "2" hides the package code from the suffix lookup
        {
            "pattern": r"^L7[89][0-9]{2}(CD2T|CDT|ABV|CV|CP)",
            "codes": {"CV": "TO-220", "CD2T": "D2PAK", "CDT": "DPAK", "ABV": "TO-220", "CP": "TO-220FP"},
        },
    ],
    "match_package": True,
    "capabilities": [
        {"name": "pin_count", "kind": "numeric_range", "pattern": _STM32 + r"([A-Z])", "codes": _PIN_COUNTS, "exact": True},
        {"name": "flash_kb", "kind": "numeric_range", "pattern": _STM32 + r"[A-Z]([0-9A-Z])", "codes": _FLASH_KB},
        # 6: -40..85C, 7: -40..105C, 3: -40..125C
        {"name": "temperature_grade", "kind": "ordinal", "pattern": _STM32 + r"[A-Z][0-9A-Z][A-Z]([0-9])", "codes": {"6": 1, "7": 2, "3": 3}},
        {"name": "output_voltage", "kind": "numeric_range", "pattern": r"^L7[89]([0-9]{2})", "parser": "voltage", "exact": True},
    ],
}

"""Winbond serial flash, NOR flash and EEPROM.

W25Q128JVSIQ decodes as: W25Q (quad SPI) 128 (Mbit) J (process) V (3V)
S (SOIC-8 208mil) I (industrial) Q (QE bit set).
"""

WINBOND_RULES = {
    "owner": "winbond",
    "name": "Winbond Electronics",
    "patterns": [
        ("MEMORY_FLASH_WINBOND", r"^W25[QNX][0-9]+.*"),  # SPI/QSPI flash
        ("MEMORY_FLASH_WINBOND", r"^W29[CNE][0-9]+.*"),  # Parallel NOR flash
        ("MEMORY_EEPROM", r"^W24[0-9]+.*"),
    ],
    "series": [r"^(W25[QNX]|W29[CNE]|W24)[0-9]"],
    # Quad SPI parts are command-compatible supersets of dual SPI parts
    "families": [
        {"name": "spi-flash", "pattern": r"W25[XQ]", "ranks": {"W25X": 1, "W25Q": 2}},
    ],
    "package_rules": [
        {
            "pattern": r"^W25[QNX][0-9]+[A-Z]{2}(SS|ST|S|F|P|E|X|Z|B|TB)[IJ]",
            "codes": {
                "SS": "SOIC-8",
                "ST": "VSOP-8",
                "S": "SOIC-8 208mil",
                "F": "SOIC-16",
                "P": "WSON-8",
                "E": "WSON-8 8x6",
                "X": "USON-8",
                "Z": "WSON-8 8x6",
                "B": "TFBGA-24",
                "TB": "TFBGA-24",
            },
        },
    ],
    # Legacy part numbers end in the bare package letter
    "package_codes": {"S": "SOIC", "SS": "SOIC", "F": "QFN", "W": "WSON", "U": "USON"},
    "use_standard_packages": False,
    "capabilities": [
        {"name": "density_mbit", "kind": "numeric_range", "pattern": r"^W25[QNX]([0-9]+)", "parser": "flash_density"},
        {
            "name": "supply_voltage",
            "kind": "numeric_range",
            "pattern": r"^W25[QNX][0-9]+[A-Z]([VWL])",
            "codes": {"V": 3.3, "W": 1.8, "L": 3.3},
            "exact": True,
        },
        {"name": "temperature_grade", "kind": "ordinal", "pattern": r"^W25[QNX][0-9]+[A-Z]{3,4}([IJ])", "codes": {"I": 1, "J": 2}},
    ],
}

"""Component type taxonomy.

Base categories describe what a part is (CAPACITOR, MEMORY, OPAMP...).
Refinements narrow a base category, usually to one manufacturer's product
line (CAPACITOR_CERAMIC_MURATA). Every refinement has exactly one parent and
walking the parents always ends at a single base type.
"""

from enum import Enum


class ComponentType(Enum):
    # Base types
    RESISTOR = "resistor"
    CAPACITOR = "capacitor"
    INDUCTOR = "inductor"
    DIODE = "diode"
    TRANSISTOR = "transistor"
    MOSFET = "mosfet"
    LED = "led"
    IC = "ic"
    MICROCONTROLLER = "microcontroller"
    OPAMP = "opamp"
    VOLTAGE_REGULATOR = "voltage_regulator"
    CRYSTAL = "crystal"
    OSCILLATOR = "oscillator"
    MEMORY = "memory"
    CONNECTOR = "connector"
    LOGIC_IC = "logic_ic"
    MOTOR_DRIVER = "motor_driver"
    TEMPERATURE_SENSOR = "temperature_sensor"
    GENERIC = "generic"

    # Generic refinements
    CAPACITOR_CERAMIC = "capacitor_ceramic"
    CAPACITOR_ELECTROLYTIC = "capacitor_electrolytic"
    MEMORY_FLASH = "memory_flash"
    MEMORY_EEPROM = "memory_eeprom"
    VOLTAGE_REGULATOR_LINEAR = "voltage_regulator_linear"
    VOLTAGE_REGULATOR_SWITCHING = "voltage_regulator_switching"
    BLUETOOTH_AUDIO_SOC = "bluetooth_audio_soc"

    # Manufacturer refinements
    CAPACITOR_CERAMIC_MURATA = "capacitor_ceramic_murata"
    MEMORY_FLASH_WINBOND = "memory_flash_winbond"
    MICROCONTROLLER_ST = "microcontroller_st"
    OPAMP_TI = "opamp_ti"
    VOLTAGE_REGULATOR_LINEAR_TI = "voltage_regulator_linear_ti"
    MOTOR_DRIVER_TI = "motor_driver_ti"
    TEMPERATURE_SENSOR_TI = "temperature_sensor_ti"

    @property
    def parent(self) -> "ComponentType | None":
        """Direct parent, or None for a base type."""
        return _PARENTS.get(self)

    @property
    def base_type(self) -> "ComponentType":
        current = self
        while current in _PARENTS:
            current = _PARENTS[current]
        return current

    @property
    def is_refinement(self) -> bool:
        return self in _PARENTS

    @property
    def specificity(self) -> int:
        """Depth below the base type (0 for base types)."""
        depth = 0
        current = self
        while current in _PARENTS:
            current = _PARENTS[current]
            depth += 1
        return depth

    def is_a(self, other: "ComponentType") -> bool:
        """True if this type is ``other`` or one of its refinements."""
        current: ComponentType | None = self
        while current is not None:
            if current is other:
                return True
            current = _PARENTS.get(current)
        return False

    def refinements(self) -> frozenset["ComponentType"]:
        """All types (at any depth) that refine this one."""
        return frozenset(t for t in ComponentType if t is not self and t.is_a(self))

    @classmethod
    def from_name(cls, name: str) -> "ComponentType":
        """Look up a type by member name or value, case-insensitively.

        Raises:
            ValueError: if no member matches.
        """
        key = (name or "").strip()
        try:
            return cls[key.upper()]
        except KeyError:
            pass
        try:
            return cls(key.lower())
        except ValueError:
            raise ValueError(f"Unknown component type: {name!r}") from None


_PARENTS: dict[ComponentType, ComponentType] = {
    ComponentType.CAPACITOR_CERAMIC: ComponentType.CAPACITOR,
    ComponentType.CAPACITOR_ELECTROLYTIC: ComponentType.CAPACITOR,
    ComponentType.MEMORY_FLASH: ComponentType.MEMORY,
    ComponentType.MEMORY_EEPROM: ComponentType.MEMORY,
    ComponentType.VOLTAGE_REGULATOR_LINEAR: ComponentType.VOLTAGE_REGULATOR,
    ComponentType.VOLTAGE_REGULATOR_SWITCHING: ComponentType.VOLTAGE_REGULATOR,
    ComponentType.BLUETOOTH_AUDIO_SOC: ComponentType.IC,
    ComponentType.CAPACITOR_CERAMIC_MURATA: ComponentType.CAPACITOR_CERAMIC,
    ComponentType.MEMORY_FLASH_WINBOND: ComponentType.MEMORY_FLASH,
    ComponentType.MICROCONTROLLER_ST: ComponentType.MICROCONTROLLER,
    ComponentType.OPAMP_TI: ComponentType.OPAMP,
    ComponentType.VOLTAGE_REGULATOR_LINEAR_TI: ComponentType.VOLTAGE_REGULATOR_LINEAR,
    ComponentType.MOTOR_DRIVER_TI: ComponentType.MOTOR_DRIVER,
    ComponentType.TEMPERATURE_SENSOR_TI: ComponentType.TEMPERATURE_SENSOR,
}

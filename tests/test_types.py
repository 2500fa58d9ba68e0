"""Tests for the component type taxonomy."""

import pytest

from mpn_resolver.types import ComponentType


class TestBaseType:
    """Every type resolves to exactly one base type."""

    @pytest.mark.parametrize("component_type", list(ComponentType))
    def test_base_type_is_not_a_refinement(self, component_type):
        assert not component_type.base_type.is_refinement

    @pytest.mark.parametrize("refined,base", [
        (ComponentType.CAPACITOR_CERAMIC_MURATA, ComponentType.CAPACITOR),
        (ComponentType.MEMORY_FLASH_WINBOND, ComponentType.MEMORY),
        (ComponentType.VOLTAGE_REGULATOR_LINEAR_TI, ComponentType.VOLTAGE_REGULATOR),
        (ComponentType.OPAMP_TI, ComponentType.OPAMP),
        (ComponentType.BLUETOOTH_AUDIO_SOC, ComponentType.IC),
        (ComponentType.RESISTOR, ComponentType.RESISTOR),
    ])
    def test_base_type(self, refined, base):
        assert refined.base_type is base

    def test_parent_chain(self):
        assert ComponentType.MEMORY_FLASH_WINBOND.parent is ComponentType.MEMORY_FLASH
        assert ComponentType.MEMORY_FLASH.parent is ComponentType.MEMORY
        assert ComponentType.MEMORY.parent is None


class TestSpecificity:
    """Depth below the base type."""

    def test_base_types_have_zero_specificity(self):
        assert ComponentType.IC.specificity == 0
        assert ComponentType.GENERIC.specificity == 0

    def test_refinement_depth(self):
        assert ComponentType.OPAMP_TI.specificity == 1
        assert ComponentType.CAPACITOR_CERAMIC.specificity == 1
        assert ComponentType.CAPACITOR_CERAMIC_MURATA.specificity == 2


class TestIsA:
    """is_a() covers self and every ancestor."""

    def test_refinement_is_a_base(self):
        assert ComponentType.CAPACITOR_CERAMIC_MURATA.is_a(ComponentType.CAPACITOR)
        assert ComponentType.CAPACITOR_CERAMIC_MURATA.is_a(ComponentType.CAPACITOR_CERAMIC)
        assert ComponentType.CAPACITOR_CERAMIC_MURATA.is_a(ComponentType.CAPACITOR_CERAMIC_MURATA)

    def test_base_is_not_a_refinement(self):
        assert not ComponentType.CAPACITOR.is_a(ComponentType.CAPACITOR_CERAMIC)

    def test_unrelated_types(self):
        assert not ComponentType.OPAMP_TI.is_a(ComponentType.IC)
        assert not ComponentType.MEMORY.is_a(ComponentType.CAPACITOR)

    def test_refinements(self):
        refinements = ComponentType.CAPACITOR.refinements()
        assert ComponentType.CAPACITOR_CERAMIC in refinements
        assert ComponentType.CAPACITOR_CERAMIC_MURATA in refinements
        assert ComponentType.CAPACITOR not in refinements
        assert ComponentType.RESISTOR.refinements() == frozenset()


class TestFromName:
    """Lookup by member name or value."""

    @pytest.mark.parametrize("name", ["OPAMP_TI", "opamp_ti", " Opamp_Ti "])
    def test_lookup(self, name):
        assert ComponentType.from_name(name) is ComponentType.OPAMP_TI

    @pytest.mark.parametrize("name", ["", "FLUX_CAPACITOR", None])
    def test_unknown_raises(self, name):
        with pytest.raises(ValueError):
            ComponentType.from_name(name)

"""Tests for building providers from declarative tables and JSON."""

import json

import pytest

from mpn_resolver.loader import (
    build_provider,
    default_providers,
    fallback_provider,
    load_rules,
    merge_providers,
)
from mpn_resolver.providers import TableProvider
from mpn_resolver.registry import RuleError
from mpn_resolver.types import ComponentType


MINIMAL = {"owner": "acme", "patterns": [["IC", r"^AX[0-9]+.*"]]}


class TestBuildProvider:
    """Tables are validated when loaded, never at query time."""

    def test_minimal(self):
        provider = build_provider(MINIMAL)
        assert isinstance(provider, TableProvider)
        assert provider.owner_id == "acme"
        assert provider.name == "acme"
        assert provider.priority == 0
        assert provider.supported_types() == frozenset({ComponentType.IC})

    def test_accepts_enum_members(self):
        provider = build_provider({"owner": "acme", "patterns": [(ComponentType.OPAMP, r"^AOP.*")]})
        assert provider.supported_types() == frozenset({ComponentType.OPAMP})

    @pytest.mark.parametrize("table,message", [
        ({"patterns": [["IC", "^A.*"]]}, "owner"),
        ({"owner": "acme"}, "at least one pattern"),
        ({"owner": "acme", "patterns": [["IC", "^A[.*"]]}, "Invalid matcher"),
        ({"owner": "acme", "patterns": [["WIDGET", "^A.*"]]}, "Unknown component type"),
        ({"owner": "acme", "patterns": [["IC"]]}, "2-element"),
        ({"owner": "acme", "patterns": "IC"}, "list of pairs"),
        ({**MINIMAL, "colour": "red"}, "unknown table keys"),
        ({**MINIMAL, "priority": "high"}, "priority"),
        ({**MINIMAL, "families": [{"name": "x"}]}, "pattern"),
        ({**MINIMAL, "families": [{"pattern": "X", "ranks": {"X": "one"}}]}, "ranks"),
        ({**MINIMAL, "package_codes": ["N"]}, "package_codes"),
        ({**MINIMAL, "series": [42]}, "series"),
        ({**MINIMAL, "series": "^AX"}, "series must be a list"),
        ({**MINIMAL, "families": {"pattern": "X"}}, "families must be a list"),
        ({**MINIMAL, "families": [{"pattern": "X", "ranks": [1]}]}, "ranks must be an object"),
        ({**MINIMAL, "package_rules": "^X"}, "package_rules must be a list"),
        ({**MINIMAL, "package_rules": [{"pattern": "^X", "codes": ["a"]}]}, "package rule codes must be an object"),
        ({**MINIMAL, "capabilities": {"name": "v"}}, "capabilities must be a list"),
        ({**MINIMAL, "package_classes": [{"pattern": "^X"}]}, "pattern and classes"),
        ({**MINIMAL, "package_classes": [{"pattern": "^X", "classes": ["DIP"]}]}, "package classes must be an object"),
        ({**MINIMAL, "package_classes": [{"pattern": "^X", "classes": {"DIP": 1}}]}, "class names"),
    ])
    def test_malformed_tables(self, table, message):
        with pytest.raises(RuleError, match=message):
            build_provider(table)

    def test_not_a_mapping(self):
        with pytest.raises(RuleError):
            build_provider(["acme"])

    @pytest.mark.parametrize("capability,message", [
        ({"name": "v", "kind": "fuzzy", "pattern": "V"}, "unknown kind"),
        ({"name": "v", "kind": "ordinal", "pattern": "V", "parser": "magic"}, "unknown parser"),
        ({"name": "v", "kind": "ordinal"}, "name and a pattern"),
        ({"name": "v", "kind": "set", "pattern": "V", "exact": True}, "exact"),
        ({"name": "v", "kind": "numeric_range", "pattern": "(V)", "codes": {"V": "high"}}, "non-numeric"),
        ({"name": "v", "kind": "ordinal", "pattern": "V", "weight": 2}, "unknown capability keys"),
        ({"name": "v", "kind": "ordinal", "pattern": "["}, "Invalid matcher"),
        ({"name": "v", "kind": "ordinal", "pattern": "(V)", "codes": ["V"]}, "codes must be an object"),
        ({"name": "v", "kind": "numeric_range", "pattern": "(V)"}, "yields text values"),
        ({"name": "v", "kind": "numeric_range", "pattern": "V", "value": "5.0", "parser": "version"}, "yields version values"),
    ])
    def test_malformed_capabilities(self, capability, message):
        with pytest.raises(RuleError, match=message):
            build_provider({**MINIMAL, "capabilities": [capability]})

    def test_capability_with_two_kinds(self):
        table = {**MINIMAL, "capabilities": [
            {"name": "v", "kind": "ordinal", "pattern": "A"},
            {"name": "v", "kind": "set", "pattern": "B", "value": "B"},
        ]}
        with pytest.raises(RuleError, match="two kinds"):
            build_provider(table)


class TestValueEncodings:
    """Rules sharing a name must yield values that compare with each other."""

    @pytest.mark.parametrize("second", [
        {"name": "v", "kind": "ordinal", "pattern": "^AQ", "value": 5},
        {"name": "v", "kind": "ordinal", "pattern": "^AQ", "value": "5.0", "parser": "text"},
        {"name": "v", "kind": "ordinal", "pattern": "^AQ([A-Z])", "codes": {"A": 1}},
        {"name": "v", "kind": "ordinal", "pattern": "^AQ", "value": [5, 0]},
    ])
    def test_mixed_encodings_rejected(self, second):
        table = {**MINIMAL, "capabilities": [
            {"name": "v", "kind": "ordinal", "pattern": r"-V([0-9.]+)", "parser": "version"},
            second,
        ]}
        with pytest.raises(RuleError, match="mixes value encodings"):
            build_provider(table)

    @pytest.mark.parametrize("second", [
        {"name": "v", "kind": "ordinal", "pattern": "^AQ", "value": "5.0", "parser": "version"},
        {"name": "v", "kind": "ordinal", "pattern": r"-R([0-9]+)", "parser": "version"},
    ])
    def test_same_encoding_accepted(self, second):
        table = {**MINIMAL, "capabilities": [
            {"name": "v", "kind": "ordinal", "pattern": r"-V([0-9.]+)", "parser": "version"},
            second,
        ]}
        assert len(build_provider(table).capability_rules) == 2

    @pytest.mark.parametrize("rules", [
        [
            {"name": "n", "kind": "numeric_range", "pattern": "^AQ([0-9]+)", "parser": "number"},
            {"name": "n", "kind": "numeric_range", "pattern": "^AQ", "value": 0},
            {"name": "n", "kind": "numeric_range", "pattern": "-(V)", "codes": {"V": 3.3}},
        ],
        [
            {"name": "g", "kind": "ordinal", "pattern": "-([IJ])", "codes": {"I": 1, "J": 2}},
            {"name": "g", "kind": "ordinal", "pattern": "-G([0-9])", "parser": "number"},
        ],
        [
            {"name": "f", "kind": "set", "pattern": "ANC", "value": "ANC"},
            {"name": "f", "kind": "set", "pattern": "-(H)", "codes": {"H": "HIFI"}},
        ],
    ])
    def test_numbers_mix_freely(self, rules):
        build_provider({**MINIMAL, "capabilities": rules})


class TestPackageClasses:
    """Interchangeable packages compare as one class."""

    TABLE = {
        "owner": "acme",
        "patterns": [["OPAMP", r"^AOP[0-9]+.*"], ["IC", r"^AIC[0-9]+.*"]],
        "match_package": True,
        "package_classes": [{"pattern": "^AOP", "classes": {"dip": "DIP/SOIC", "SOIC": "DIP/SOIC"}}],
    }

    @pytest.mark.parametrize("mpn,expected", [
        ("AOP1N", "DIP/SOIC"),
        ("AOP1D", "DIP/SOIC"),
        ("AOP1PW", "TSSOP"),
        ("AIC1N", "DIP"),
    ])
    def test_package_attribute(self, mpn, expected):
        provider = build_provider(self.TABLE)
        package = [a for a in provider.capabilities(mpn) if a.name == "package"]
        assert package[0].value == frozenset({expected})

    def test_extract_package_keeps_the_real_package(self):
        assert build_provider(self.TABLE).extract_package("AOP1N") == "DIP"


class TestLoadRules:
    """JSON rule documents."""

    def test_list_document(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps([MINIMAL, {"owner": "globex", "patterns": [["OPAMP", "^GOP.*"]]}]))
        providers = load_rules(path)
        assert [p.owner_id for p in providers] == ["acme", "globex"]

    def test_object_document(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"providers": [MINIMAL]}))
        assert load_rules(str(path))[0].owner_id == "acme"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("{not json")
        with pytest.raises(RuleError, match="Invalid JSON"):
            load_rules(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"owner": "acme"}))
        with pytest.raises(RuleError):
            load_rules(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_rules(tmp_path / "missing.json")


class TestBundledRules:
    """The bundled tables all load."""

    def test_default_providers(self):
        owners = [p.owner_id for p in default_providers()]
        assert owners == ["ti", "st", "murata", "winbond", "airoha"]

    def test_default_providers_are_fresh(self):
        assert default_providers()[0] is not default_providers()[0]

    def test_fallback_provider(self):
        provider = fallback_provider()
        assert provider.owner_id == "generic"
        assert provider.priority < 0


class TestMergeProviders:
    """Later tables override earlier ones with the same owner."""

    def test_override(self, caplog):
        base = [build_provider(MINIMAL), build_provider({"owner": "globex", "patterns": [["IC", "^G.*"]]})]
        override = build_provider({"owner": "acme", "patterns": [["OPAMP", "^AOP.*"]]})
        merged = merge_providers(base, [override])
        assert [p.owner_id for p in merged] == ["acme", "globex"]
        assert merged[0] is override
        assert "overridden" in caplog.text

    def test_no_overlap(self):
        merged = merge_providers([build_provider(MINIMAL)], [])
        assert len(merged) == 1

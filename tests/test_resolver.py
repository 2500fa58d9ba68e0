"""Tests for the compatibility resolver."""

import dataclasses

import pytest

from mpn_resolver.capabilities import AttributeKindMismatch, AttributeValueMismatch, feature_set, ordinal
from mpn_resolver.classifier import Classifier
from mpn_resolver.loader import build_provider
from mpn_resolver.resolver import CompatibilityResolver


# AQ<family><model>-V<version>[-ANC]: AQ12-V5-ANC is family 1, model 2,
# protocol version 5, with active noise cancelling
ACME = {
    "owner": "acme",
    "patterns": [["BLUETOOTH_AUDIO_SOC", r"^AQ[0-9]{2}.*"]],
    "series": [r"^(AQ[0-9]{2})"],
    "families": [
        {"name": "aq1x", "pattern": r"AQ1[0-9]"},
        {"name": "aq2x", "pattern": r"AQ2[0-9]"},
    ],
    "capabilities": [
        {"name": "version", "kind": "ordinal", "pattern": r"-V([0-9]+)", "parser": "number"},
        {"name": "features", "kind": "set", "pattern": r"-ANC", "value": "ANC"},
    ],
    "cross_references": [[r"AQ19.*", r"GQ19.*"]],
    "exclusions": [[r"AQ18.*", r"AQ19.*"]],
}

GLOBEX = {
    "owner": "globex",
    "patterns": [["BLUETOOTH_AUDIO_SOC", r"^GQ[0-9]{2}.*"]],
    "series": [r"^(GQ[0-9]{2})"],
    "capabilities": [
        {"name": "version", "kind": "ordinal", "pattern": r"-V([0-9]+)", "parser": "number"},
    ],
}


@pytest.fixture
def resolver():
    classifier = Classifier([build_provider(ACME), build_provider(GLOBEX)])
    return CompatibilityResolver(classifier)


class TestScenarios:
    """Canonical replacement scenarios."""

    def test_same_series_capability_upgrade(self, resolver):
        verdict = resolver.explain("AQ12-V5", "AQ12-V6")
        assert verdict.compatible
        assert verdict.reason == "compatible"
        assert verdict.checked == ["version", "features"]

    def test_missing_required_feature(self, resolver):
        verdict = resolver.explain("AQ12-V5-ANC", "AQ12-V5")
        assert not verdict.compatible
        assert verdict.reason == "attribute_failed"
        assert verdict.failed_attribute == "features"

    def test_different_owners(self, resolver):
        verdict = resolver.explain("AQ12-V5", "GQ12-V5")
        assert not verdict.compatible
        assert verdict.reason == "provider_mismatch"

    def test_empty_input(self, resolver):
        assert resolver.classifier.classify("") is None
        assert resolver.is_replacement("", "AQ12-V5") is False
        assert resolver.is_replacement("AQ12-V5", "") is False
        assert resolver.is_replacement(None, None) is False
        assert resolver.explain("  ", "AQ12").reason == "empty_input"

    def test_series_downgrade(self, resolver):
        verdict = resolver.explain("AQ13-V5", "AQ11-V5")
        assert not verdict.compatible
        assert verdict.reason == "series_downgrade"


class TestProperties:
    """Reflexivity, asymmetry, monotonicity and transitivity."""

    @pytest.mark.parametrize("mpn", ["AQ12-V5", "AQ12-V5-ANC", "GQ10", "AQ99"])
    def test_reflexive(self, resolver, mpn):
        assert resolver.is_replacement(mpn, mpn)

    def test_reflexive_ignores_case_and_whitespace(self, resolver):
        assert resolver.explain(" aq12-v5", "AQ12-V5 ").reason == "identical"

    def test_rank_monotonicity(self, resolver):
        assert resolver.is_replacement("AQ11-V5", "AQ13-V5")
        assert not resolver.is_replacement("AQ13-V5", "AQ11-V5")

    def test_not_symmetric(self, resolver):
        assert resolver.is_replacement("AQ12-V5", "AQ12-V6")
        assert not resolver.is_replacement("AQ12-V6", "AQ12-V5")

    def test_feature_superset_regardless_of_rank(self, resolver):
        assert not resolver.is_replacement("AQ11-V5-ANC", "AQ19-V9")
        assert resolver.is_replacement("AQ11-V5", "AQ19-V9-ANC")

    def test_transitive_within_family(self, resolver):
        a, b, c = "AQ11-V5", "AQ14-V6", "AQ17-V7"
        assert resolver.is_replacement(a, b)
        assert resolver.is_replacement(b, c)
        assert resolver.is_replacement(a, c)

    def test_unrelated_families(self, resolver):
        verdict = resolver.explain("AQ12-V5", "AQ22-V9")
        assert not verdict.compatible
        assert verdict.reason == "series_unrelated"

    def test_undeclared_attribute_fails_closed(self, resolver):
        verdict = resolver.explain("AQ12-V5", "AQ12")
        assert not verdict.compatible
        assert verdict.failed_attribute == "version"

    def test_required_without_attributes(self, resolver):
        # AQ12 exposes only the (empty) feature set
        assert resolver.is_replacement("AQ12", "AQ12-V1")


class TestOverrides:
    """The required part's provider may decide outright."""

    def test_cross_reference_across_providers(self, resolver):
        verdict = resolver.explain("AQ19-V5", "GQ19-V1")
        assert verdict.compatible
        assert verdict.reason == "cross_reference"

    def test_cross_reference_is_directional(self, resolver):
        assert not resolver.is_replacement("GQ19-V1", "AQ19-V5")

    def test_exclusion(self, resolver):
        verdict = resolver.explain("AQ18-V5", "AQ19-V5")
        assert not verdict.compatible
        assert verdict.reason == "excluded"

    def test_unclassified_candidate(self, resolver):
        verdict = resolver.explain("AQ12-V5", "ZZ12")
        assert not verdict.compatible
        assert verdict.reason == "unclassified"
        assert verdict.required is not None
        assert verdict.candidate is None


class TestPreclassified:
    """ClassificationResults can be passed instead of MPN strings."""

    def test_results_accepted(self, resolver):
        required = resolver.classifier.classify("AQ12-V5")
        candidate = resolver.classifier.classify("AQ12-V6")
        assert resolver.is_replacement(required, candidate)
        assert resolver.is_replacement(required, "AQ12-V6")

    def test_kind_mismatch_raises(self, resolver):
        required = resolver.classifier.classify("AQ12-V5")
        candidate = dataclasses.replace(
            resolver.classifier.classify("AQ12-V6"),
            capabilities=(feature_set("version", ["6"]), ordinal("features", 1)),
        )
        with pytest.raises(AttributeKindMismatch):
            resolver.explain(required, candidate)

    def test_incomparable_values_raise(self, resolver):
        required = resolver.classifier.classify("AQ12-V5")
        candidate = dataclasses.replace(
            resolver.classifier.classify("AQ12-V6"),
            capabilities=(ordinal("version", (6, 0, 0)), feature_set("features", [])),
        )
        with pytest.raises(AttributeValueMismatch) as exc_info:
            resolver.explain(required, candidate)
        assert exc_info.value.name == "version"


class TestVerdict:
    """Verdicts are explanations; truthiness follows compatible."""

    def test_bool(self, resolver):
        assert resolver.explain("AQ12-V5", "AQ12-V6")
        assert not resolver.explain("AQ12-V6", "AQ12-V5")

    def test_to_dict(self, resolver):
        data = resolver.explain("AQ12-V5-ANC", "AQ12-V5").to_dict()
        assert data["compatible"] is False
        assert data["reason"] == "attribute_failed"
        assert data["failed_attribute"] == "features"
        assert data["attributes_verified"] == ["version"]
        assert data["required"]["owner"] == "acme"
        assert data["candidate"]["series"] == "AQ12"

    def test_to_dict_without_classification(self, resolver):
        assert resolver.explain("", "AQ12").to_dict() == {
            "compatible": False,
            "reason": "empty_input",
            "attributes_verified": [],
        }

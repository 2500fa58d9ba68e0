"""Tests for the classifier / dispatcher."""

import pytest

from mpn_resolver.classifier import Classifier, clean_token, normalize_mpn, text_tokens
from mpn_resolver.loader import build_provider, default_providers, fallback_provider
from mpn_resolver.registry import RuleError
from mpn_resolver.types import ComponentType


def make_classifier(*tables, fallback=None):
    return Classifier([build_provider(t) for t in tables], fallback=fallback)


ACME = {
    "owner": "acme",
    "patterns": [["OPAMP", r"^XL[0-9]+.*"], ["IC", r"^U[0-9].*"]],
}
GLOBEX = {
    "owner": "globex",
    "patterns": [["OPAMP_TI", r"^XL358.*"], ["OPAMP", r"^GX[0-9]+.*"]],
}
INITECH = {
    "owner": "initech",
    "priority": 10,
    "patterns": [["OPAMP", r"^XL[0-9]+.*"]],
}


class TestNormalize:
    """Whitespace is stripped, case preserved."""

    @pytest.mark.parametrize("mpn,expected", [(" LM358 ", "LM358"), ("", ""), (None, ""), ("\tab1\n", "ab1")])
    def test_normalize(self, mpn, expected):
        assert normalize_mpn(mpn) == expected


class TestClassify:
    """Dispatch precedence: specificity, then priority, then registration order."""

    def test_single_claim(self):
        classifier = make_classifier(ACME, GLOBEX)
        result = classifier.classify("GX100")
        assert result.owner_id == "globex"
        assert result.matched_type is ComponentType.OPAMP
        assert result.base_type is ComponentType.OPAMP

    def test_refinement_beats_base(self):
        classifier = make_classifier(ACME, GLOBEX)
        result = classifier.classify("XL358D")
        assert result.owner_id == "globex"
        assert result.matched_type is ComponentType.OPAMP_TI

    def test_registration_order_breaks_ties(self):
        classifier = make_classifier(ACME, {"owner": "globex", "patterns": [["OPAMP", r"^XL[0-9]+.*"]]})
        assert classifier.classify("XL100").owner_id == "acme"

    def test_priority_beats_registration_order(self):
        classifier = make_classifier(ACME, INITECH)
        assert classifier.classify("XL100").owner_id == "initech"

    @pytest.mark.parametrize("mpn", ["", None, "   ", "ZZZ999"])
    def test_not_found(self, mpn):
        assert make_classifier(ACME, GLOBEX).classify(mpn) is None

    def test_whitespace_is_stripped(self):
        result = make_classifier(ACME).classify("  U12  ")
        assert result.mpn == "U12"
        assert result.matched_type is ComponentType.IC

    def test_idempotent(self):
        classifier = make_classifier(ACME, GLOBEX)
        assert classifier.classify("XL358D") == classifier.classify("XL358D")

    def test_scoping_prevents_cross_owner_claims(self):
        # acme's generic "^U[0-9].*" never lets globex claim a U-part
        classifier = make_classifier(ACME, GLOBEX)
        claims = classifier.candidates("U1")
        assert [c.owner_id for c in claims] == ["acme"]

    def test_duplicate_owner_rejected(self):
        with pytest.raises(RuleError):
            make_classifier(ACME, ACME)

    def test_registry_is_frozen(self):
        classifier = make_classifier(ACME)
        assert classifier.registry.frozen
        with pytest.raises(RuntimeError):
            classifier.registry.register("late", ComponentType.IC, r"^L.*")


class TestCandidates:
    """Every claiming provider, best first."""

    def test_ordering(self):
        classifier = make_classifier(ACME, GLOBEX, INITECH)
        owners = [c.owner_id for c in classifier.candidates("XL358")]
        assert owners == ["globex", "initech", "acme"]

    def test_none(self):
        assert make_classifier(ACME).candidates("nothing") == []
        assert make_classifier(ACME).candidates("") == []


class TestFallback:
    """The generic provider is opt-in and only used for unclaimed parts."""

    def test_disabled_by_default(self):
        classifier = Classifier(default_providers())
        assert classifier.fallback is None
        assert classifier.classify("R1") is None

    def test_enabled(self):
        classifier = Classifier(default_providers(), fallback=fallback_provider())
        result = classifier.classify("R1")
        assert result.owner_id == "generic"
        assert result.matched_type is ComponentType.RESISTOR

    def test_manufacturer_claim_wins(self):
        classifier = Classifier(default_providers(), fallback=fallback_provider())
        assert classifier.classify("74HC00N").owner_id == "ti"

    def test_fallback_not_in_providers(self):
        classifier = Classifier(default_providers(), fallback=fallback_provider())
        assert "generic" not in [p.owner_id for p in classifier.providers]
        assert classifier.provider("generic") is classifier.fallback


class TestMatchesType:
    """Refinement matches imply base matches."""

    def test_refinement_implies_base(self):
        classifier = make_classifier(ACME, GLOBEX)
        assert classifier.matches_type("XL358", ComponentType.OPAMP_TI)
        assert classifier.matches_type("XL358", ComponentType.OPAMP)

    def test_any_claiming_provider_counts(self):
        classifier = make_classifier(ACME, GLOBEX)
        # globex can produce OPAMP_TI but only for XL358
        assert classifier.matches_type("XL100", ComponentType.OPAMP)
        assert not classifier.matches_type("XL100", ComponentType.OPAMP_TI)

    def test_wrong_type(self):
        classifier = make_classifier(ACME, GLOBEX)
        assert not classifier.matches_type("GX1", ComponentType.MEMORY)
        assert not classifier.matches_type("", ComponentType.OPAMP)

    def test_fallback(self):
        classifier = Classifier(default_providers(), fallback=fallback_provider())
        assert classifier.matches_type("C12", ComponentType.CAPACITOR)
        assert not classifier.matches_type("C12", ComponentType.RESISTOR)
        # claimed by a manufacturer, so the generic "^74" rule is not consulted
        assert not classifier.matches_type("74HC00", ComponentType.IC)


class TestProvidersForType:
    """Providers whose types can satisfy a query type, in registration order."""

    @pytest.mark.parametrize("target_type,owners", [
        (ComponentType.OPAMP, ["ti", "st"]),
        (ComponentType.OPAMP_TI, ["ti"]),
        (ComponentType.VOLTAGE_REGULATOR, ["ti", "st"]),
        (ComponentType.MEMORY, ["winbond"]),
        (ComponentType.RESISTOR, []),
    ])
    def test_default_providers(self, target_type, owners):
        classifier = Classifier(default_providers())
        assert [p.owner_id for p in classifier.providers_for_type(target_type)] == owners

    def test_fallback_excluded(self):
        classifier = Classifier(default_providers(), fallback=fallback_provider())
        assert classifier.providers_for_type(ComponentType.RESISTOR) == []


class TestTextTokens:
    """Free-text words are cleaned of labels and mounting suffixes."""

    @pytest.mark.parametrize("token,expected", [
        ("mpn:lm358dr", "LM358DR"),
        ("P/N:W25Q128JVSIQ", "W25Q128JVSIQ"),
        ("PN:AB1562", "AB1562"),
        ("part-LM7805CT-ROHS", "LM7805CT"),
        ("ic-ne555-smd", "NE555"),
        ("value=GRM188R71H104KA93D", "GRM188R71H104KA93D"),
        ("REF:", ""),
        ("LM317T", "LM317T"),
    ])
    def test_clean_token(self, token, expected):
        assert clean_token(token) == expected

    def test_split_and_drop_empty(self):
        assert text_tokens(" Op-amp; MPN: LM358DR | qty 2") == ["OP-AMP", "LM358DR", "QTY", "2"]

    @pytest.mark.parametrize("text", ["", None, " ;,| "])
    def test_nothing(self, text):
        assert text_tokens(text) == []


class TestFindMpnInText:
    """First claimed word wins; None when nothing is recognised."""

    @pytest.mark.parametrize("text,expected", [
        ("Op-amp; MPN: LM358DR | qty 2", "LM358DR"),
        ("P/N: W25Q128JVSIQ-ROHS", "W25Q128JVSIQ"),
        ("qty=2, value=GRM188R71H104KA93D-SMD", "GRM188R71H104KA93D"),
        ("mpn:ab1562a", "AB1562A"),
        ("resistor 10k 0603", None),
        ("", None),
        (None, None),
    ])
    def test_default_providers(self, text, expected):
        assert Classifier(default_providers()).find_mpn_in_text(text) == expected

    def test_first_claimed_word_wins(self):
        assert make_classifier(ACME).find_mpn_in_text("U3 XL100") == "U3"
        assert make_classifier(ACME).find_mpn_in_text("socket XL100 U3") == "XL100"

    def test_fallback_claims_count(self):
        classifier = Classifier(default_providers(), fallback=fallback_provider())
        assert classifier.find_mpn_in_text("pull-up R12 10k") == "R12"

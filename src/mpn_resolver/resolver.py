"""Compatibility resolver: can `candidate` replace `required`?

The relation is deliberately not symmetric. A strictly better part replaces
a lesser one, never the other way round.

Order of checks:

1. empty input -> False; identical MPNs -> True
2. both sides must classify
3. the required part's provider may decide outright (cross references,
   exclusions); otherwise parts of different providers are not replacements
4. series gate: unrelated series or a lower-ranked candidate series fail
5. dominance over every attribute of the required part
"""

import logging
from typing import Protocol

from .capabilities import check_dominance
from .classifier import normalize_mpn
from .models import ClassificationResult, Verdict
from .providers import RuleProvider

logger = logging.getLogger(__name__)


class SupportsClassify(Protocol):
    def classify(self, mpn: str | None) -> ClassificationResult | None: ...

    def provider(self, owner_id: str) -> RuleProvider | None: ...


PartRef = str | ClassificationResult | None


class CompatibilityResolver:
    """Generic dominance check, parameterized by the providers' tables."""

    def __init__(self, classifier: SupportsClassify):
        self.classifier = classifier

    def _resolve(self, part: PartRef) -> tuple[str, ClassificationResult | None]:
        if isinstance(part, ClassificationResult):
            return part.mpn, part
        mpn = normalize_mpn(part)
        return mpn, self.classifier.classify(mpn) if mpn else None

    def explain(self, required: PartRef, candidate: PartRef) -> Verdict:
        """Decide whether candidate can replace required, with the reason.

        Either side may be an MPN string or a ClassificationResult obtained
        earlier, which skips re-classifying it.

        Raises:
            AttributeKindMismatch: both parts declare an attribute under the
                same name with different kinds.
        """
        required_mpn, req = self._resolve(required)
        candidate_mpn, cand = self._resolve(candidate)
        if not required_mpn or not candidate_mpn:
            return Verdict(False, "empty_input")

        if required_mpn.upper() == candidate_mpn.upper():
            return Verdict(True, "identical", req, cand)
        if req is None or cand is None:
            return Verdict(False, "unclassified", req, cand)

        provider = self.classifier.provider(req.owner_id)
        if provider is not None:
            decided = provider.is_replacement(required_mpn, candidate_mpn)
            if decided is not None:
                return Verdict(decided, "cross_reference" if decided else "excluded", req, cand)

        if req.owner_id != cand.owner_id or provider is None:
            return Verdict(False, "provider_mismatch", req, cand)

        order = provider.compare_series(req.series, cand.series)
        if order is None:
            return Verdict(False, "series_unrelated", req, cand)
        if order < 0:
            return Verdict(False, "series_downgrade", req, cand)

        ok, checked, failed = check_dominance(req.capabilities, cand.capabilities)
        if not ok:
            logger.debug(f"{candidate_mpn} does not replace {required_mpn}: {failed} not satisfied")
            return Verdict(False, "attribute_failed", req, cand, checked, failed)
        return Verdict(True, "compatible", req, cand, checked)

    def is_replacement(self, required: PartRef, candidate: PartRef) -> bool:
        return self.explain(required, candidate).compatible

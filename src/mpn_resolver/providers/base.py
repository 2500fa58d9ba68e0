"""Rule provider base class.

A provider is the rule set and logic bundle for one manufacturer (or one
product line). The classifier only talks to providers through this surface,
so adding a vendor never touches dispatch or resolver code.
"""

import logging
import re
from abc import ABC, abstractmethod

from ..capabilities import CapabilityAttribute
from ..packages import resolve_package_code
from ..registry import PatternRegistry, RuleError
from ..types import ComponentType

logger = logging.getLogger(__name__)


_LEADING_SERIES_PATTERN = re.compile(r"^([A-Z]*\d+)")
_LEADING_ALPHA_PATTERN = re.compile(r"^([A-Z]+)")
_NON_ALNUM_PATTERN = re.compile(r"[^A-Z0-9]")


def fallback_series(mpn: str | None) -> str:
    """Leading letters plus the first run of digits.

    'LM358DR' -> 'LM358', 'TL431' -> 'TL431', 'ABC' -> 'ABC', '' -> ''.
    Separators are dropped before matching so '-X12' still yields 'X12'.
    """
    if not mpn:
        return ""
    cleaned = _NON_ALNUM_PATTERN.sub("", mpn.upper())
    match = _LEADING_SERIES_PATTERN.match(cleaned) or _LEADING_ALPHA_PATTERN.match(cleaned)
    return match.group(1) if match else ""


class RuleProvider(ABC):
    """One owner of matching rules plus its extraction and comparison logic.

    Subclasses register their patterns in ``register_patterns`` (most specific
    first) and may override any of the extraction hooks. All extraction hooks
    must be total: any string in, a value out, never an exception.
    """

    def __init__(self, owner_id: str, name: str | None = None, priority: int = 0):
        if not owner_id:
            raise RuleError("Provider owner_id must be a non-empty string")
        self.owner_id = owner_id
        self.name = name or owner_id
        # Higher wins when two providers claim an MPN with equally specific types
        self.priority = priority
        self._registry: PatternRegistry | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(owner_id={self.owner_id!r})"

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def attach(self, registry: PatternRegistry) -> None:
        """Register this provider's patterns and keep the registry for queries."""
        self.register_patterns(registry)
        self._registry = registry
        logger.debug(f"{self.owner_id}: {len(registry.rules_for(self.owner_id))} patterns registered")

    @property
    def registry(self) -> PatternRegistry:
        if self._registry is None:
            raise RuntimeError(f"Provider {self.owner_id!r} is not attached to a registry")
        return self._registry

    @abstractmethod
    def register_patterns(self, registry: PatternRegistry) -> None:
        """Register every pattern this provider owns, most specific first."""

    @abstractmethod
    def supported_types(self) -> frozenset[ComponentType]:
        """Every type this provider can ever return from classify()."""

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def fast_path(self, mpn: str) -> ComponentType | None:
        """Direct structural check run before the scoped registry lookup.

        Used when the provider's own patterns are too broad to separate a base
        type from a refinement. Return None to fall through to the registry.
        """
        return None

    def classify(self, mpn: str | None) -> ComponentType | None:
        if not mpn:
            return None
        direct = self.fast_path(mpn)
        if direct is not None:
            return direct
        rule = self.registry.first_match(mpn, self.owner_id, self.supported_types())
        return rule.target_type if rule else None

    def can_produce(self, target_type: ComponentType) -> bool:
        """True if classify() could ever return target_type or a refinement of it."""
        return any(t.is_a(target_type) for t in self.supported_types())

    # -------------------------------------------------------------------------
    # Extraction
    # -------------------------------------------------------------------------

    def extract_series(self, mpn: str | None) -> str:
        return fallback_series(mpn)

    def extract_package(self, mpn: str | None) -> str:
        return resolve_package_code(mpn)

    def capabilities(self, mpn: str | None) -> list[CapabilityAttribute]:
        return []

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def compare_series(self, required: str, candidate: str) -> int | None:
        """Order candidate's series against required's.

        Returns:
            None if the series are unrelated, 0 if equal, negative if the
            candidate ranks lower, positive if it ranks higher.
        """
        if required and candidate and required.upper() == candidate.upper():
            return 0
        return None

    def is_replacement(self, required: str, candidate: str) -> bool | None:
        """Provider override for documented exceptions.

        Returns True or False to decide the pair outright, or None to let the
        generic resolver decide.
        """
        return None

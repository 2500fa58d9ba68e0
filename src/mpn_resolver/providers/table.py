"""Table-driven rule provider.

Every vendor in rules/ is a TableProvider built from a declarative table:
regexes for classification, series extraction, package suffixes and
capability attributes. Vendor specifics live in the tables, not in code.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from ..capabilities import (
    CapabilityAttribute,
    CapabilityKind,
    feature_set,
    numeric,
    ordinal,
)
from ..packages import resolve_package_code
from ..parsers import get_parser
from ..registry import PatternRegistry
from ..types import ComponentType
from .base import RuleProvider, fallback_series

logger = logging.getLogger(__name__)


_TRAILING_NUMBER_PATTERN = re.compile(r"(\d+)\D*$")


# =============================================================================
# TABLE ENTRIES
# =============================================================================


@dataclass(frozen=True)
class SeriesPattern:
    """Extracts a series code. Group 1 (or the whole match) unless a template is set."""
    pattern: re.Pattern[str]
    template: str | None = None

    def extract(self, mpn: str) -> str | None:
        match = self.pattern.search(mpn)
        if not match:
            return None
        if self.template:
            return match.expand(self.template).upper()
        return (match.group(1) if match.groups() else match.group(0)).upper()


@dataclass(frozen=True)
class SeriesFamily:
    """A ranked family of series codes.

    Series matching ``pattern`` belong to the family. Rank comes from the
    explicit ``ranks`` table first, then from the trailing model number.
    """
    name: str
    pattern: re.Pattern[str]
    ranks: Mapping[str, float] = field(default_factory=dict)

    def contains(self, series: str) -> bool:
        return self.pattern.fullmatch(series) is not None

    def rank(self, series: str) -> float | None:
        key = series.upper()
        if key in self.ranks:
            return self.ranks[key]
        match = _TRAILING_NUMBER_PATTERN.search(key)
        return float(match.group(1)) if match else None


@dataclass(frozen=True)
class PackageRule:
    """Package code embedded in the MPN body (e.g. Murata case size)."""
    pattern: re.Pattern[str]
    codes: Mapping[str, str] | None = None

    def extract(self, mpn: str) -> str | None:
        match = self.pattern.search(mpn)
        if not match:
            return None
        raw = (match.group(1) if match.groups() else match.group(0)).upper()
        if self.codes is None:
            return raw or None
        return self.codes.get(raw)


@dataclass(frozen=True)
class PackageClassRule:
    """Groups interchangeable packages for parts matching ``pattern``.

    A package listed in ``classes`` compares as its class name, so DIP and
    SOIC op-amps can both carry "DIP/SOIC".
    """
    pattern: re.Pattern[str]
    classes: Mapping[str, str]

    def classify(self, mpn: str, package: str) -> str | None:
        if not self.pattern.search(mpn):
            return None
        return self.classes.get(package.upper())


@dataclass(frozen=True)
class CapabilityRule:
    """Extracts one capability attribute from an MPN.

    When ``pattern`` matches, the attribute value is, in order of preference:
    ``value`` (a constant, run through the parser if it is a string), the
    captured code looked up in ``codes``, or the captured code run through
    the named parser. Several rules may share a name; for ordinal and numeric
    attributes the first rule that yields a value wins, for set attributes
    every matching rule contributes a member.
    """
    name: str
    kind: CapabilityKind
    pattern: re.Pattern[str]
    parser: str = "text"
    codes: Mapping[str, Any] | None = None
    value: Any = None
    exact: bool = False

    def extract(self, mpn: str) -> Any | None:
        match = self.pattern.search(mpn)
        if not match:
            return None
        if self.value is not None:
            if isinstance(self.value, str):
                return get_parser(self.parser)(self.value)
            return self.value
        raw = match.group(1) if match.groups() else match.group(0)
        if raw is None:
            return None
        if self.codes is not None:
            return self.codes.get(raw.upper())
        return get_parser(self.parser)(raw)


@dataclass(frozen=True)
class PairRule:
    """A (required, candidate) pair of full-match patterns."""
    required: re.Pattern[str]
    candidate: re.Pattern[str]

    def matches(self, required: str, candidate: str) -> bool:
        return (
            self.required.fullmatch(required) is not None
            and self.candidate.fullmatch(candidate) is not None
        )


# =============================================================================
# PROVIDER
# =============================================================================


class TableProvider(RuleProvider):
    """RuleProvider whose behaviour is fully described by its tables.

    Args:
        owner_id: Unique provider id.
        patterns: (type, pattern) pairs in precedence order.
        fast_paths: (pattern, type) pairs checked before the registry.
        series_patterns: Tried in order; fallback_series() if none match.
        series_families: Ranked families for compare_series().
        package_rules: Package codes embedded in the MPN body.
        package_codes: Suffix table consulted before the shared table.
        use_standard_packages: Whether the shared suffix table applies.
        capability_rules: Capability extraction rules.
        match_package: Expose the package as a "package" set attribute.
        package_classes: Package equivalences applied to the "package" attribute.
        cross_references: Known drop-in pairs, decided True.
        exclusions: Known non-substitutable pairs, decided False.
    """

    def __init__(
        self,
        owner_id: str,
        patterns: Sequence[tuple[ComponentType, re.Pattern[str] | str]],
        *,
        name: str | None = None,
        priority: int = 0,
        fast_paths: Sequence[tuple[re.Pattern[str], ComponentType]] = (),
        series_patterns: Sequence[SeriesPattern] = (),
        series_families: Sequence[SeriesFamily] = (),
        package_rules: Sequence[PackageRule] = (),
        package_codes: Mapping[str, str] | None = None,
        use_standard_packages: bool = True,
        capability_rules: Sequence[CapabilityRule] = (),
        match_package: bool = False,
        package_classes: Sequence[PackageClassRule] = (),
        cross_references: Sequence[PairRule] = (),
        exclusions: Sequence[PairRule] = (),
    ):
        super().__init__(owner_id, name=name, priority=priority)
        self.patterns = tuple(patterns)
        self.fast_paths = tuple(fast_paths)
        self.series_patterns = tuple(series_patterns)
        self.series_families = tuple(series_families)
        self.package_rules = tuple(package_rules)
        self.package_codes = {k.upper(): v for k, v in (package_codes or {}).items()}
        self.use_standard_packages = use_standard_packages
        self.capability_rules = tuple(capability_rules)
        self.match_package = match_package
        self.package_classes = tuple(package_classes)
        self.cross_references = tuple(cross_references)
        self.exclusions = tuple(exclusions)
        self._supported = frozenset(
            [t for t, _ in self.patterns] + [t for _, t in self.fast_paths]
        )

    def register_patterns(self, registry: PatternRegistry) -> None:
        for target_type, pattern in self.patterns:
            registry.register(self.owner_id, target_type, pattern)

    def supported_types(self) -> frozenset[ComponentType]:
        return self._supported

    def fast_path(self, mpn: str) -> ComponentType | None:
        for pattern, target_type in self.fast_paths:
            if pattern.fullmatch(mpn):
                return target_type
        return None

    def extract_series(self, mpn: str | None) -> str:
        if not mpn:
            return ""
        upper = mpn.strip().upper()
        for series_pattern in self.series_patterns:
            series = series_pattern.extract(upper)
            if series:
                return series
        return fallback_series(upper)

    def extract_package(self, mpn: str | None) -> str:
        if not mpn:
            return ""
        upper = mpn.strip().upper()
        for rule in self.package_rules:
            package = rule.extract(upper)
            if package:
                return package
        return resolve_package_code(upper, self.package_codes, self.use_standard_packages)

    def capabilities(self, mpn: str | None) -> list[CapabilityAttribute]:
        if not mpn:
            return []
        upper = mpn.strip().upper()

        # name -> attribute, in first-declaration order
        found: dict[str, CapabilityAttribute | None] = {}
        sets: dict[str, set[str]] = {}
        for rule in self.capability_rules:
            if rule.kind is CapabilityKind.SET:
                members = sets.setdefault(rule.name, set())
                found.setdefault(rule.name, None)
                value = rule.extract(upper)
                if value:
                    members.add(str(value))
                continue

            if found.get(rule.name) is not None:
                continue
            found.setdefault(rule.name, None)
            value = rule.extract(upper)
            if value is None:
                continue
            if rule.kind is CapabilityKind.ORDINAL:
                found[rule.name] = ordinal(rule.name, value)
            else:
                found[rule.name] = numeric(rule.name, value, exact=rule.exact)

        attributes: list[CapabilityAttribute] = []
        for name, attr in found.items():
            if name in sets:
                attributes.append(feature_set(name, sets[name]))
            elif attr is not None:
                attributes.append(attr)

        if self.match_package:
            package = self.extract_package(upper)
            if package:
                attributes.append(feature_set("package", [self.package_class(upper, package)]))
        return attributes

    def package_class(self, mpn: str, package: str) -> str:
        """The first matching class for ``package``, else the package itself."""
        for rule in self.package_classes:
            package_class = rule.classify(mpn, package)
            if package_class:
                return package_class
        return package

    def compare_series(self, required: str, candidate: str) -> int | None:
        required = (required or "").strip().upper()
        candidate = (candidate or "").strip().upper()
        if not required or not candidate:
            return None
        if required == candidate:
            return 0
        for family in self.series_families:
            if not (family.contains(required) and family.contains(candidate)):
                continue
            required_rank = family.rank(required)
            candidate_rank = family.rank(candidate)
            if required_rank is None or candidate_rank is None:
                return None
            return (candidate_rank > required_rank) - (candidate_rank < required_rank)
        return None

    def is_replacement(self, required: str, candidate: str) -> bool | None:
        required = required.strip().upper()
        candidate = candidate.strip().upper()
        for rule in self.exclusions:
            if rule.matches(required, candidate):
                logger.debug(f"{self.owner_id}: {candidate} excluded as replacement for {required}")
                return False
        for rule in self.cross_references:
            if rule.matches(required, candidate):
                logger.debug(f"{self.owner_id}: {candidate} cross-referenced for {required}")
                return True
        return None

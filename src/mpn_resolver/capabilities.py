"""Capability attributes and the dominance check.

A provider describes the comparable features of a part as a list of
CapabilityAttributes. A candidate dominates a required part when, for every
attribute the required part exposes:

- ordinal: candidate value >= required value (protocol version, grade)
- set: candidate set is a superset of the required set (ANC, HIFI...)
- numeric_range: candidate value >= required value, or == when the attribute
  is marked exact (fixed voltage rails, case size, capacitance value)

An attribute the candidate does not define never counts as satisfied.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable


class CapabilityKind(str, Enum):
    ORDINAL = "ordinal"
    SET = "set"
    NUMERIC_RANGE = "numeric_range"


class AttributeKindMismatch(TypeError):
    """Two attributes with the same name were declared with different kinds.

    This is a configuration bug between rule tables, not a "not compatible"
    answer, so it is raised instead of returning False.
    """

    def __init__(self, name: str, required_kind: CapabilityKind, candidate_kind: CapabilityKind):
        self.name = name
        self.required_kind = required_kind
        self.candidate_kind = candidate_kind
        super().__init__(
            f"Attribute {name!r} is {required_kind.value} on the required part "
            f"but {candidate_kind.value} on the candidate"
        )


class AttributeValueMismatch(AttributeKindMismatch):
    """Two attributes of the same name and kind hold values that cannot be compared.

    Typically one rule encodes an ordinal as a number and another as a
    version tuple.
    """

    def __init__(self, name: str, kind: CapabilityKind, required_value: Any, candidate_value: Any):
        self.name = name
        self.required_kind = kind
        self.candidate_kind = kind
        self.required_value = required_value
        self.candidate_value = candidate_value
        TypeError.__init__(
            self,
            f"Attribute {name!r} values {required_value!r} and {candidate_value!r} are not comparable",
        )


@dataclass(frozen=True)
class CapabilityAttribute:
    """A named, typed, comparable feature of a classified part."""
    name: str
    kind: CapabilityKind
    value: Any
    exact: bool = False

    def to_dict(self) -> dict[str, Any]:
        value = self.value
        if isinstance(value, frozenset):
            value = sorted(value)
        elif isinstance(value, tuple):
            value = ".".join(str(v) for v in value)
        result: dict[str, Any] = {"name": self.name, "kind": self.kind.value, "value": value}
        if self.exact:
            result["exact"] = True
        return result


def ordinal(name: str, value: Any) -> CapabilityAttribute:
    return CapabilityAttribute(name, CapabilityKind.ORDINAL, value)


def feature_set(name: str, values: Iterable[str]) -> CapabilityAttribute:
    return CapabilityAttribute(name, CapabilityKind.SET, frozenset(v.upper() for v in values))


def numeric(name: str, value: float, exact: bool = False) -> CapabilityAttribute:
    return CapabilityAttribute(name, CapabilityKind.NUMERIC_RANGE, float(value), exact)


def attribute_satisfied(required: CapabilityAttribute, candidate: CapabilityAttribute | None) -> bool:
    """Check one required attribute against the candidate's attribute of the same name.

    Raises:
        AttributeKindMismatch: the two sides declare different kinds.
        AttributeValueMismatch: same kind but the values cannot be ordered.
    """
    if candidate is None:
        return False
    if candidate.kind != required.kind:
        raise AttributeKindMismatch(required.name, required.kind, candidate.kind)

    if required.kind is CapabilityKind.SET:
        return frozenset(candidate.value) >= frozenset(required.value)

    if required.kind is CapabilityKind.NUMERIC_RANGE and required.exact:
        # Equality up to float noise from unit conversion
        return math.isclose(candidate.value, required.value, rel_tol=1e-9)

    try:
        return candidate.value >= required.value
    except TypeError:
        raise AttributeValueMismatch(required.name, required.kind, required.value, candidate.value) from None


def index_attributes(attributes: Iterable[CapabilityAttribute]) -> dict[str, CapabilityAttribute]:
    """Index attributes by name. Later duplicates win."""
    return {attr.name: attr for attr in attributes}


def check_dominance(
    required: Iterable[CapabilityAttribute],
    candidate: Iterable[CapabilityAttribute],
) -> tuple[bool, list[str], str | None]:
    """Check every required attribute against the candidate.

    Returns:
        (ok, checked, failed) where checked lists attribute names that passed
        and failed names the first attribute that did not (None when ok).

    Raises:
        AttributeKindMismatch: on a kind mismatch for any shared name.
    """
    required = list(required)
    cand_index = index_attributes(candidate)
    # Kind mismatches are reported even when an earlier attribute would fail
    for attr in required:
        other = cand_index.get(attr.name)
        if other is not None and other.kind != attr.kind:
            raise AttributeKindMismatch(attr.name, attr.kind, other.kind)

    checked: list[str] = []
    for attr in required:
        if not attribute_satisfied(attr, cand_index.get(attr.name)):
            return False, checked, attr.name
        checked.append(attr.name)
    return True, checked, None

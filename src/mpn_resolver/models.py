"""Result types returned by the classifier and the compatibility resolver."""

from dataclasses import dataclass, field
from typing import Any

from .capabilities import CapabilityAttribute
from .types import ComponentType


@dataclass(frozen=True)
class ClassificationResult:
    """Classification of one MPN. Created per call, never mutated."""
    mpn: str
    matched_type: ComponentType
    owner_id: str
    series: str = ""
    package: str = ""
    mounting_type: str = "not_sure"  # "smd", "through_hole" or "not_sure"
    capabilities: tuple[CapabilityAttribute, ...] = ()

    @property
    def base_type(self) -> ComponentType:
        return self.matched_type.base_type

    def to_dict(self) -> dict[str, Any]:
        return {
            "mpn": self.mpn,
            "type": self.matched_type.name,
            "base_type": self.base_type.name,
            "owner": self.owner_id,
            "series": self.series,
            "package": self.package,
            "mounting_type": self.mounting_type,
            "capabilities": [attr.to_dict() for attr in self.capabilities],
        }


@dataclass(frozen=True)
class Verdict:
    """Explained outcome of a compatibility check.

    reason is one of:
        empty_input, identical, unclassified, cross_reference, excluded,
        provider_mismatch, series_unrelated, series_downgrade,
        attribute_failed, compatible
    """
    compatible: bool
    reason: str
    required: ClassificationResult | None = None
    candidate: ClassificationResult | None = None
    checked: list[str] = field(default_factory=list)
    failed_attribute: str | None = None

    def __bool__(self) -> bool:
        return self.compatible

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "compatible": self.compatible,
            "reason": self.reason,
            "attributes_verified": list(self.checked),
        }
        if self.failed_attribute:
            result["failed_attribute"] = self.failed_attribute
        if self.required is not None:
            result["required"] = self.required.to_dict()
        if self.candidate is not None:
            result["candidate"] = self.candidate.to_dict()
        return result

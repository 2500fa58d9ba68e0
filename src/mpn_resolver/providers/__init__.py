"""Rule providers: the per-manufacturer rule sets the classifier dispatches over."""

from .base import RuleProvider, fallback_series
from .table import (
    CapabilityRule,
    PackageClassRule,
    PackageRule,
    PairRule,
    SeriesFamily,
    SeriesPattern,
    TableProvider,
)

__all__ = [
    "RuleProvider",
    "TableProvider",
    "SeriesPattern",
    "SeriesFamily",
    "PackageRule",
    "PackageClassRule",
    "CapabilityRule",
    "PairRule",
    "fallback_series",
]

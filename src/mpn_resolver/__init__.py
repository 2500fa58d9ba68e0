"""MPN classification and drop-in replacement resolution."""

__version__ = "0.3.0"

from .capabilities import AttributeKindMismatch, AttributeValueMismatch, CapabilityAttribute, CapabilityKind
from .classifier import Classifier
from .engine import MPNEngine, get_engine, reset_engine
from .loader import build_provider, default_providers, load_rules
from .models import ClassificationResult, Verdict
from .registry import PatternRegistry, RuleError
from .resolver import CompatibilityResolver
from .types import ComponentType

__all__ = [
    "__version__",
    "AttributeKindMismatch",
    "AttributeValueMismatch",
    "CapabilityAttribute",
    "CapabilityKind",
    "ClassificationResult",
    "Classifier",
    "CompatibilityResolver",
    "ComponentType",
    "MPNEngine",
    "PatternRegistry",
    "RuleError",
    "Verdict",
    "build_provider",
    "default_providers",
    "get_engine",
    "load_rules",
    "reset_engine",
]

"""Caller API: classification and replacement checks over one immutable rule set."""

import logging
import threading
from typing import Any, Iterable

from .cache import CachedClassifier
from .classifier import Classifier
from .config import (
    MPN_CLASSIFY_CACHE_SIZE,
    MPN_CLASSIFY_CACHE_TTL,
    MPN_ENABLE_FALLBACK,
    MPN_RULES_PATH,
)
from .loader import default_providers, fallback_provider, load_rules, merge_providers
from .models import ClassificationResult, Verdict
from .providers import RuleProvider
from .resolver import CompatibilityResolver, PartRef
from .types import ComponentType

logger = logging.getLogger(__name__)


class MPNEngine:
    """Classifier, resolver and (optionally) a classification cache.

    Args:
        providers: Manufacturer providers. Defaults to the bundled tables.
        enable_fallback: Route unclaimed MPNs to the generic provider.
        cache_size: Max cached classifications; 0 disables the cache.
        cache_ttl: Seconds a cached classification stays valid.
    """

    def __init__(
        self,
        providers: Iterable[RuleProvider] | None = None,
        *,
        enable_fallback: bool = False,
        cache_size: int = 0,
        cache_ttl: float = 3600,
    ):
        providers = list(providers) if providers is not None else default_providers()
        classifier = Classifier(providers, fallback=fallback_provider() if enable_fallback else None)
        self.classifier: Classifier | CachedClassifier = (
            CachedClassifier(classifier, max_size=cache_size, ttl=cache_ttl) if cache_size > 0 else classifier
        )
        self.resolver = CompatibilityResolver(self.classifier)

    def classify(self, mpn: str | None) -> ClassificationResult | None:
        return self.classifier.classify(mpn)

    def candidates(self, mpn: str | None) -> list[ClassificationResult]:
        return self.classifier.candidates(mpn)

    def matches_type(self, mpn: str | None, target_type: ComponentType | str) -> bool:
        if isinstance(target_type, str):
            target_type = ComponentType.from_name(target_type)
        return self.classifier.matches_type(mpn, target_type)

    def providers_for_type(self, target_type: ComponentType | str) -> list[RuleProvider]:
        if isinstance(target_type, str):
            target_type = ComponentType.from_name(target_type)
        return self.classifier.providers_for_type(target_type)

    def find_mpn_in_text(self, text: str | None) -> str | None:
        return self.classifier.find_mpn_in_text(text)

    def is_replacement(self, required: PartRef, candidate: PartRef) -> bool:
        return self.resolver.is_replacement(required, candidate)

    def explain(self, required: PartRef, candidate: PartRef) -> Verdict:
        return self.resolver.explain(required, candidate)

    def extract_series(self, mpn: str | None) -> str | None:
        """Series from the owning provider, or None if no provider claims the MPN."""
        result = self.classify(mpn)
        return result.series if result else None

    def extract_package(self, mpn: str | None) -> str | None:
        """Package from the owning provider, or None if no provider claims the MPN."""
        result = self.classify(mpn)
        return result.package if result else None

    def describe(self, mpn: str | None) -> dict[str, Any]:
        """JSON-ready classification summary, including every claiming provider."""
        result = self.classify(mpn)
        if result is None:
            return {"mpn": (mpn or "").strip(), "found": False}
        info = {"found": True, **result.to_dict()}
        info["claimed_by"] = [c.owner_id for c in self.candidates(mpn)]
        return info


def build_default_engine() -> MPNEngine:
    """Engine from the bundled tables plus MPN_RULES_PATH, configured from the environment."""
    providers = default_providers()
    if MPN_RULES_PATH:
        providers = merge_providers(providers, load_rules(MPN_RULES_PATH))
    engine = MPNEngine(
        providers,
        enable_fallback=MPN_ENABLE_FALLBACK,
        cache_size=MPN_CLASSIFY_CACHE_SIZE,
        cache_ttl=MPN_CLASSIFY_CACHE_TTL,
    )
    logger.info(
        f"MPN engine ready: {', '.join(p.owner_id for p in engine.classifier.providers)}"
        f" (fallback={'on' if MPN_ENABLE_FALLBACK else 'off'}, cache={MPN_CLASSIFY_CACHE_SIZE})"
    )
    return engine


# Global instance with thread safety
_engine: MPNEngine | None = None
_engine_lock = threading.Lock()


def get_engine() -> MPNEngine:
    """Get or create the global engine instance (thread-safe)."""
    global _engine
    if _engine is None:
        with _engine_lock:
            # Double-check locking pattern
            if _engine is None:
                _engine = build_default_engine()
    return _engine


def reset_engine() -> None:
    """Drop the global engine; the next get_engine() rebuilds it."""
    global _engine
    with _engine_lock:
        _engine = None

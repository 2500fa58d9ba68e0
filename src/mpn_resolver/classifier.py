"""Classifier / dispatcher.

Every provider is asked whether it claims an MPN (its own fast path, then
its own scoped registry rules). When several claim it, the winner is picked
by:

1. type specificity: a refinement (OPAMP_TI) beats its base type (OPAMP)
2. provider priority (higher wins)
3. provider registration order (earlier wins)

The optional fallback provider is consulted only when no manufacturer
provider claims the MPN.
"""

import logging
import re
from typing import Iterable

from .models import ClassificationResult
from .packages import detect_mounting_type
from .providers import RuleProvider
from .registry import PatternRegistry, RuleError
from .types import ComponentType

logger = logging.getLogger(__name__)


# BOM cells separate parts and labels with whitespace, ; , or |
_TEXT_SPLIT_PATTERN = re.compile(r"[\s;,|]+")

_TEXT_PREFIXES = ("IC-", "PART-", "MPN-", "MPN:", "PN:", "P/N:", "REF:", "REF-", "ITEM:", "ITEM-")
_TEXT_SUFFIXES = ("-SMD", "-THT", "-ROHS")


def normalize_mpn(mpn: str | None) -> str:
    """Strip surrounding whitespace. Case is preserved; matching is case-insensitive."""
    return mpn.strip() if mpn else ""


def clean_token(token: str) -> str:
    """Uppercase a word from free text and drop label prefixes and mounting suffixes.

    "MPN:lm358" -> "LM358", "qty=LM7805-ROHS" -> "LM7805".
    """
    word = token.strip().upper()
    if "=" in word:
        word = word.split("=", 1)[1]
    for prefix in _TEXT_PREFIXES:
        if word.startswith(prefix):
            word = word[len(prefix):]
    for suffix in _TEXT_SUFFIXES:
        if word.endswith(suffix):
            word = word[:-len(suffix)]
    return word


def text_tokens(text: str | None) -> list[str]:
    """Cleaned, non-empty words of free text in reading order."""
    if not text:
        return []
    return [word for word in (clean_token(t) for t in _TEXT_SPLIT_PATTERN.split(text)) if word]


class Classifier:
    """Dispatches MPNs over a fixed set of providers.

    Construction attaches every provider to the registry and then freezes it,
    so a Classifier is immutable and safe to share between threads.
    """

    def __init__(
        self,
        providers: Iterable[RuleProvider],
        fallback: RuleProvider | None = None,
        registry: PatternRegistry | None = None,
    ):
        self.registry = registry if registry is not None else PatternRegistry()
        self._providers: list[RuleProvider] = []
        self._by_owner: dict[str, RuleProvider] = {}

        for provider in providers:
            self._add(provider)
        self.fallback = fallback
        if fallback is not None:
            self._add(fallback, ordered=False)

        self.registry.freeze()
        logger.info(
            f"Classifier ready: {len(self._providers)} providers, {len(self.registry)} rules"
            + (f", fallback={fallback.owner_id}" if fallback else "")
        )

    def _add(self, provider: RuleProvider, ordered: bool = True) -> None:
        if provider.owner_id in self._by_owner:
            raise RuleError(f"Duplicate provider owner_id: {provider.owner_id!r}")
        provider.attach(self.registry)
        self._by_owner[provider.owner_id] = provider
        if ordered:
            self._providers.append(provider)

    @property
    def providers(self) -> tuple[RuleProvider, ...]:
        """Manufacturer providers in registration order (fallback excluded)."""
        return tuple(self._providers)

    def provider(self, owner_id: str) -> RuleProvider | None:
        return self._by_owner.get(owner_id)

    def providers_for_type(self, target_type: ComponentType) -> list[RuleProvider]:
        """Manufacturer providers that can classify parts as target_type or a refinement of it."""
        return [p for p in self._providers if p.can_produce(target_type)]

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def _claims(self, mpn: str) -> list[tuple[RuleProvider, ComponentType]]:
        """Every (provider, type) claim for mpn, best first."""
        claims = []
        for index, provider in enumerate(self._providers):
            matched = provider.classify(mpn)
            if matched is not None:
                claims.append((index, provider, matched))
        claims.sort(key=lambda c: (-c[2].specificity, -c[1].priority, c[0]))
        return [(provider, matched) for _, provider, matched in claims]

    def _result(self, provider: RuleProvider, matched: ComponentType, mpn: str) -> ClassificationResult:
        package = provider.extract_package(mpn)
        return ClassificationResult(
            mpn=mpn,
            matched_type=matched,
            owner_id=provider.owner_id,
            series=provider.extract_series(mpn),
            package=package,
            mounting_type=detect_mounting_type(package),
            capabilities=tuple(provider.capabilities(mpn)),
        )

    def _fallback_claim(self, mpn: str) -> tuple[RuleProvider, ComponentType] | None:
        if self.fallback is None:
            return None
        matched = self.fallback.classify(mpn)
        return (self.fallback, matched) if matched is not None else None

    def classify(self, mpn: str | None) -> ClassificationResult | None:
        """Best classification for mpn, or None if no provider claims it."""
        key = normalize_mpn(mpn)
        if not key:
            return None

        claims = self._claims(key)
        if claims:
            provider, matched = claims[0]
            if len(claims) > 1:
                logger.debug(
                    f"{key}: claimed by {[p.owner_id for p, _ in claims]}, "
                    f"chose {provider.owner_id} ({matched.name})"
                )
            return self._result(provider, matched, key)

        claim = self._fallback_claim(key)
        if claim:
            logger.debug(f"{key}: no manufacturer match, using fallback {claim[0].owner_id}")
            return self._result(claim[0], claim[1], key)
        return None

    def candidates(self, mpn: str | None) -> list[ClassificationResult]:
        """Every provider's classification of mpn, in dispatch precedence order."""
        key = normalize_mpn(mpn)
        if not key:
            return []
        claims = self._claims(key)
        if not claims:
            claim = self._fallback_claim(key)
            claims = [claim] if claim else []
        return [self._result(provider, matched, key) for provider, matched in claims]

    def matches_type(self, mpn: str | None, target_type: ComponentType) -> bool:
        """True if some provider classifies mpn as target_type or a refinement of it.

        Providers whose supported types can never satisfy target_type are skipped
        without running any of their rules.
        """
        key = normalize_mpn(mpn)
        if not key:
            return False
        for provider in self._providers:
            if not provider.can_produce(target_type):
                continue
            matched = provider.classify(key)
            if matched is not None and matched.is_a(target_type):
                return True

        # Fallback only speaks for parts no manufacturer claims
        if self.fallback is None or not self.fallback.can_produce(target_type):
            return False
        if self._claims(key):
            return False
        matched = self.fallback.classify(key)
        return matched is not None and matched.is_a(target_type)

    def find_mpn_in_text(self, text: str | None) -> str | None:
        """First word of free text that some provider claims, cleaned; None if there is none.

        Handles BOM cells such as "Op-amp, MPN: LM358DR (SOIC-8)".
        """
        for word in text_tokens(text):
            if self.classify(word) is not None:
                logger.debug(f"Found MPN {word} in text")
                return word
        return None

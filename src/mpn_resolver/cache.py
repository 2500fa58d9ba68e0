"""Opt-in TTL cache for classification results."""

import threading
import time
from typing import Any

from .classifier import text_tokens
from .models import ClassificationResult
from .providers import RuleProvider
from .types import ComponentType


_MISSING = object()


class TTLCache:
    """Simple TTL cache with max size enforcement via LRU eviction.

    Thread-safe: every read and write holds the instance lock.
    """

    def __init__(self, ttl: float, max_size: int = 5000):
        self._ttl = ttl
        self._max_size = max_size
        self._data: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        """Get a cached value, or default if missing/expired."""
        with self._lock:
            if key in self._data:
                ts, result = self._data[key]
                if time.time() - ts < self._ttl:
                    return result
                del self._data[key]
        return default

    def set(self, key: str, value: Any) -> None:
        """Cache a value. Evicts expired entries first, then oldest if still over max_size."""
        with self._lock:
            self._data[key] = (time.time(), value)
            if len(self._data) > self._max_size:
                self._evict()

    def _evict(self) -> None:
        """Remove expired entries, then oldest entries if still over max_size. Caller holds the lock."""
        now = time.time()
        expired = [k for k, (ts, _) in self._data.items() if now - ts >= self._ttl]
        for k in expired:
            del self._data[k]
        if len(self._data) > self._max_size:
            sorted_keys = sorted(self._data.keys(), key=lambda k: self._data[k][0])
            for k in sorted_keys[:len(self._data) - self._max_size]:
                del self._data[k]

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        return len(self._data)


class CachedClassifier:
    """Wraps a Classifier and memoizes classify().

    Results are immutable, so a cached result is indistinguishable from a
    fresh one. Misses (None) are cached too. The hit and miss counters are
    guarded by their own lock.
    """

    def __init__(self, classifier, max_size: int = 5000, ttl: float = 3600):
        self._classifier = classifier
        self._cache = TTLCache(ttl=ttl, max_size=max_size)
        self._stats_lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @property
    def registry(self):
        return self._classifier.registry

    @property
    def providers(self) -> tuple[RuleProvider, ...]:
        return self._classifier.providers

    @property
    def fallback(self) -> RuleProvider | None:
        return self._classifier.fallback

    def provider(self, owner_id: str) -> RuleProvider | None:
        return self._classifier.provider(owner_id)

    def providers_for_type(self, target_type: ComponentType) -> list[RuleProvider]:
        return self._classifier.providers_for_type(target_type)

    def classify(self, mpn: str | None) -> ClassificationResult | None:
        key = mpn.strip() if mpn else ""
        if not key:
            return None
        cached = self._cache.get(key, _MISSING)
        if cached is not _MISSING:
            with self._stats_lock:
                self.hits += 1
            return cached
        with self._stats_lock:
            self.misses += 1
        result = self._classifier.classify(key)
        self._cache.set(key, result)
        return result

    def candidates(self, mpn: str | None) -> list[ClassificationResult]:
        return self._classifier.candidates(mpn)

    def matches_type(self, mpn: str | None, target_type: ComponentType) -> bool:
        return self._classifier.matches_type(mpn, target_type)

    def find_mpn_in_text(self, text: str | None) -> str | None:
        for word in text_tokens(text):
            if self.classify(word) is not None:
                return word
        return None

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

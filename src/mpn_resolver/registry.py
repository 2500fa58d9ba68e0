"""Pattern registry for MPN matching rules.

Rules are keyed by (owner, target type). Owners are rule providers, roughly
one per manufacturer. Two kinds of query exist:

- match_any(): does ANY owner have a matching rule for this type?
- match_for_owner(): does THIS owner have a matching rule for this type?

Classification decisions must use the scoped form. A bare "^U[0-9].*"
pattern registered by a generic rule set must never let a different
manufacturer claim a part.

Within one owner, rules are kept in registration order and evaluation stops
at the first match, so providers register their most specific patterns first.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable

from .types import ComponentType

logger = logging.getLogger(__name__)


class RuleError(ValueError):
    """A matching rule or rule table is malformed."""


@dataclass(frozen=True)
class PatternRule:
    """One matching rule: owner, target type, compiled matcher."""
    owner_id: str
    target_type: ComponentType
    matcher: re.Pattern[str]

    def matches(self, mpn: str) -> bool:
        return self.matcher.fullmatch(mpn) is not None


def compile_matcher(matcher: str | re.Pattern[str]) -> re.Pattern[str]:
    """Compile a matcher as a case-insensitive regex.

    Raises:
        RuleError: if the pattern is empty or not a valid regex.
    """
    if isinstance(matcher, re.Pattern):
        if matcher.flags & re.IGNORECASE:
            return matcher
        matcher = matcher.pattern
    if not isinstance(matcher, str) or not matcher:
        raise RuleError(f"Matcher must be a non-empty regex string, got {matcher!r}")
    try:
        return re.compile(matcher, re.IGNORECASE)
    except re.error as e:
        raise RuleError(f"Invalid matcher {matcher!r}: {e}") from e


class PatternRegistry:
    """Stores PatternRules and answers global and owner-scoped queries.

    Built once at startup, then frozen. Queries after freezing touch no
    mutable state and are safe to run from many threads.
    """

    def __init__(self):
        # owner -> rules in registration order
        self._by_owner: dict[str, list[PatternRule]] = {}
        # type -> owner -> rules in registration order
        self._by_type: dict[ComponentType, dict[str, list[PatternRule]]] = {}
        self._frozen = False
        self._count = 0

    def register(
        self,
        owner_id: str,
        target_type: ComponentType,
        matcher: str | re.Pattern[str],
    ) -> PatternRule:
        """Append a rule for (owner_id, target_type).

        Duplicates are accepted; the later copy is never reached because the
        earlier one matches first.

        Raises:
            RuleError: invalid owner, type or matcher.
            RuntimeError: the registry has been frozen.
        """
        if self._frozen:
            raise RuntimeError("PatternRegistry is frozen; rules can only be registered at startup")
        if not owner_id:
            raise RuleError("owner_id must be a non-empty string")
        if not isinstance(target_type, ComponentType):
            raise RuleError(f"target_type must be a ComponentType, got {target_type!r}")

        rule = PatternRule(owner_id, target_type, compile_matcher(matcher))
        self._by_owner.setdefault(owner_id, []).append(rule)
        self._by_type.setdefault(target_type, {}).setdefault(owner_id, []).append(rule)
        self._count += 1
        return rule

    def freeze(self) -> None:
        """Make the registry read-only. Rule lists become tuples."""
        if self._frozen:
            return
        self._by_owner = {owner: tuple(rules) for owner, rules in self._by_owner.items()}  # type: ignore[misc]
        self._by_type = {
            t: {owner: tuple(rules) for owner, rules in owners.items()}  # type: ignore[misc]
            for t, owners in self._by_type.items()
        }
        self._frozen = True
        logger.debug(f"Pattern registry frozen with {self._count} rules from {len(self._by_owner)} owners")

    @property
    def frozen(self) -> bool:
        return self._frozen

    def match_any(self, mpn: str | None, target_type: ComponentType) -> bool:
        """True if any owner's rule for target_type matches mpn."""
        if not mpn:
            return False
        for rules in self._by_type.get(target_type, {}).values():
            for rule in rules:
                if rule.matches(mpn):
                    return True
        return False

    def match_for_owner(self, mpn: str | None, target_type: ComponentType, owner_id: str) -> bool:
        """True only if a rule registered by owner_id for target_type matches."""
        if not mpn:
            return False
        for rule in self._by_type.get(target_type, {}).get(owner_id, ()):
            if rule.matches(mpn):
                return True
        return False

    def first_match(
        self,
        mpn: str | None,
        owner_id: str,
        types: Iterable[ComponentType] | None = None,
    ) -> PatternRule | None:
        """First rule of owner_id (registration order) that matches mpn.

        Args:
            mpn: Part number to test.
            owner_id: Only this owner's rules are consulted.
            types: If given, rules for other target types are skipped.

        Returns:
            The matching rule, or None.
        """
        if not mpn:
            return None
        allowed = frozenset(types) if types is not None else None
        for rule in self._by_owner.get(owner_id, ()):
            if allowed is not None and rule.target_type not in allowed:
                continue
            if rule.matches(mpn):
                return rule
        return None

    def rules_for(self, owner_id: str, target_type: ComponentType | None = None) -> tuple[PatternRule, ...]:
        """Rules of one owner in registration order, optionally for one type."""
        if target_type is None:
            return tuple(self._by_owner.get(owner_id, ()))
        return tuple(self._by_type.get(target_type, {}).get(owner_id, ()))

    def owners(self) -> tuple[str, ...]:
        """Owners in first-registration order."""
        return tuple(self._by_owner)

    def types_for(self, owner_id: str) -> frozenset[ComponentType]:
        return frozenset(rule.target_type for rule in self._by_owner.get(owner_id, ()))

    def __len__(self) -> int:
        return self._count

"""Build rule providers from declarative tables.

A table is a dict (or a JSON object) with these keys:

    owner                  required, unique provider id
    name                   display name
    priority               int, higher wins dispatch ties (default 0)
    patterns               [[type, regex], ...] in precedence order
    fast_paths             [[regex, type], ...] checked before the registry
    series                 [regex | {"pattern", "template"}, ...]
    families               [{"name", "pattern", "ranks"?}, ...]
    package_rules          [{"pattern", "codes"?}, ...]
    package_codes          {suffix: package}
    use_standard_packages  bool (default true)
    match_package          bool (default false)
    package_classes        [{"pattern", "classes": {package: class}}, ...]
    capabilities           [{"name", "kind", "pattern", "parser"?, "codes"?, "value"?, "exact"?}, ...]
    cross_references       [[required_regex, candidate_regex], ...]
    exclusions             [[required_regex, candidate_regex], ...]

Every problem is reported as RuleError at load time.
"""

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Sequence

from .capabilities import CapabilityKind
from .parsers import VALUE_PARSERS
from .providers import (
    CapabilityRule,
    PackageClassRule,
    PackageRule,
    PairRule,
    SeriesFamily,
    SeriesPattern,
    TableProvider,
)
from .registry import RuleError, compile_matcher
from .rules import BUNDLED_RULES, FALLBACK_RULES
from .types import ComponentType

logger = logging.getLogger(__name__)


_KNOWN_KEYS = frozenset({
    "owner", "name", "priority", "patterns", "fast_paths", "series", "families",
    "package_rules", "package_codes", "use_standard_packages", "match_package",
    "package_classes", "capabilities", "cross_references", "exclusions",
})

_CAPABILITY_KEYS = frozenset({"name", "kind", "pattern", "parser", "codes", "value", "exact"})

# How a parser's output compares; parsers not listed produce numbers
_PARSER_ENCODINGS = {"version": "version", "text": "text"}


def _component_type(value: Any, owner: str) -> ComponentType:
    if isinstance(value, ComponentType):
        return value
    try:
        return ComponentType.from_name(str(value))
    except ValueError as e:
        raise RuleError(f"{owner}: {e}") from e


def _mapping(value: Any, what: str, owner: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise RuleError(f"{owner}: {what} must be an object, got {type(value).__name__}")
    return value


def _entries(table: Mapping[str, Any], key: str, owner: str) -> list[Any]:
    value = table.get(key, [])
    if not isinstance(value, Sequence) or isinstance(value, str):
        raise RuleError(f"{owner}: {key} must be a list")
    return list(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _pairs(value: Any, key: str, owner: str) -> list[tuple[Any, Any]]:
    if not isinstance(value, Sequence) or isinstance(value, str):
        raise RuleError(f"{owner}: {key} must be a list of pairs")
    result = []
    for item in value:
        if not isinstance(item, Sequence) or isinstance(item, str) or len(item) != 2:
            raise RuleError(f"{owner}: {key} entries must be 2-element lists, got {item!r}")
        result.append((item[0], item[1]))
    return result


def _series_pattern(entry: Any, owner: str) -> SeriesPattern:
    if isinstance(entry, str):
        return SeriesPattern(compile_matcher(entry))
    if isinstance(entry, Mapping) and "pattern" in entry:
        return SeriesPattern(compile_matcher(entry["pattern"]), entry.get("template"))
    raise RuleError(f"{owner}: series entries must be a regex or {{pattern, template}}, got {entry!r}")


def _series_family(entry: Any, owner: str) -> SeriesFamily:
    if not isinstance(entry, Mapping) or "pattern" not in entry:
        raise RuleError(f"{owner}: family entries need a pattern, got {entry!r}")
    ranks = _mapping(entry.get("ranks") or {}, f"family {entry.get('name')!r} ranks", owner)
    if not all(_is_number(v) for v in ranks.values()):
        raise RuleError(f"{owner}: family {entry.get('name')!r} ranks must be numbers")
    return SeriesFamily(
        name=str(entry.get("name") or entry["pattern"]),
        pattern=compile_matcher(entry["pattern"]),
        ranks={k.upper(): float(v) for k, v in ranks.items()},
    )


def _package_rule(entry: Any, owner: str) -> PackageRule:
    if not isinstance(entry, Mapping) or "pattern" not in entry:
        raise RuleError(f"{owner}: package rule entries need a pattern, got {entry!r}")
    codes = entry.get("codes")
    if codes is not None:
        codes = _mapping(codes, "package rule codes", owner)
    return PackageRule(
        pattern=compile_matcher(entry["pattern"]),
        codes={k.upper(): v for k, v in codes.items()} if codes is not None else None,
    )


def _package_class_rule(entry: Any, owner: str) -> PackageClassRule:
    if not isinstance(entry, Mapping) or "pattern" not in entry or "classes" not in entry:
        raise RuleError(f"{owner}: package class entries need a pattern and classes, got {entry!r}")
    classes = _mapping(entry["classes"], "package classes", owner)
    if not all(isinstance(v, str) and v for v in classes.values()):
        raise RuleError(f"{owner}: package classes must map packages to class names")
    return PackageClassRule(
        pattern=compile_matcher(entry["pattern"]),
        classes={k.upper(): v for k, v in classes.items()},
    )


def _capability_rule(entry: Any, owner: str) -> CapabilityRule:
    if not isinstance(entry, Mapping):
        raise RuleError(f"{owner}: capability entries must be objects, got {entry!r}")
    unknown = set(entry) - _CAPABILITY_KEYS
    if unknown:
        raise RuleError(f"{owner}: unknown capability keys {sorted(unknown)}")
    name = entry.get("name")
    if not name or "pattern" not in entry:
        raise RuleError(f"{owner}: capability entries need a name and a pattern")
    try:
        kind = CapabilityKind(entry.get("kind"))
    except ValueError:
        raise RuleError(f"{owner}: capability {name!r} has unknown kind {entry.get('kind')!r}") from None

    parser = entry.get("parser", "text")
    if parser not in VALUE_PARSERS:
        raise RuleError(f"{owner}: capability {name!r} uses unknown parser {parser!r}")

    codes = entry.get("codes")
    if codes is not None:
        codes = {k.upper(): v for k, v in _mapping(codes, f"capability {name!r} codes", owner).items()}
        if kind is CapabilityKind.NUMERIC_RANGE and not all(_is_number(v) for v in codes.values()):
            raise RuleError(f"{owner}: numeric capability {name!r} has non-numeric codes")

    exact = bool(entry.get("exact", False))
    if exact and kind is not CapabilityKind.NUMERIC_RANGE:
        raise RuleError(f"{owner}: only numeric_range capabilities can be exact ({name!r})")

    return CapabilityRule(
        name=name,
        kind=kind,
        pattern=compile_matcher(entry["pattern"]),
        parser=parser,
        codes=codes,
        value=entry.get("value"),
        exact=exact,
    )


def _value_encoding(rule: CapabilityRule) -> str:
    """How the values a rule yields compare: "number", "version", "text" or a type name."""
    if rule.value is not None and not isinstance(rule.value, str):
        return "number" if _is_number(rule.value) else type(rule.value).__name__
    if rule.value is None and rule.codes is not None:
        return "number" if all(_is_number(v) for v in rule.codes.values()) else "text"
    return _PARSER_ENCODINGS.get(rule.parser, "number")


def _check_capability_rules(rules: Sequence[CapabilityRule], owner: str) -> None:
    """One kind per name, and one value encoding per ordinal or numeric name."""
    kinds: dict[str, CapabilityKind] = {}
    encodings: dict[str, str] = {}
    for rule in rules:
        if kinds.setdefault(rule.name, rule.kind) is not rule.kind:
            raise RuleError(f"{owner}: capability {rule.name!r} declared with two kinds")
        if rule.kind is CapabilityKind.SET:
            continue
        encoding = _value_encoding(rule)
        if rule.kind is CapabilityKind.NUMERIC_RANGE and encoding != "number":
            raise RuleError(f"{owner}: numeric capability {rule.name!r} yields {encoding} values")
        if encodings.setdefault(rule.name, encoding) != encoding:
            raise RuleError(
                f"{owner}: capability {rule.name!r} mixes value encodings "
                f"({encodings[rule.name]} and {encoding})"
            )


def build_provider(table: Mapping[str, Any]) -> TableProvider:
    """Turn one declarative table into a TableProvider.

    Raises:
        RuleError: unknown keys, bad regexes, unknown types, kinds or parsers.
    """
    if not isinstance(table, Mapping):
        raise RuleError(f"Rule table must be an object, got {type(table).__name__}")
    owner = table.get("owner")
    if not owner or not isinstance(owner, str):
        raise RuleError("Rule table is missing an owner")
    unknown = set(table) - _KNOWN_KEYS
    if unknown:
        raise RuleError(f"{owner}: unknown table keys {sorted(unknown)}")

    patterns = [
        (_component_type(t, owner), compile_matcher(p))
        for t, p in _pairs(table.get("patterns", []), "patterns", owner)
    ]
    fast_paths = [
        (compile_matcher(p), _component_type(t, owner))
        for p, t in _pairs(table.get("fast_paths", []), "fast_paths", owner)
    ]
    if not patterns and not fast_paths:
        raise RuleError(f"{owner}: a rule table needs at least one pattern")

    capability_rules = [_capability_rule(e, owner) for e in _entries(table, "capabilities", owner)]
    _check_capability_rules(capability_rules, owner)

    package_codes = table.get("package_codes") or {}
    if not isinstance(package_codes, Mapping):
        raise RuleError(f"{owner}: package_codes must be an object")

    try:
        priority = int(table.get("priority", 0))
    except (TypeError, ValueError):
        raise RuleError(f"{owner}: priority must be an integer") from None

    return TableProvider(
        owner,
        patterns,
        name=table.get("name"),
        priority=priority,
        fast_paths=fast_paths,
        series_patterns=[_series_pattern(e, owner) for e in _entries(table, "series", owner)],
        series_families=[_series_family(e, owner) for e in _entries(table, "families", owner)],
        package_rules=[_package_rule(e, owner) for e in _entries(table, "package_rules", owner)],
        package_codes=package_codes,
        use_standard_packages=bool(table.get("use_standard_packages", True)),
        capability_rules=capability_rules,
        match_package=bool(table.get("match_package", False)),
        package_classes=[_package_class_rule(e, owner) for e in _entries(table, "package_classes", owner)],
        cross_references=[
            PairRule(compile_matcher(r), compile_matcher(c))
            for r, c in _pairs(table.get("cross_references", []), "cross_references", owner)
        ],
        exclusions=[
            PairRule(compile_matcher(r), compile_matcher(c))
            for r, c in _pairs(table.get("exclusions", []), "exclusions", owner)
        ],
    )


def load_rules(path: str | Path) -> list[TableProvider]:
    """Load providers from a JSON document.

    The document is either a list of tables or {"providers": [...]}.

    Raises:
        RuleError: unreadable JSON or any malformed table.
        OSError: the file cannot be read.
    """
    path = Path(path)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise RuleError(f"Invalid JSON in rule file {path}: {e}") from e

    if isinstance(document, Mapping):
        document = document.get("providers")
    if not isinstance(document, list):
        raise RuleError(f"Rule file {path} must contain a list of provider tables")

    providers = [build_provider(table) for table in document]
    logger.info(f"Loaded {len(providers)} rule providers from {path}")
    return providers


def default_providers() -> list[TableProvider]:
    """Providers for the bundled manufacturer tables, in registration order."""
    return [build_provider(table) for table in BUNDLED_RULES]


def fallback_provider() -> TableProvider:
    """The generic provider for parts no manufacturer rule set claims."""
    return build_provider(FALLBACK_RULES)


def merge_providers(*groups: Sequence[TableProvider]) -> list[TableProvider]:
    """Concatenate provider groups; a later provider replaces an earlier one with the same owner."""
    merged: dict[str, TableProvider] = {}
    for group in groups:
        for provider in group:
            if provider.owner_id in merged:
                logger.warning(f"Rule provider {provider.owner_id!r} overridden by a later table")
            merged[provider.owner_id] = provider
    return list(merged.values())

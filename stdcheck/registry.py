"""Rule registry: load named standards from YAML rule files."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from .checks import get_check
from .errors import ConfigurationError
from .levels import Level, Status
from .utils import read_yaml_file

logger = logging.getLogger(__name__)

BUILTIN_STANDARDS_DIR = Path(__file__).parent / "standards"
STANDARD_SUFFIXES = (".yaml", ".yml")
RULE_KEYS = {
    "id",
    "level",
    "category",
    "description",
    "forbidden",
    "required",
    "checks",
    "applies_to",
    "on_missing",
    "recommendation",
}
ON_MISSING_CHOICES = {
    "manual_review": Status.MANUAL_REVIEW,
    "violated": Status.VIOLATED,
}


@dataclass(frozen=True)
class Applicability:
    """Where a rule or category applies. Empty means everywhere."""

    extensions: Tuple[str, ...] = ()
    patterns: Tuple[re.Pattern[str], ...] = ()

    @property
    def unrestricted(self) -> bool:
        return not self.extensions and not self.patterns


@dataclass(frozen=True)
class Rule:
    """A single normative statement with its machine-checkable predicates."""

    id: str
    level: Level
    category: str
    description: str
    standard: str = ""
    forbidden: Tuple[re.Pattern[str], ...] = ()
    required: Tuple[re.Pattern[str], ...] = ()
    checks: Tuple[str, ...] = ()
    applies_to: Applicability = field(default_factory=Applicability)
    on_missing: Status = Status.MANUAL_REVIEW
    recommendation: str = ""

    @property
    def machine_checkable(self) -> bool:
        return bool(self.forbidden or self.required or self.checks)


# ----------------------------------------------------------------------
# Discovery
# ----------------------------------------------------------------------
def standard_paths(rules_dirs: Iterable[str | Path] = ()) -> Dict[str, Path]:
    """Map standard names to files. Extra directories shadow built-in ones."""

    paths: Dict[str, Path] = {}
    for directory in [*map(Path, rules_dirs), BUILTIN_STANDARDS_DIR]:
        if not directory.is_dir():
            raise ConfigurationError(f"rules directory not found: {directory}")
        for path in sorted(directory.iterdir()):
            if path.suffix in STANDARD_SUFFIXES and path.is_file():
                paths.setdefault(normalize_standard_name(path.stem), path)
    return paths


def list_standards(rules_dirs: Iterable[str | Path] = ()) -> List[str]:
    return sorted(standard_paths(rules_dirs))


def load_rules(standard_name: str, rules_dirs: Iterable[str | Path] = ()) -> Tuple[Rule, ...]:
    """Return the rules of ``standard_name`` in file order.

    Raises :class:`ConfigurationError` if the standard is unknown or any rule
    in it is malformed.
    """

    name = normalize_standard_name(standard_name)
    paths = standard_paths(rules_dirs)
    if name not in paths:
        known = ", ".join(sorted(paths)) or "none"
        raise ConfigurationError(f"unknown standard {standard_name!r} (available: {known})")
    path = paths[name]
    rules = parse_standard(read_yaml_file(path), source=str(path), name=name)
    logger.debug("loaded %d rules for standard %s from %s", len(rules), name, path)
    return rules


def load_standards(
    names: Sequence[str],
    rules_dirs: Iterable[str | Path] = (),
    disabled: Iterable[str] = (),
) -> Tuple[Rule, ...]:
    """Concatenate several standards, skipping ``disabled`` rule ids."""

    rules_dirs = tuple(rules_dirs)
    disabled_ids = {rule_id.upper() for rule_id in disabled}
    seen: Dict[str, str] = {}
    collected: List[Rule] = []
    for name in names:
        for rule in load_rules(name, rules_dirs):
            if rule.id in seen:
                raise ConfigurationError(
                    f"duplicate rule id {rule.id!r} in standards {seen[rule.id]!r} and {rule.standard!r}"
                )
            seen[rule.id] = rule.standard
            if rule.id.upper() in disabled_ids:
                logger.info("rule %s disabled by configuration", rule.id)
                continue
            collected.append(rule)
    return tuple(collected)


# ----------------------------------------------------------------------
# Parsing
# ----------------------------------------------------------------------
def parse_standard(data: Any, source: str, name: str) -> Tuple[Rule, ...]:
    if not isinstance(data, dict):
        raise ConfigurationError(f"{source}: a standard must be a mapping with a 'rules' list")
    categories = _parse_categories(data.get("categories") or {}, source)
    raw_rules = data.get("rules")
    if raw_rules is None:
        raw_rules = []
    if not isinstance(raw_rules, list):
        raise ConfigurationError(f"{source}: 'rules' must be a list")

    rules: List[Rule] = []
    seen_ids = set()
    for index, raw in enumerate(raw_rules):
        rule = _parse_rule(raw, categories, source=f"{source}: rules[{index}]", standard=name)
        if rule.id in seen_ids:
            raise ConfigurationError(f"{source}: duplicate rule id {rule.id!r}")
        seen_ids.add(rule.id)
        rules.append(rule)
    return tuple(rules)


def _parse_categories(raw: Any, source: str) -> Dict[str, Applicability]:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{source}: 'categories' must be a mapping")
    categories: Dict[str, Applicability] = {}
    for category, entry in raw.items():
        applies_to = entry.get("applies_to") if isinstance(entry, dict) else None
        categories[str(category)] = _parse_applicability(applies_to, f"{source}: categories.{category}")
    return categories


def _parse_rule(raw: Any, categories: Mapping[str, Applicability], source: str, standard: str) -> Rule:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{source}: rule must be a mapping")
    unknown = set(raw) - RULE_KEYS
    if unknown:
        raise ConfigurationError(f"{source}: unknown keys {sorted(unknown)}")
    for key in ("id", "description"):
        if not str(raw.get(key) or "").strip():
            raise ConfigurationError(f"{source}: missing {key!r}")
    rule_id = str(raw["id"]).strip()
    source = f"{source} ({rule_id})"

    try:
        level = Level.parse(raw.get("level", "SHOULD"))
    except ValueError as exc:
        raise ConfigurationError(f"{source}: {exc}") from None

    category = str(raw.get("category") or "general")
    if categories and category not in categories:
        raise ConfigurationError(f"{source}: unknown category {category!r}")
    if "applies_to" in raw:
        applies_to = _parse_applicability(raw["applies_to"], source)
    else:
        applies_to = categories.get(category, Applicability())

    checks = tuple(str(name) for name in _ensure_list(raw.get("checks"), "checks", source))
    for check_name in checks:
        try:
            get_check(check_name)
        except ConfigurationError as exc:
            raise ConfigurationError(f"{source}: {exc}") from None

    on_missing_raw = str(raw.get("on_missing", "manual_review")).strip().lower()
    if on_missing_raw not in ON_MISSING_CHOICES:
        raise ConfigurationError(
            f"{source}: on_missing must be one of {sorted(ON_MISSING_CHOICES)}, got {on_missing_raw!r}"
        )

    return Rule(
        id=rule_id,
        level=level,
        category=category,
        description=" ".join(str(raw["description"]).split()),
        standard=standard,
        forbidden=_compile_patterns(raw.get("forbidden"), "forbidden", source),
        required=_compile_patterns(raw.get("required"), "required", source),
        checks=checks,
        applies_to=applies_to,
        on_missing=ON_MISSING_CHOICES[on_missing_raw],
        recommendation=" ".join(str(raw.get("recommendation") or "").split()),
    )


def _parse_applicability(raw: Any, source: str) -> Applicability:
    if raw is None:
        return Applicability()
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{source}: 'applies_to' must be a mapping")
    extensions = []
    for ext in _ensure_list(raw.get("extensions"), "extensions", source):
        ext = str(ext).lower()
        extensions.append(ext if ext.startswith(".") else f".{ext}")
    return Applicability(
        extensions=tuple(extensions),
        patterns=_compile_patterns(raw.get("patterns"), "patterns", source),
    )


def _compile_patterns(raw: Any, key: str, source: str) -> Tuple[re.Pattern[str], ...]:
    compiled = []
    for expression in _ensure_list(raw, key, source):
        try:
            compiled.append(re.compile(str(expression), re.MULTILINE))
        except re.error as exc:
            raise ConfigurationError(f"{source}: invalid {key} pattern {expression!r}: {exc}") from None
    return tuple(compiled)


def _ensure_list(value: Any, key: str, source: str) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        return [value]
    raise ConfigurationError(f"{source}: {key!r} must be a string or a list")


def normalize_standard_name(name: str) -> str:
    return name.strip().lower().replace("_", "-")


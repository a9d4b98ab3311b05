"""Best-effort evidence scanner.

Evidence is found by regular expressions declared on each rule and by the
built-in programmatic checks. Matching is heuristic: a match is a hint for
the evaluator, not proof of compliance or non-compliance. Scanning never
raises; absence of evidence is a valid result.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Tuple

from .checks import Hit, get_check
from .registry import Rule
from .result import Evidence, EvidenceKind
from .target import Target
from .utils import line_starts, locate

logger = logging.getLogger(__name__)

MAX_EXCERPT = 200

# (line, column, excerpt) per regex match
RawMatch = Tuple[int, int, str]


class Scanner:
    """Scan one target, caching pattern and check results across rules."""

    def __init__(self, target: Target) -> None:
        self.target = target
        self._pattern_cache: Dict[Tuple[str, int], List[RawMatch]] = {}
        self._check_cache: Dict[str, List[Hit]] = {}
        self._line_starts: Optional[List[int]] = None

    def applies(self, rule: Rule) -> bool:
        """Return whether ``rule`` is relevant to the target at all."""

        scope = rule.applies_to
        if scope.unrestricted:
            return True
        if self.target.suffix and self.target.suffix in scope.extensions:
            return True
        if self.target.unreadable and scope.patterns:
            # Content-based scopes cannot be ruled out without the content.
            return True
        return any(self._matches(pattern) for pattern in scope.patterns)

    def scan(self, rule: Rule) -> List[Evidence]:
        evidence: List[Evidence] = []
        for pattern in rule.forbidden:
            for line, column, excerpt in self._matches(pattern):
                evidence.append(
                    self._evidence(rule, EvidenceKind.FORBIDDEN, line, column, excerpt, f"matches /{pattern.pattern}/")
                )
        for pattern in rule.required:
            for line, column, excerpt in self._matches(pattern):
                evidence.append(
                    self._evidence(rule, EvidenceKind.REQUIRED, line, column, excerpt, f"matches /{pattern.pattern}/")
                )
        for check_name in rule.checks:
            for hit in self._run_check(check_name):
                evidence.append(
                    self._evidence(
                        rule,
                        EvidenceKind.FORBIDDEN,
                        hit.line,
                        hit.column,
                        hit.excerpt,
                        hit.detail,
                        ambiguous=hit.ambiguous,
                    )
                )
        evidence.sort(key=lambda item: (item.line, item.column, item.kind.value, item.excerpt))
        return evidence

    # ------------------------------------------------------------------
    # Cached primitives
    # ------------------------------------------------------------------
    def _matches(self, pattern: re.Pattern[str]) -> List[RawMatch]:
        key = (pattern.pattern, pattern.flags)
        cached = self._pattern_cache.get(key)
        if cached is None:
            text = self.target.text
            cached = []
            for match in pattern.finditer(text):
                line, column = locate(text, match.start(), self._starts())
                cached.append((line, column, match.group(0)))
            self._pattern_cache[key] = cached
        return cached

    def _starts(self) -> List[int]:
        if self._line_starts is None:
            self._line_starts = line_starts(self.target.text)
        return self._line_starts

    def _run_check(self, name: str) -> List[Hit]:
        cached = self._check_cache.get(name)
        if cached is None:
            try:
                cached = list(get_check(name).run(self.target))
            except Exception as exc:  # pylint: disable=broad-except
                logger.exception("check %s failed on %s", name, self.target.name)
                self.target.warn(f"check {name} failed: {exc}")
                cached = []
            self._check_cache[name] = cached
        return cached

    def _evidence(
        self,
        rule: Rule,
        kind: EvidenceKind,
        line: int,
        column: int,
        excerpt: str,
        detail: str,
        ambiguous: bool = False,
    ) -> Evidence:
        if len(excerpt) > MAX_EXCERPT:
            excerpt = excerpt[: MAX_EXCERPT - 3] + "..."
        return Evidence(
            rule_id=rule.id,
            kind=kind,
            location=f"{self.target.name}:{line}:{column}",
            excerpt=excerpt,
            detail=detail,
            ambiguous=ambiguous,
            line=line,
            column=column,
        )


def scan(target: Target, rule: Rule) -> List[Evidence]:
    """Return evidence relevant to ``rule`` without keeping a cache."""

    return Scanner(target).scan(rule)

"""Combine scanner evidence into one finding per rule."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol, Sequence

from .levels import Status
from .registry import Rule
from .result import Evidence, EvidenceKind, Finding
from .scanner import Scanner
from .target import Target

logger = logging.getLogger(__name__)


class Reviewer(Protocol):
    """Optional external collaborator consulted for manual-review findings.

    Returning ``None`` leaves the finding in manual review.
    """

    name: str

    def review(self, rule: Rule, target: Target, evidence: Sequence[Evidence]) -> Optional[Status]:
        ...


def evaluate(target: Target, rules: Iterable[Rule], reviewer: Optional[Reviewer] = None) -> List[Finding]:
    """Evaluate ``rules`` in order against ``target``."""

    scanner = Scanner(target)
    findings = []
    for rule in rules:
        finding = evaluate_rule(scanner, rule)
        if reviewer is not None and finding.status is Status.MANUAL_REVIEW:
            finding = _consult_reviewer(reviewer, rule, target, finding)
        logger.debug("%s -> %s", rule.id, finding.status.value)
        findings.append(finding)
    return findings


def evaluate_rule(scanner: Scanner, rule: Rule) -> Finding:
    if not scanner.applies(rule):
        return _finding(rule, Status.NOT_APPLICABLE, (), note="rule does not apply to this target")
    if scanner.target.unreadable:
        return _finding(rule, Status.MANUAL_REVIEW, (), note="target could not be read")

    evidence = scanner.scan(rule)
    forbidden = [item for item in evidence if item.kind is EvidenceKind.FORBIDDEN]
    definite = [item for item in forbidden if not item.ambiguous]
    required = [item for item in evidence if item.kind is EvidenceKind.REQUIRED]

    if definite:
        return _finding(rule, Status.VIOLATED, definite, note=definite[0].detail)
    if forbidden:
        return _finding(rule, Status.MANUAL_REVIEW, forbidden, note="evidence is ambiguous")
    if rule.required:
        if required:
            return _finding(rule, Status.PASSED, required)
        return _finding(rule, rule.on_missing, (), note="required pattern not found")
    if rule.machine_checkable:
        return _finding(rule, Status.PASSED, ())
    return _finding(rule, Status.MANUAL_REVIEW, (), note="rule has no automated check")


def _consult_reviewer(reviewer: Reviewer, rule: Rule, target: Target, finding: Finding) -> Finding:
    verdict = reviewer.review(rule, target, finding.occurrences)
    if verdict not in (Status.PASSED, Status.VIOLATED):
        return finding
    logger.info("%s resolved %s as %s", reviewer.name, rule.id, verdict.value)
    return _finding(
        rule,
        verdict,
        finding.occurrences,
        note=f"resolved by reviewer {reviewer.name}",
    )


def _finding(rule: Rule, status: Status, evidence: Sequence[Evidence], note: str = "") -> Finding:
    first = evidence[0] if evidence else None
    return Finding(
        rule_id=rule.id,
        status=status,
        level=rule.level,
        category=rule.category,
        description=rule.description,
        location=first.location if first else None,
        evidence=first.excerpt if first else None,
        occurrences=tuple(evidence),
        note=note,
    )

"""Aggregate findings into a scored report and render it."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from fractions import Fraction
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .levels import LEVEL_ORDER, STATUS_ORDER, Level, Status
from .result import Finding

NOT_AVAILABLE = "N/A"


@dataclass
class Tally:
    """Finding counts by status."""

    passed: int = 0
    violated: int = 0
    not_applicable: int = 0
    manual_review: int = 0

    def increment(self, status: Status) -> None:
        attr = status.value.lower()
        setattr(self, attr, getattr(self, attr) + 1)

    def as_rows(self) -> List[Tuple[str, int]]:
        """Return status/count pairs ordered for reporting."""

        return [(status.label, getattr(self, status.value.lower())) for status in STATUS_ORDER]

    @property
    def total(self) -> int:
        return sum(getattr(self, status.value.lower()) for status in STATUS_ORDER)

    @property
    def score(self) -> Optional[Fraction]:
        return compute_score(self.passed, self.violated)

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = asdict(self)
        data["score"] = score_value(self.score)
        return data


@dataclass
class Report:
    """Bundle findings, scores and run metadata."""

    findings: List[Finding] = field(default_factory=list)
    summary: Tally = field(default_factory=Tally)
    categories: Dict[str, Tally] = field(default_factory=dict)
    target: str = ""
    standards: Tuple[str, ...] = ()
    warnings: List[str] = field(default_factory=list)
    fail_on: Level = Level.MUST

    @property
    def score(self) -> Optional[Fraction]:
        """Passed / (passed + violated), or ``None`` when nothing was decided."""

        return self.summary.score

    @property
    def score_display(self) -> str:
        return format_score(self.score)

    @property
    def passed(self) -> bool:
        return not self.failing_findings()

    def failing_findings(self, fail_on: Optional[Level] = None) -> List[Finding]:
        threshold = (fail_on or self.fail_on).rank
        return [
            finding
            for finding in self.findings
            if finding.status is Status.VIOLATED and finding.level.rank >= threshold
        ]

    def exit_code(self, fail_on: Optional[Level] = None) -> int:
        return 1 if self.failing_findings(fail_on) else 0

    def top_findings(self, limit: int = 5) -> List[Finding]:
        """Return violations ordered by level, then rule id."""

        level_rank = {level: idx for idx, level in enumerate(LEVEL_ORDER)}
        violations = [finding for finding in self.findings if finding.status is Status.VIOLATED]
        ordered = sorted(violations, key=lambda finding: (level_rank[finding.level], finding.rule_id))
        return ordered[:limit]

    def to_dict(self) -> Dict[str, object]:
        return {
            "target": self.target,
            "standards": list(self.standards),
            "score": score_value(self.score),
            "scorePercent": self.score_display,
            "passed": self.passed,
            "failOn": self.fail_on.value,
            "summary": self.summary.to_dict(),
            "categories": {name: tally.to_dict() for name, tally in self.categories.items()},
            "findings": [finding.to_dict() for finding in self.findings],
            "warnings": list(self.warnings),
        }


def compute_score(passed: int, violated: int) -> Optional[Fraction]:
    denominator = passed + violated
    if denominator == 0:
        return None
    return Fraction(passed, denominator)


def score_value(score: Optional[Fraction]) -> object:
    """JSON representation: a float rounded to four places, or ``"N/A"``."""

    if score is None:
        return NOT_AVAILABLE
    return round(float(score), 4)


def format_score(score: Optional[Fraction]) -> str:
    if score is None:
        return NOT_AVAILABLE
    return f"{float(score) * 100:.1f}%"


def build_report(
    findings: Iterable[Finding],
    target: str = "",
    standards: Sequence[str] = (),
    warnings: Sequence[str] = (),
    fail_on: Level = Level.MUST,
) -> Report:
    report = Report(target=target, standards=tuple(standards), warnings=list(warnings), fail_on=fail_on)
    for finding in findings:
        report.findings.append(finding)
        report.summary.increment(finding.status)
        report.categories.setdefault(finding.category, Tally()).increment(finding.status)
    return report


# ----------------------------------------------------------------------
# Renderers
# ----------------------------------------------------------------------
def render_json(report: Report) -> str:
    return json.dumps(report.to_dict(), indent=2)


def format_summary_table(report: Report, max_findings: int = 5) -> str:
    """Create a human-readable summary table for console output."""

    lines: List[str] = []
    lines.append("Compliance Summary")
    lines.append("=" * 40)
    header = f"{'Status':<20} | {'Count':>5}"
    lines.append(header)
    lines.append("-" * len(header))
    for label, count in report.summary.as_rows():
        lines.append(f"{label:<20} | {count:>5}")
    lines.append("-" * len(header))
    status = "PASS" if report.passed else "FAIL"
    lines.append(f"Score     : {report.score_display}")
    lines.append(f"Status    : {status} (fail on {report.fail_on.value})")
    lines.append(f"Rules     : {report.summary.total}")

    findings = report.top_findings(max_findings)
    if findings:
        lines.append("")
        lines.append("Top Violations")
        lines.append("-" * 40)
        for finding in findings:
            lines.append(f"[{finding.level.value}] {finding.rule_id} {finding.description}")
            if finding.location:
                lines.append(f"  Location: {finding.location}")
            if finding.evidence:
                lines.append(f"  Evidence: {finding.evidence}")
    if report.warnings:
        lines.append("")
        lines.append("Warnings")
        lines.append("-" * 40)
        lines.extend(f"- {warning}" for warning in report.warnings)
    return "\n".join(lines)


def render_markdown(report: Report) -> str:
    """Render the findings table with a top-line score."""

    summary = report.summary
    lines = [f"# Compliance report: {report.target or 'target'}", ""]
    if report.standards:
        lines.append(f"Standards: {', '.join(report.standards)}")
        lines.append("")
    lines.append(
        f"**Score: {report.score_display}** "
        f"({summary.passed} passed, {summary.violated} violated, "
        f"{summary.not_applicable} not applicable, {summary.manual_review} need manual review)"
    )
    lines.append("")
    lines.append("| Rule | Level | Category | Status | Location | Evidence |")
    lines.append("|------|-------|----------|--------|----------|----------|")
    for finding in report.findings:
        evidence = f"`{_cell(finding.evidence)}`" if finding.evidence else ""
        lines.append(
            f"| {_cell(finding.rule_id)} | {finding.level.value} | {_cell(finding.category)} "
            f"| {finding.status.label} | {_cell(finding.location or '')} | {evidence} |"
        )

    if report.categories:
        lines.append("")
        lines.append("## Category scores")
        lines.append("")
        lines.append("| Category | Passed | Violated | Not applicable | Manual review | Score |")
        lines.append("|----------|--------|----------|----------------|---------------|-------|")
        for name, tally in report.categories.items():
            lines.append(
                f"| {_cell(name)} | {tally.passed} | {tally.violated} | {tally.not_applicable} "
                f"| {tally.manual_review} | {format_score(tally.score)} |"
            )

    if report.warnings:
        lines.append("")
        lines.append("## Warnings")
        lines.append("")
        lines.extend(f"- {warning}" for warning in report.warnings)
    return "\n".join(lines) + "\n"


def _cell(value: str) -> str:
    return value.replace("|", "\\|").replace("\n", " ").replace("`", "'")

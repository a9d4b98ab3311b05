"""Requirement levels and finding statuses."""

from __future__ import annotations

from enum import Enum


class Level(str, Enum):
    """RFC 2119 requirement strength of a rule."""

    MUST = "MUST"
    SHOULD = "SHOULD"
    MAY = "MAY"

    @property
    def rank(self) -> int:
        """Return an integer ranking to drive exit code decisions."""

        ordering = {
            Level.MUST: 2,
            Level.SHOULD: 1,
            Level.MAY: 0,
        }
        return ordering[self]

    @classmethod
    def parse(cls, value: object) -> "Level":
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"unknown level {value!r}, expected one of MUST, SHOULD, MAY") from None


class Status(str, Enum):
    """Outcome of evaluating one rule against one target."""

    PASSED = "PASSED"
    VIOLATED = "VIOLATED"
    NOT_APPLICABLE = "NOT_APPLICABLE"
    MANUAL_REVIEW = "MANUAL_REVIEW"

    @property
    def label(self) -> str:
        labels = {
            Status.PASSED: "Passed",
            Status.VIOLATED: "Violated",
            Status.NOT_APPLICABLE: "Not applicable",
            Status.MANUAL_REVIEW: "Needs manual review",
        }
        return labels[self]


LEVEL_ORDER = (Level.MUST, Level.SHOULD, Level.MAY)
STATUS_ORDER = (Status.VIOLATED, Status.MANUAL_REVIEW, Status.PASSED, Status.NOT_APPLICABLE)

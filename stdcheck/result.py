"""Core result data structures for the checker."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .levels import Level, Status


class EvidenceKind(str, Enum):
    """Whether a fragment counts against a rule or towards satisfying it."""

    FORBIDDEN = "forbidden"
    REQUIRED = "required"


@dataclass(frozen=True)
class Evidence:
    """A fragment of the target relevant to judging one rule."""

    rule_id: str
    kind: EvidenceKind
    location: str
    excerpt: str
    detail: str = ""
    ambiguous: bool = False
    line: int = 0
    column: int = 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "kind": self.kind.value,
            "location": self.location,
            "excerpt": self.excerpt,
            "detail": self.detail,
            "ambiguous": self.ambiguous,
        }


@dataclass(frozen=True)
class Finding:
    """Capture a single rule evaluation result."""

    rule_id: str
    status: Status
    level: Level
    category: str
    description: str
    location: Optional[str] = None
    evidence: Optional[str] = None
    occurrences: Tuple[Evidence, ...] = field(default=())
    note: str = ""

    def to_dict(self) -> Dict[str, object]:
        return {
            "ruleId": self.rule_id,
            "status": self.status.value,
            "level": self.level.value,
            "category": self.category,
            "description": self.description,
            "location": self.location,
            "evidence": self.evidence,
            "occurrences": [item.to_dict() for item in self.occurrences],
            "note": self.note,
        }

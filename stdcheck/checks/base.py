"""Shared types for built-in programmatic checks."""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

from stdcheck.target import Target

PYTHON_SUFFIXES = (".py", ".pyi")


@dataclass(frozen=True)
class Hit:
    """A location a check considers relevant, before it is tied to a rule."""

    line: int
    column: int
    excerpt: str
    detail: str
    ambiguous: bool = False


class Check(Protocol):
    """Protocol implemented by all built-in checks."""

    name: str

    def run(self, target: Target) -> Iterable[Hit]:
        """Yield hits found in ``target``."""


def parse_python(target: Target) -> Optional[ast.Module]:
    """Return the module AST, or ``None`` when the target is not Python."""

    if target.path is not None and target.suffix not in PYTHON_SUFFIXES:
        return None
    if not target.text.strip():
        return None
    try:
        return ast.parse(target.text)
    except (SyntaxError, ValueError):
        return None


def node_excerpt(target: Target, node: ast.AST) -> str:
    segment = ast.get_source_segment(target.text, node)
    if segment is None:
        return ""
    first_line = segment.splitlines()[0] if segment else ""
    return first_line.strip()

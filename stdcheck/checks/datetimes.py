"""Detect construction of naive (timezone-less) datetimes in Python."""

from __future__ import annotations

import ast
from typing import Iterator, Optional

from stdcheck.target import Target

from .base import Hit, node_excerpt, parse_python

ALWAYS_NAIVE = {"utcnow", "utcfromtimestamp"}
NAIVE_WITHOUT_TZ = {"now": 0, "fromtimestamp": 1}


class NaiveDatetimeCheck:
    """Flag ``datetime`` calls that produce values without tzinfo."""

    name = "naive_datetime"

    def run(self, target: Target) -> Iterator[Hit]:
        tree = parse_python(target)
        if tree is None:
            return
        for node in ast.walk(tree):
            if not isinstance(node, ast.Call) or not isinstance(node.func, ast.Attribute):
                continue
            if not self._is_datetime_class(node.func.value):
                continue
            detail = self._classify(node)
            if detail:
                yield Hit(node.lineno, node.col_offset + 1, node_excerpt(target, node), detail)

    def _classify(self, node: ast.Call) -> Optional[str]:
        method = node.func.attr
        if method in ALWAYS_NAIVE:
            return f"datetime.{method}() returns a naive datetime"
        if method == "today":
            return "datetime.today() returns a naive local datetime"
        if method in NAIVE_WITHOUT_TZ:
            tz_position = NAIVE_WITHOUT_TZ[method]
            has_tz = len(node.args) > tz_position or any(kw.arg == "tz" for kw in node.keywords)
            if not has_tz:
                return f"datetime.{method}() called without tz"
        return None

    def _is_datetime_class(self, node: ast.AST) -> bool:
        # Matches ``datetime.now()`` and ``datetime.datetime.now()``.
        if isinstance(node, ast.Name):
            return node.id == "datetime"
        if isinstance(node, ast.Attribute):
            return node.attr == "datetime" and isinstance(node.value, ast.Name) and node.value.id == "datetime"
        return False

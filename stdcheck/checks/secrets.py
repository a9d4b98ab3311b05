"""Detect hardcoded credentials in source and configuration text."""

from __future__ import annotations

import ast
import re
from typing import Iterator, Optional, Tuple

from stdcheck.target import Target
from stdcheck.utils import line_excerpt, line_starts, locate

from .base import Hit, parse_python

KEY_PATTERN = re.compile(r"(?i)(secret|token|api[_-]?key|password|passwd|access[_-]?key|private[_-]?key|credential)")
LONG_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_\-]{24,}")
AWS_ACCESS_KEY_PATTERN = re.compile(r"(?:A3T|AKIA|ASIA)[0-9A-Z]{16}")
JWT_PATTERN = re.compile(r"eyJ[A-Za-z0-9_\-]+?\.[A-Za-z0-9_\-]+?\.[A-Za-z0-9_\-]+")
PRIVATE_KEY_PATTERN = re.compile(r"-----BEGIN (?:RSA |EC |OPENSSH |DSA )?PRIVATE KEY-----")
ASSIGNMENT_PATTERN = re.compile(
    r"(?P<name>[A-Za-z_][\w.\-]*)[\"']?\s*[:=]\s*[\"']?(?P<value>[^\"'\s,;]+)"
)
PLACEHOLDER_HINTS = ("dummy", "example", "placeholder", "sample", "changeme", "xxxx", "your_", "<")


class HardcodedSecretCheck:
    """Flag literal credentials assigned to secret-looking names."""

    name = "hardcoded_secret"

    def run(self, target: Target) -> Iterator[Hit]:
        tree = parse_python(target)
        if tree is not None:
            yield from self._scan_python(target, tree)
        else:
            yield from self._scan_text(target)

    # ------------------------------------------------------------------
    # Python analysis
    # ------------------------------------------------------------------
    def _scan_python(self, target: Target, tree: ast.Module) -> Iterator[Hit]:
        for node in ast.walk(tree):
            for name, value_node in self._named_values(node):
                if not (isinstance(value_node, ast.Constant) and isinstance(value_node.value, str)):
                    continue
                hit = self._evaluate_candidate(
                    name=name,
                    value=value_node.value,
                    line=value_node.lineno,
                    column=value_node.col_offset + 1,
                    excerpt=line_excerpt(target.text, value_node.lineno),
                )
                if hit:
                    yield hit

    def _named_values(self, node: ast.AST) -> Iterator[Tuple[str, ast.AST]]:
        if isinstance(node, ast.Assign):
            for target_node in node.targets:
                name = self._target_name(target_node)
                if name:
                    yield name, node.value
        elif isinstance(node, ast.AnnAssign) and node.value is not None:
            name = self._target_name(node.target)
            if name:
                yield name, node.value
        elif isinstance(node, ast.keyword) and node.arg:
            yield node.arg, node.value
        elif isinstance(node, ast.Dict):
            for key, value in zip(node.keys, node.values):
                if isinstance(key, ast.Constant) and isinstance(key.value, str):
                    yield key.value, value

    def _target_name(self, node: ast.AST) -> Optional[str]:
        if isinstance(node, ast.Name):
            return node.id
        if isinstance(node, ast.Attribute):
            return node.attr
        return None

    # ------------------------------------------------------------------
    # Plain text analysis
    # ------------------------------------------------------------------
    def _scan_text(self, target: Target) -> Iterator[Hit]:
        text = target.text
        starts = line_starts(text)
        for match in PRIVATE_KEY_PATTERN.finditer(text):
            line, column = locate(text, match.start(), starts)
            yield Hit(line, column, match.group(0), "embedded private key")
        for match in ASSIGNMENT_PATTERN.finditer(text):
            line, column = locate(text, match.start(), starts)
            hit = self._evaluate_candidate(
                name=match.group("name"),
                value=match.group("value"),
                line=line,
                column=column,
                excerpt=match.group(0),
            )
            if hit:
                yield hit

    # ------------------------------------------------------------------
    # Scoring helpers
    # ------------------------------------------------------------------
    def _evaluate_candidate(
        self,
        name: str,
        value: str,
        line: int,
        column: int,
        excerpt: Optional[str] = None,
    ) -> Optional[Hit]:
        indicator = self._classify_value(value)
        if indicator is None:
            return None
        # Generic long tokens only count when the name looks secret.
        if indicator == "long_token" and not KEY_PATTERN.search(name):
            return None
        lowered = value.lower()
        ambiguous = any(hint in lowered for hint in PLACEHOLDER_HINTS)
        detail = f"{indicator.replace('_', ' ')} assigned to {name!r}"
        if ambiguous:
            detail += " (value looks like a placeholder)"
        return Hit(line, column, excerpt or f"{name} = {value!r}", detail, ambiguous=ambiguous)

    def _classify_value(self, value: str) -> Optional[str]:
        if AWS_ACCESS_KEY_PATTERN.search(value):
            return "aws_access_key"
        if JWT_PATTERN.search(value):
            return "jwt"
        if PRIVATE_KEY_PATTERN.search(value):
            return "private_key"
        if LONG_TOKEN_PATTERN.search(value):
            return "long_token"
        return None

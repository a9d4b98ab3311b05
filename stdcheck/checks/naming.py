"""Python naming convention checks."""

from __future__ import annotations

import ast
import re
from typing import Iterator

from stdcheck.target import Target

from .base import Hit, parse_python

SNAKE_CASE = re.compile(r"^_{0,2}[a-z][a-z0-9_]*$")
DUNDER = re.compile(r"^__[a-z][a-z0-9_]*__$")
CAP_WORDS = re.compile(r"^_{0,2}[A-Z][A-Za-z0-9]*$")
# Framework hooks whose names are dictated by the base class.
EXEMPT_FUNCTION_PREFIXES = ("visit_", "depart_", "setUp", "tearDown", "asyncSetUp", "asyncTearDown")


class FunctionNamingCheck:
    """Flag function and method names that are not snake_case."""

    name = "function_naming"

    def run(self, target: Target) -> Iterator[Hit]:
        tree = parse_python(target)
        if tree is None:
            return
        for node in ast.walk(tree):
            if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                continue
            if SNAKE_CASE.match(node.name) or DUNDER.match(node.name):
                continue
            if node.name.startswith(EXEMPT_FUNCTION_PREFIXES):
                continue
            yield Hit(
                node.lineno,
                node.col_offset + 1,
                f"def {node.name}",
                f"function {node.name!r} is not snake_case",
            )


class ClassNamingCheck:
    """Flag class names that are not CapWords."""

    name = "class_naming"

    def run(self, target: Target) -> Iterator[Hit]:
        tree = parse_python(target)
        if tree is None:
            return
        for node in ast.walk(tree):
            if isinstance(node, ast.ClassDef) and not CAP_WORDS.match(node.name):
                yield Hit(
                    node.lineno,
                    node.col_offset + 1,
                    f"class {node.name}",
                    f"class {node.name!r} is not CapWords",
                )

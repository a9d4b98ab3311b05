"""Check that the public surface of a Python module is documented."""

from __future__ import annotations

import ast
from typing import Iterator

from stdcheck.target import Target

from .base import Hit, parse_python


class PublicDocstringCheck:
    name = "public_docstring"

    def run(self, target: Target) -> Iterator[Hit]:
        tree = parse_python(target)
        if tree is None:
            return
        for node in tree.body:
            if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
                continue
            if node.name.startswith("_"):
                continue
            if ast.get_docstring(node) is not None:
                continue
            is_class = isinstance(node, ast.ClassDef)
            kind = "class" if is_class else "function"
            keyword = "class" if is_class else "def"
            yield Hit(
                node.lineno,
                node.col_offset + 1,
                f"{keyword} {node.name}",
                f"public {kind} {node.name!r} has no docstring",
            )

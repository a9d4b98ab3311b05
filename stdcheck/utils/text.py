"""Helpers for turning match offsets into human-readable locations."""

from __future__ import annotations

from bisect import bisect_right
from typing import List, Optional, Sequence, Tuple


def line_starts(text: str) -> List[int]:
    """Return the offset at which each line of ``text`` begins."""

    starts = [0]
    index = text.find("\n")
    while index != -1:
        starts.append(index + 1)
        index = text.find("\n", index + 1)
    return starts


def locate(text: str, offset: int, starts: Optional[Sequence[int]] = None) -> Tuple[int, int]:
    """Return the 1-based ``(line, column)`` of ``offset`` in ``text``.

    Pass ``starts`` from :func:`line_starts` when locating many offsets in
    the same text.
    """

    if starts is None:
        starts = line_starts(text)
    line = bisect_right(starts, offset)
    return line, offset - starts[line - 1] + 1


def line_excerpt(text: str, lineno: int, limit: int = 120) -> str:
    lines = text.splitlines()
    if lineno < 1 or lineno > len(lines):
        return ""
    excerpt = lines[lineno - 1].strip()
    if len(excerpt) > limit:
        excerpt = excerpt[: limit - 3] + "..."
    return excerpt

"""Target artifacts handed to the scanner."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, TextIO

from .errors import ScanError
from .utils import read_text_file

logger = logging.getLogger(__name__)

STDIN_NAME = "<stdin>"
TEXT_NAME = "<text>"


@dataclass
class Target:
    """A text body plus enough metadata to decide rule applicability."""

    text: str
    name: str = TEXT_NAME
    path: Optional[Path] = None
    warnings: List[str] = field(default_factory=list)
    unreadable: bool = False

    @property
    def suffix(self) -> str:
        return self.path.suffix.lower() if self.path else ""

    def warn(self, message: str) -> None:
        logger.warning("%s: %s", self.name, message)
        self.warnings.append(message)


def target_from_text(text: str, name: str = TEXT_NAME) -> Target:
    return Target(text=text, name=name)


def load_target(path: str | Path) -> Target:
    """Read a target file.

    Raises a fatal :class:`ScanError` when the file is missing. Content that
    cannot be decoded is recovered as an empty, ``unreadable`` target
    carrying a warning.
    """

    target_path = Path(path)
    try:
        text = read_text_file(target_path)
    except ScanError as exc:
        if exc.fatal:
            raise
        target = Target(text="", name=str(target_path), path=target_path, unreadable=True)
        target.warn(f"{exc}; rules need manual review")
        return target
    return Target(text=text, name=str(target_path), path=target_path)


def load_stdin(stream: TextIO | None = None) -> Target:
    stream = stream or sys.stdin
    try:
        text = stream.read()
    except UnicodeDecodeError as exc:
        target = Target(text="", name=STDIN_NAME, unreadable=True)
        target.warn(f"stdin is not valid text ({exc.reason}); rules need manual review")
        return target
    return Target(text=text, name=STDIN_NAME)

"""Basic file IO helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from stdcheck.errors import ConfigurationError, ScanError


def read_yaml_file(path: Path) -> Any:
    """Return the parsed YAML if the file exists, otherwise ``None``."""

    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"{path}: invalid YAML: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"{path}: cannot read file: {exc}") from exc


def read_text_file(path: Path) -> str:
    """Return the file contents as UTF-8 text.

    A missing file is a fatal :class:`ScanError`; unreadable or undecodable
    content raises a non-fatal one.
    """

    if not path.exists():
        raise ScanError(f"target not found: {path}", fatal=True)
    if path.is_dir():
        raise ScanError(f"target is a directory: {path}", fatal=True)
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ScanError(f"{path}: content is not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc
    except OSError as exc:
        raise ScanError(f"{path}: cannot read target: {exc.strerror or exc}") from exc

"""Optional YAML configuration file.

Example ``.stdcheck.yaml``::

    standards: [security, cryptography]
    rules_dirs: [team-standards]
    disabled_rules: [SEC-004]
    fail_on: SHOULD
    format: markdown
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Tuple

from .errors import ConfigurationError
from .levels import Level
from .utils import read_yaml_file

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".stdcheck.yaml"
REPORT_FORMATS = ("json", "markdown")
CONFIG_KEYS = {"standards", "rules_dirs", "disabled_rules", "fail_on", "format"}


@dataclass(frozen=True)
class Config:
    standards: Tuple[str, ...] = ()
    rules_dirs: Tuple[str, ...] = ()
    disabled_rules: Tuple[str, ...] = ()
    fail_on: Level = Level.MUST
    format: str = "json"


def load_config(path: Optional[str] = None) -> Config:
    """Load ``path``, or ``.stdcheck.yaml`` from the working directory.

    An explicitly named file must exist; the default file is optional.
    """

    config_path = Path(path) if path else Path(CONFIG_FILENAME)
    if not config_path.exists():
        if path:
            raise ConfigurationError(f"config file not found: {path}")
        return Config()
    data = read_yaml_file(config_path)
    logger.debug("loaded configuration from %s", config_path)
    return parse_config(data, source=str(config_path), base_dir=config_path.parent)


def parse_config(data: Any, source: str = CONFIG_FILENAME, base_dir: Optional[Path] = None) -> Config:
    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigurationError(f"{source}: configuration must be a mapping")
    unknown = set(data) - CONFIG_KEYS
    if unknown:
        raise ConfigurationError(f"{source}: unknown keys {sorted(unknown)}")

    try:
        fail_on = Level.parse(data.get("fail_on", Level.MUST.value))
    except ValueError as exc:
        raise ConfigurationError(f"{source}: fail_on: {exc}") from None

    report_format = str(data.get("format", "json")).lower()
    if report_format not in REPORT_FORMATS:
        raise ConfigurationError(f"{source}: format must be one of {list(REPORT_FORMATS)}")

    rules_dirs = _string_list(data, "rules_dirs", source)
    if base_dir is not None:
        # Relative rule directories are resolved against the config file.
        rules_dirs = [str(base_dir / entry) if not Path(entry).is_absolute() else entry for entry in rules_dirs]

    return Config(
        standards=tuple(_string_list(data, "standards", source)),
        rules_dirs=tuple(rules_dirs),
        disabled_rules=tuple(name.upper() for name in _string_list(data, "disabled_rules", source)),
        fail_on=fail_on,
        format=report_format,
    )


def _string_list(data: dict, key: str, source: str) -> List[str]:
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    raise ConfigurationError(f"{source}: {key!r} must be a string or a list")

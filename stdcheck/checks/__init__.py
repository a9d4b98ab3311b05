"""Built-in programmatic checks referenced by name from standard files."""

from __future__ import annotations

from typing import Dict

from stdcheck.errors import ConfigurationError

from .base import Check, Hit, parse_python
from .datetimes import NaiveDatetimeCheck
from .docstrings import PublicDocstringCheck
from .naming import ClassNamingCheck, FunctionNamingCheck
from .secrets import HardcodedSecretCheck

BUILTIN_CHECKS: Dict[str, Check] = {
    check.name: check
    for check in (
        HardcodedSecretCheck(),
        NaiveDatetimeCheck(),
        FunctionNamingCheck(),
        ClassNamingCheck(),
        PublicDocstringCheck(),
    )
}


def get_check(name: str) -> Check:
    try:
        return BUILTIN_CHECKS[name]
    except KeyError:
        known = ", ".join(sorted(BUILTIN_CHECKS))
        raise ConfigurationError(f"unknown check {name!r} (known checks: {known})") from None


__all__ = ["BUILTIN_CHECKS", "Check", "Hit", "get_check", "parse_python"]

"""Exception types raised by the compliance checker."""

from __future__ import annotations


class StdcheckError(Exception):
    """Base class for errors the CLI reports with exit code 2."""


class ConfigurationError(StdcheckError):
    """Unknown standard, malformed rule definition or bad configuration file."""


class ScanError(StdcheckError):
    """The target could not be read.

    ``fatal`` errors (missing input) abort the run. Non-fatal errors are
    recovered by scanning an empty target and attaching a warning to the
    report.
    """

    def __init__(self, message: str, *, fatal: bool = False) -> None:
        super().__init__(message)
        self.fatal = fatal

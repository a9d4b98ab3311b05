"""Deterministic compliance checker for engineering standards."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("stdcheck")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

__all__ = ["__version__"]

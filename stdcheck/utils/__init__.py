"""Utility helpers for the checker."""

from .fileio import read_text_file, read_yaml_file
from .text import line_excerpt, line_starts, locate

__all__ = [
    "read_yaml_file",
    "read_text_file",
    "locate",
    "line_starts",
    "line_excerpt",
]

"""Common utility functions and helpers for the fabricconfig package."""

from fabricconfig.utils.file import ensure_directory_exists, write_file
from fabricconfig.utils.paths import substitute_gopath

__all__ = [
    "ensure_directory_exists",
    "substitute_gopath",
    "write_file",
]

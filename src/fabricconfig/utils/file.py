"""File utility functions."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Final

logger: Final = logging.getLogger(__name__)


def ensure_directory_exists(directory: Path) -> None:
    """Create directory if it doesn't exist.

    Args:
        directory: Path to create
    """
    if not directory.exists():
        directory.mkdir(parents=True, exist_ok=True)
        logger.debug("Created directory: %s", directory)


def write_file(file_path: Path, data: bytes, mode: int = 0o644) -> None:
    """Write bytes to a file, truncating it if it already exists.

    The permission bits only apply when the file is created, and are
    subject to the process umask.

    Args:
        file_path: Destination path
        data: Content to write
        mode: Permission bits for a newly created file

    Raises:
        OSError: If the file cannot be opened or written
    """
    ensure_directory_exists(file_path.parent)
    fd = os.open(file_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "wb") as fh:
        fh.write(data)
    logger.debug("Wrote %d bytes to %s", len(data), file_path)

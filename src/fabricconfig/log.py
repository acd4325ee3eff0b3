"""Logging setup for the fabricconfig package logger."""

from __future__ import annotations

import logging
import sys
from typing import Final

from fabricconfig.constants import LOG_DATE_FORMAT, LOG_FORMAT, LOGGER_NAME
from fabricconfig.errors import InvalidLogLevelError

NOTICE: Final = 25
logging.addLevelName(NOTICE, "NOTICE")

LOG_LEVELS: Final[dict[str, int]] = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "NOTICE": NOTICE,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

DEFAULT_LOG_LEVEL: Final = logging.INFO


def parse_log_level(name: str) -> int:
    """Translate a severity name into a ``logging`` level.

    Args:
        name: Severity name, any case. Empty means the default (INFO)

    Returns:
        Numeric logging level

    Raises:
        InvalidLogLevelError: If the name is not a known severity
    """
    if not name:
        return DEFAULT_LOG_LEVEL
    try:
        return LOG_LEVELS[name.strip().upper()]
    except KeyError:
        raise InvalidLogLevelError(name) from None


def configure_logging(level_name: str = "") -> logging.Logger:
    """Attach a stderr handler to the package logger and set its level.

    Calling this again swaps the previous handler rather than adding a
    second one.

    Returns:
        The configured package logger
    """
    level = parse_log_level(level_name)

    pkg_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(pkg_logger.handlers):
        if getattr(handler, "_fabricconfig_handler", False):
            pkg_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler._fabricconfig_handler = True  # type: ignore[attr-defined]
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(level)
    return pkg_logger

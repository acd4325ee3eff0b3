"""Path templating helpers."""

from __future__ import annotations

import os

from fabricconfig.constants import GOPATH_ENV_VAR, GOPATH_PLACEHOLDER


def substitute_gopath(path: str) -> str:
    """Replace every ``$GOPATH`` token with the ``GOPATH`` environment value.

    An unset variable substitutes the empty string.

    Args:
        path: Path possibly containing the placeholder

    Returns:
        Path with the placeholder expanded
    """
    return path.replace(GOPATH_PLACEHOLDER, os.getenv(GOPATH_ENV_VAR, ""))

"""Exception classes for client configuration resolution.

Errors are split in two branches. ``FatalConfigError`` subclasses describe
conditions the caller has no reasonable way to recover from (a startup
routine should abort). ``RecoverableConfigError`` subclasses are returned
to the caller, who decides what to do.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class FabricConfigError(Exception):
    """Base error for everything raised by fabricconfig."""

    fatal: bool = False

    def __init__(
        self,
        message: str,
        *,
        key: Optional[str] = None,
        path: Optional[Path | str] = None,
        original_error: Optional[BaseException] = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            key: Settings key or entry label the error relates to
            path: Filesystem path the error relates to
            original_error: The underlying exception, if any
        """
        super().__init__(message)
        self.message: str = message
        self.key: Optional[str] = key
        self.path: Optional[Path | str] = path
        self.original_error: Optional[BaseException] = original_error

    @property
    def is_fatal(self) -> bool:
        """Whether the process should stop when this error surfaces."""
        return self.fatal


class FatalConfigError(FabricConfigError):
    """Unrecoverable configuration problem."""

    fatal = True


class RecoverableConfigError(FabricConfigError):
    """Configuration problem surfaced to the caller."""

    fatal = False


class ConfigFileError(FatalConfigError):
    """Raised when the settings file cannot be read or parsed."""

    def __init__(self, path: Path | str, original_error: Optional[BaseException] = None) -> None:
        super().__init__(
            f"Fatal error config file: {original_error or path}",
            path=path,
            original_error=original_error,
        )


class InvalidLogLevelError(FatalConfigError):
    """Raised when ``client.logging.level`` names an unknown severity."""

    def __init__(self, level: str) -> None:
        super().__init__(f"logger: invalid log level {level!r}", key="client.logging.level")
        self.level = level


class PeerConfigError(FatalConfigError):
    """Raised when a peer entry is missing a required field."""

    def __init__(self, label: str, field: str) -> None:
        """Initialize with the offending entry.

        Args:
            label: Label of the peer entry under ``client.peers``
            field: Name of the missing or empty field
        """
        super().__init__(f"{field} not exist or empty for {label}", key=label)
        self.label = label
        self.field = field


class CertificateParseError(FatalConfigError):
    """Raised when a trust anchor file does not hold a parsable certificate."""

    def __init__(self, path: Path | str, original_error: Optional[BaseException] = None) -> None:
        super().__init__(
            f"unable to parse certificate from {path}: {original_error}",
            path=path,
            original_error=original_error,
        )


class CertificateReadError(RecoverableConfigError):
    """Raised when a trust anchor file cannot be read."""

    def __init__(self, path: Path | str, original_error: Optional[BaseException] = None) -> None:
        super().__init__(
            f"unable to read certificate file {path}: {original_error}",
            path=path,
            original_error=original_error,
        )


class CAConfigError(RecoverableConfigError):
    """Raised when the fabric-ca client descriptor cannot be produced.

    Covers unmarshalling the settings sub-document, JSON serialization and
    writing the derived file.
    """

    pass


class PeerShapeError(RecoverableConfigError):
    """Raised when a peer entry is not a mapping at all."""

    def __init__(self, label: str, value_type: type) -> None:
        super().__init__(
            f"peer entry {label} has unsupported type {value_type.__name__}",
            key=label,
        )
        self.label = label

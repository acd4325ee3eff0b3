"""Hierarchical settings store addressed by dotted paths.

Keys are matched case-insensitively. Scalar getters coerce leniently and
fall back to the zero value of the requested type, so callers never see
``None`` from ``get_string``/``get_int``/``get_bool``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final, TypeVar

import yaml
from pydantic import BaseModel

from fabricconfig.errors import ConfigFileError

logger: Final = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_TRUE_STRINGS: Final = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_MISSING: Final = object()


def _normalize(value: Any) -> Any:
    """Lower-case the keys of plain string-keyed dicts, recursively.

    Mappings with non-string keys (or mapping types other than ``dict``)
    are kept exactly as the parser produced them.
    """
    if isinstance(value, dict) and all(isinstance(k, str) for k in value):
        return {k.lower(): _normalize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalize(v) for v in value]
    return value


def _lookup(mapping: Mapping[Any, Any], part: str) -> Any:
    if part in mapping:
        return mapping[part]
    for key, value in mapping.items():
        if str(key).lower() == part:
            return value
    return _MISSING


def to_string(value: Any) -> str:
    """Coerce a settings value to ``str`` ("" when not convertible)."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return ""


def _float_to_int(value: float) -> int:
    # inf and nan have no integer value
    if not math.isfinite(value):
        return 0
    return int(value)


def to_int(value: Any) -> int:
    """Coerce a settings value to ``int`` (0 when not convertible)."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return _float_to_int(value)
    if isinstance(value, str):
        text = value.strip()
        for base in (0, 10):
            try:
                return int(text, base)
            except ValueError:
                continue
        try:
            return _float_to_int(float(text))
        except ValueError:
            return 0
    return 0


def to_bool(value: Any) -> bool:
    """Coerce a settings value to ``bool`` (False when not convertible)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip() in _TRUE_STRINGS
    return False


def align_keys(model: type[BaseModel], data: Any) -> Any:
    """Map sub-document keys onto a model's field names, ignoring case.

    Unknown keys are dropped. Nested models are aligned recursively.

    Args:
        model: Target pydantic model class
        data: Raw settings sub-document

    Returns:
        A dict keyed by the model's aliases, or ``data`` unchanged when it is
        not a mapping
    """
    if not isinstance(data, Mapping):
        return data

    fields: dict[str, tuple[str, Any]] = {}
    for name, info in model.model_fields.items():
        target = info.alias or name
        fields[name.lower()] = (target, info.annotation)
        fields[target.lower()] = (target, info.annotation)

    aligned: dict[str, Any] = {}
    for key, value in data.items():
        match = fields.get(str(key).lower())
        if match is None:
            continue
        target, annotation = match
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            value = align_keys(annotation, value)
        aligned[target] = value
    return aligned


class SettingsStore:
    """In-memory settings document with dotted-path access.

    Examples:
        store = SettingsStore.from_file(Path("config.yaml"))
        store.get_bool("client.tls.enabled")
        store.get_string_map("client.peers")
    """

    def __init__(self, data: Mapping[Any, Any] | None = None) -> None:
        """Initialize the store from an already parsed document."""
        self._data: Any = _normalize(dict(data or {}))
        self._config_file: Path | None = None

    @classmethod
    def from_file(cls, path: Path | str) -> SettingsStore:
        """Create a store populated from a YAML file.

        Raises:
            ConfigFileError: If the file cannot be read or parsed
        """
        store = cls()
        store.read_in_config(path)
        return store

    @property
    def config_file_used(self) -> Path | None:
        """Path of the last file loaded into the store."""
        return self._config_file

    def read_in_config(self, path: Path | str) -> None:
        """Replace the store contents with the YAML document at ``path``.

        Args:
            path: Settings file to read

        Raises:
            ConfigFileError: If the file cannot be read, is not valid YAML,
                or its top level is not a mapping
        """
        path = Path(path)
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise ConfigFileError(path, exc) from exc

        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigFileError(
                path, ValueError(f"top level must be a mapping, got {type(data).__name__}")
            )

        self._data = _normalize(dict(data))
        self._config_file = path
        logger.debug("Loaded %d top-level settings from %s", len(self._data), path)

    def get(self, key: str) -> Any:
        """Return the raw value at a dotted path, or ``None`` if absent."""
        node: Any = self._data
        for part in key.lower().split("."):
            if not isinstance(node, Mapping):
                return None
            node = _lookup(node, part)
            if node is _MISSING:
                return None
        return node

    def is_set(self, key: str) -> bool:
        """Whether a value exists at the dotted path."""
        return self.get(key) is not None

    def set(self, key: str, value: Any) -> None:
        """Set a value at a dotted path, creating intermediate maps."""
        parts = key.lower().split(".")
        node = self._data
        for part in parts[:-1]:
            child = node.get(part) if isinstance(node, dict) else None
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = _normalize(value)

    def get_string(self, key: str) -> str:
        return to_string(self.get(key))

    def get_int(self, key: str) -> int:
        return to_int(self.get(key))

    def get_bool(self, key: str) -> bool:
        return to_bool(self.get(key))

    def get_string_map(self, key: str) -> dict[str, Any]:
        """Return the sub-map at ``key`` keyed by strings (empty if absent)."""
        value = self.get(key)
        if not isinstance(value, Mapping):
            return {}
        return {str(k): v for k, v in value.items()}

    def unmarshal_key(self, key: str, model: type[M]) -> M:
        """Decode the sub-document at ``key`` into ``model``.

        An absent key produces the model's defaults.

        Raises:
            pydantic.ValidationError: If the sub-document does not fit the model
        """
        value = self.get(key)
        if value is None:
            value = {}
        return model.model_validate(align_keys(model, value))

    def all_settings(self) -> dict[str, Any]:
        """Return a shallow copy of the whole document."""
        return dict(self._data)

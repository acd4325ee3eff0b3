"""Extraction of peer endpoint records from the ``client.peers`` map.

The YAML parser does not always hand back the same map type for an entry:
most entries are plain ``dict`` objects keyed by strings, but an entry with
a non-string key (``1: ...``) or a mapping produced by other means keeps
its original key types. Each entry is resolved into a field reader for one
of these two shapes and then assembled into a single ``PeerConfig``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from enum import Enum
from typing import Any, Final

from fabricconfig.errors import PeerConfigError, PeerShapeError
from fabricconfig.models import PeerConfig
from fabricconfig.utils.paths import substitute_gopath

logger: Final = logging.getLogger(__name__)

FieldReader = Callable[[str], Any]


class EntryShape(Enum):
    """Map encodings a peer entry may arrive in."""

    STRING_KEYED = "string-keyed"
    ANY_KEYED = "any-keyed"


def entry_shape(value: Any) -> EntryShape | None:
    """Classify a raw peer entry, or return None for non-mappings."""
    if isinstance(value, dict) and all(isinstance(k, str) for k in value):
        return EntryShape.STRING_KEYED
    if isinstance(value, Mapping):
        return EntryShape.ANY_KEYED
    return None


def _string_keyed_reader(entry: dict[str, Any]) -> FieldReader:
    return entry.get


def _any_keyed_reader(entry: Mapping[Any, Any]) -> FieldReader:
    normalized = {str(k).lower(): v for k, v in entry.items()}
    return normalized.get


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_port(value: Any) -> str:
    # bool is an int subclass; a YAML "yes" is not a port
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return ""


def _tls_field(tls: Any, name: str) -> str:
    if not isinstance(tls, Mapping):
        return ""
    for key, value in tls.items():
        if str(key).lower() == name:
            return _as_str(value)
    return ""


def read_peer_entry(label: str, value: Any) -> PeerConfig:
    """Leniently read one entry into a record, without validating it.

    Missing or wrong-typed fields come back as empty strings.

    Args:
        label: Entry label under ``client.peers``
        value: Raw entry value from the settings store

    Returns:
        Unvalidated peer record

    Raises:
        PeerShapeError: If the entry is not a mapping of any kind
    """
    shape = entry_shape(value)
    if shape is EntryShape.STRING_KEYED:
        read = _string_keyed_reader(value)
    elif shape is EntryShape.ANY_KEYED:
        read = _any_keyed_reader(value)
    else:
        raise PeerShapeError(label, type(value))

    tls = read("tls")
    return PeerConfig(
        host=_as_str(read("host")),
        port=_as_port(read("port")),
        event_host=_as_str(read("event_host")),
        event_port=_as_port(read("event_port")),
        tls_certificate=_tls_field(tls, "certificate"),
        tls_server_host_override=_tls_field(tls, "serverhostoverride"),
    )


def validate_peer(label: str, peer: PeerConfig, tls_enabled: bool) -> None:
    """Enforce required fields on an assembled record.

    Raises:
        PeerConfigError: Naming the first missing field
    """
    if not peer.host:
        raise PeerConfigError(label, "host key")
    if not peer.port:
        raise PeerConfigError(label, "port key")
    if not peer.event_host:
        raise PeerConfigError(label, "event_host")
    if not peer.event_port:
        raise PeerConfigError(label, "event_port")
    if tls_enabled and not peer.tls_certificate:
        raise PeerConfigError(label, "tls.certificate")


def resolve_peers(peers: Mapping[str, Any], tls_enabled: bool) -> list[PeerConfig]:
    """Build validated peer records from the raw ``client.peers`` map.

    Records follow the iteration order of ``peers``.

    Args:
        peers: Label to raw entry mapping
        tls_enabled: Whether a TLS certificate is required for every peer

    Returns:
        One record per entry, with ``$GOPATH`` expanded in certificate paths

    Raises:
        PeerConfigError: If an entry lacks a required field
        PeerShapeError: If an entry is not a mapping
    """
    resolved: list[PeerConfig] = []
    for label, value in peers.items():
        peer = read_peer_entry(label, value)
        validate_peer(label, peer, tls_enabled)
        if peer.tls_certificate:
            peer = replace(peer, tls_certificate=substitute_gopath(peer.tls_certificate))
        logger.debug("Resolved peer %s at %s", label, peer.address)
        resolved.append(peer)
    return resolved

"""Configuration access layer for Hyperledger Fabric clients.

This package provides:
- SettingsStore: YAML-backed settings with dotted-path access
- ClientConfig: typed accessors for peers, orderer, TLS and security settings
- TrustPool: CA certificates loaded from PEM files
- FabricCAConfig: the generated fabric-ca client descriptor
"""

from fabricconfig.config import ClientConfig
from fabricconfig.errors import (
    CAConfigError,
    CertificateParseError,
    CertificateReadError,
    ConfigFileError,
    FabricConfigError,
    FatalConfigError,
    InvalidLogLevelError,
    PeerConfigError,
    PeerShapeError,
    RecoverableConfigError,
)
from fabricconfig.models import FabricCAClient, FabricCAConfig, PeerConfig
from fabricconfig.store import SettingsStore
from fabricconfig.tls import TrustPool, get_tls_ca_cert_pool

__all__ = [
    "CAConfigError",
    "CertificateParseError",
    "CertificateReadError",
    "ClientConfig",
    "ConfigFileError",
    "FabricCAClient",
    "FabricCAConfig",
    "FabricConfigError",
    "FatalConfigError",
    "InvalidLogLevelError",
    "PeerConfig",
    "PeerConfigError",
    "PeerShapeError",
    "RecoverableConfigError",
    "SettingsStore",
    "TrustPool",
    "get_tls_ca_cert_pool",
]

"""Client configuration resolver.

``ClientConfig`` wraps one ``SettingsStore`` and exposes the typed values a
ledger client needs: peer and orderer endpoints, TLS and security flags,
credential paths and the derived fabric-ca client descriptor. Every accessor
reads the store at call time; nothing is cached.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

from dotenv import load_dotenv
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from fabricconfig import constants
from fabricconfig.errors import CAConfigError
from fabricconfig.log import configure_logging
from fabricconfig.models import FabricCAConfig, PeerConfig
from fabricconfig.peers import resolve_peers
from fabricconfig.store import SettingsStore
from fabricconfig.tls import TrustPool, get_tls_ca_cert_pool
from fabricconfig.utils.file import write_file
from fabricconfig.utils.paths import substitute_gopath

# Load environment variables (GOPATH and friends) from .env file(s)
load_dotenv()

logger: Final = logging.getLogger(__name__)


class ClientConfig:
    """Typed view over the client settings document.

    Examples:
        config = ClientConfig.init_config("config.yaml")
        for peer in config.peers_config():
            print(peer.address)
        ca_config_path = config.fabric_ca_client_path()
    """

    def __init__(
        self,
        store: SettingsStore | None = None,
        ca_client_config_path: Path = constants.CA_CLIENT_CONFIG_PATH,
    ):
        """Initialize with an already populated store.

        Args:
            store: Settings backend (an empty store when omitted)
            ca_client_config_path: Where the fabric-ca descriptor is written
        """
        self._store = store or SettingsStore()
        self.ca_client_config_path = Path(ca_client_config_path)

    @classmethod
    def init_config(
        cls,
        config_file: Path | str | None = None,
        store: SettingsStore | None = None,
        **kwargs: Path,
    ) -> ClientConfig:
        """Load settings and configure logging.

        Args:
            config_file: YAML file to read; nothing is read when empty
            store: Store to populate (a new one when omitted)
            **kwargs: Passed through to the constructor

        Returns:
            The initialized configuration

        Raises:
            ConfigFileError: If the settings file cannot be read or parsed
            InvalidLogLevelError: If ``client.logging.level`` is unknown
        """
        store = store or SettingsStore()
        if config_file:
            store.read_in_config(config_file)

        level = store.get_string(constants.LOGGING_LEVEL_KEY)
        configure_logging(level)
        if config_file:
            logger.info("Using config file: %s", store.config_file_used)
        if level:
            logger.info("fabricconfig logging level: %s", level)

        return cls(store, **kwargs)

    @property
    def settings(self) -> SettingsStore:
        """The underlying settings store."""
        return self._store

    # ---- peers ----
    def peers_config(self) -> list[PeerConfig]:
        """Resolve every entry under ``client.peers``.

        Raises:
            PeerConfigError: If an entry lacks a required field
            PeerShapeError: If an entry is not a mapping
        """
        peers = self._store.get_string_map(constants.PEERS_KEY)
        return resolve_peers(peers, self.is_tls_enabled())

    # ---- flags and scalars ----
    def is_tls_enabled(self) -> bool:
        return self._store.get_bool(constants.TLS_ENABLED_KEY)

    def is_security_enabled(self) -> bool:
        return self._store.get_bool(constants.SECURITY_ENABLED_KEY)

    def tcert_batch_size(self) -> int:
        return self._store.get_int(constants.TCERT_BATCH_SIZE_KEY)

    def security_algorithm(self) -> str:
        return self._store.get_string(constants.SECURITY_HASH_ALGORITHM_KEY)

    def security_level(self) -> int:
        return self._store.get_int(constants.SECURITY_LEVEL_KEY)

    def orderer_host(self) -> str:
        return self._store.get_string(constants.ORDERER_HOST_KEY)

    def orderer_port(self) -> str:
        """Orderer port as a decimal string ("0" when unset)."""
        return str(self._store.get_int(constants.ORDERER_PORT_KEY))

    def orderer_tls_server_host_override(self) -> str:
        return self._store.get_string(constants.ORDERER_TLS_SERVER_HOST_OVERRIDE_KEY)

    def orderer_tls_certificate(self) -> str:
        """Orderer TLS certificate path with ``$GOPATH`` expanded."""
        return substitute_gopath(self._store.get_string(constants.ORDERER_TLS_CERTIFICATE_KEY))

    def fabric_ca_id(self) -> str:
        return self._store.get_string(constants.FABRIC_CA_ID_KEY)

    def keystore_path(self) -> str:
        return self._store.get_string(constants.KEYSTORE_PATH_KEY)

    # ---- derived artifacts ----
    def tls_ca_cert_pool(self, tls_certificate: Path | str) -> TrustPool:
        """Build a trust pool from a PEM certificate file.

        See ``fabricconfig.tls.get_tls_ca_cert_pool``.
        """
        return get_tls_ca_cert_pool(tls_certificate)

    def fabric_ca_config(self) -> FabricCAConfig:
        """Decode ``client.fabricCA`` into the fabric-ca client layout.

        Raises:
            CAConfigError: If the sub-document does not fit the layout
        """
        try:
            return self._store.unmarshal_key(constants.FABRIC_CA_KEY, FabricCAConfig)
        except ValidationError as err:
            raise CAConfigError(
                f"Invalid {constants.FABRIC_CA_KEY} configuration:\n{err}",
                key=constants.FABRIC_CA_KEY,
                original_error=err,
            ) from err

    def fabric_ca_client_path(self) -> Path:
        """Write the fabric-ca client descriptor as JSON and return its path.

        The file is overwritten on every call. Concurrent callers writing the
        same path race; the last write wins.

        Returns:
            Path of the written JSON file

        Raises:
            CAConfigError: If decoding, serialization or the write fails
        """
        ca_config = self.fabric_ca_config()
        try:
            payload = ca_config.to_json()
        except PydanticSerializationError as exc:
            raise CAConfigError(
                f"Unable to serialize fabric-ca configuration: {exc}",
                key=constants.FABRIC_CA_KEY,
                original_error=exc,
            ) from exc

        path = self.ca_client_config_path
        try:
            write_file(path, payload, constants.CA_CLIENT_CONFIG_MODE)
        except OSError as exc:
            raise CAConfigError(
                f"Unable to write fabric-ca configuration to {path}: {exc}",
                path=path,
                original_error=exc,
            ) from exc

        logger.debug("Wrote fabric-ca client configuration to %s", path)
        return path

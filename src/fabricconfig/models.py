"""Typed records resolved from client settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


@dataclass(frozen=True)
class PeerConfig:
    """Network and TLS endpoint of one ledger peer.

    Ports are kept as decimal strings, the form expected when building
    ``host:port`` targets.
    """

    host: str
    port: str
    event_host: str
    event_port: str
    tls_certificate: str = ""
    tls_server_host_override: str = ""

    @property
    def address(self) -> str:
        """``host:port`` of the endorsing endpoint."""
        return f"{self.host}:{self.port}"

    @property
    def event_address(self) -> str:
        """``host:port`` of the event hub endpoint."""
        return f"{self.event_host}:{self.event_port}"


class FabricCAClient(BaseModel):
    """Client keypair used to authenticate against the fabric-ca server."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    keyfile: str = ""
    certfile: str = ""


class FabricCAConfig(BaseModel):
    """Client descriptor in the layout the fabric-ca client reads.

    Built from the ``client.fabricCA`` settings sub-document and serialized
    to JSON with exactly the field names ``serverURL``, ``certfiles`` and
    ``client``.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True, populate_by_name=True)

    server_url: str = Field("", alias="serverURL", description="fabric-ca server URL")
    certfiles: list[str] = Field(
        default_factory=list, description="Trusted root certificate files"
    )
    client: FabricCAClient = Field(default_factory=FabricCAClient)

    # ---- validators ----
    @field_validator("certfiles", mode="before")
    @classmethod
    def wrap_single_certfile(cls, v: Any) -> Any:
        """Accept a single path where a list is expected."""
        if v is None:
            return []
        if isinstance(v, (str, int, float)) and not isinstance(v, bool):
            return [v]
        return v

    @field_validator("client", mode="before")
    @classmethod
    def default_client(cls, v: Any) -> Any:
        if v is None:
            return {}
        return v

    def to_json(self) -> bytes:
        """Serialize to compact JSON using the fabric-ca field names."""
        return self.model_dump_json(by_alias=True).encode("utf-8")

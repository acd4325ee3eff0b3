"""Fabric client configuration CLI.

This module provides command-line helpers to validate a client settings
file, inspect the resolved peer and orderer configuration, export the
fabric-ca client descriptor and inspect CA certificate files.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Final

import typer

from fabricconfig.config import ClientConfig
from fabricconfig.constants import CA_CLIENT_CONFIG_PATH
from fabricconfig.errors import FabricConfigError

# ── CLI setup ────────────────────────────────────────────────────────────────
app = typer.Typer(help="Fabric client configuration CLI", add_completion=False)

logger: Final = logging.getLogger(__name__)  # Will be "fabricconfig.cli"

CONFIG_ARGUMENT = typer.Argument(..., exists=True, dir_okay=False, help="Client config.yaml")
CERT_ARGUMENT = typer.Argument(..., help="PEM encoded CA certificate")
OUTPUT_OPTION = typer.Option(
    CA_CLIENT_CONFIG_PATH, "--output", "-o", dir_okay=False, help="Where to write the JSON file"
)


def _fail(exc: FabricConfigError) -> typer.Exit:
    kind = "fatal" if exc.is_fatal else "error"
    typer.secho(f"{kind}: {exc}", fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


def _load(config: Path, **kwargs: Path) -> ClientConfig:
    try:
        return ClientConfig.init_config(config, **kwargs)
    except FabricConfigError as exc:
        raise _fail(exc) from exc


@app.command()
def validate(config: Path = CONFIG_ARGUMENT) -> None:
    """Validate a client config file, including every peer entry."""
    client_config = _load(config)
    try:
        peers = client_config.peers_config()
        client_config.fabric_ca_config()
    except FabricConfigError as exc:
        raise _fail(exc) from exc
    typer.echo(f"✅ Config valid ({len(peers)} peers)")


@app.command()
def peers(config: Path = CONFIG_ARGUMENT) -> None:
    """Print the resolved peer endpoints."""
    client_config = _load(config)
    try:
        resolved = client_config.peers_config()
    except FabricConfigError as exc:
        raise _fail(exc) from exc

    for peer in resolved:
        line = f"{peer.address} events={peer.event_address}"
        if peer.tls_certificate:
            line += f" tls={peer.tls_certificate}"
        if peer.tls_server_host_override:
            line += f" override={peer.tls_server_host_override}"
        typer.echo(line)


@app.command()
def show(config: Path = CONFIG_ARGUMENT) -> None:
    """Print the scalar client settings."""
    client_config = _load(config)
    values = {
        "tls.enabled": client_config.is_tls_enabled(),
        "security.enabled": client_config.is_security_enabled(),
        "security.hashAlgorithm": client_config.security_algorithm(),
        "security.level": client_config.security_level(),
        "tcert.batch.size": client_config.tcert_batch_size(),
        "orderer.host": client_config.orderer_host(),
        "orderer.port": client_config.orderer_port(),
        "orderer.tls.serverhostoverride": client_config.orderer_tls_server_host_override(),
        "orderer.tls.certificate": client_config.orderer_tls_certificate(),
        "fabricCA.id": client_config.fabric_ca_id(),
        "keystore.path": client_config.keystore_path(),
    }
    for key, value in values.items():
        typer.echo(f"{key}: {value}")


@app.command("export-ca")
def export_ca(config: Path = CONFIG_ARGUMENT, output: Path = OUTPUT_OPTION) -> None:
    """Write the fabric-ca client descriptor and print its path."""
    client_config = _load(config, ca_client_config_path=output)
    try:
        path = client_config.fabric_ca_client_path()
    except FabricConfigError as exc:
        raise _fail(exc) from exc
    typer.echo(str(path))


@app.command("inspect-cert")
def inspect_cert(cert: Path = CERT_ARGUMENT) -> None:
    """Load a CA certificate into a trust pool and print its subject."""
    client_config = ClientConfig()
    try:
        pool = client_config.tls_ca_cert_pool(cert)
    except FabricConfigError as exc:
        raise _fail(exc) from exc
    for subject in pool.subjects():
        typer.echo(subject)


# ───────────────────────── module entrypoint ────────────────────────────────
if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(0)

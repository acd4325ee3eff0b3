import logging
from collections.abc import Callable, Generator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from fabricconfig.constants import LOGGER_NAME

CONFIG_YAML = """\
client:
  logging:
    level: info
  peers:
    peer0:
      host: "peer0.example.com"
      port: 7051
      event_host: "peer0.example.com"
      event_port: 7053
      tls:
        certificate: "$GOPATH/fixtures/tls/peer0/ca-cert.pem"
        serverhostoverride: "peer0"
  tls:
    enabled: false
  security:
    enabled: true
    hashAlgorithm: "SHA3"
    level: 256
  tcert:
    batch:
      size: 200
  orderer:
    host: "orderer.example.com"
    port: 7050
    tls:
      certificate: "$GOPATH/fixtures/tls/orderer/ca-cert.pem"
      serverhostoverride: "orderer0"
  fabricCA:
    id: "Org1MSP"
    serverURL: "https://ca:7054"
    certfiles:
      - "a.pem"
    client:
      keyfile: "k.pem"
      certfile: "c.pem"
  keystore:
    path: "/tmp/enroll_user"
"""


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Drop handlers installed by init_config so streams don't leak between tests."""
    yield
    pkg_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
    pkg_logger.setLevel(logging.NOTSET)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML)
    return path


@pytest.fixture
def make_ca_cert() -> Callable[[str], bytes]:
    """Factory returning a self-signed CA certificate as PEM bytes."""

    def _make(common_name: str = "tlsca.example.com") -> bytes:
        key = ec.generate_private_key(ec.SECP256R1())
        name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
        now = datetime.now(timezone.utc)
        cert = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now - timedelta(days=1))
            .not_valid_after(now + timedelta(days=365))
            .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
            .sign(key, hashes.SHA256())
        )
        return cert.public_bytes(serialization.Encoding.PEM)

    return _make


@pytest.fixture
def ca_cert_file(tmp_path: Path, make_ca_cert: Callable[[str], bytes]) -> Path:
    path = tmp_path / "ca-cert.pem"
    path.write_bytes(make_ca_cert("tlsca.example.com"))
    return path

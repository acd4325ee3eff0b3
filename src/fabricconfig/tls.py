"""Trust pool construction from PEM-encoded CA certificates."""

from __future__ import annotations

import base64
import logging
import re
import ssl
from collections.abc import Iterator
from pathlib import Path
from typing import Final

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from fabricconfig.errors import CertificateParseError, CertificateReadError

logger: Final = logging.getLogger(__name__)

_PEM_BLOCK: Final = re.compile(rb"-----BEGIN ([A-Z0-9 ]+)-----\r?\n(.*?)-----END \1-----", re.DOTALL)


class TrustPool:
    """Set of trusted CA certificates.

    The pool never includes the system trust store. Adding a certificate
    that is already present (same DER encoding) is a no-op.
    """

    def __init__(self) -> None:
        self._certs: list[x509.Certificate] = []

    def add_cert(self, cert: x509.Certificate) -> None:
        if cert not in self._certs:
            self._certs.append(cert)

    def __len__(self) -> int:
        return len(self._certs)

    def __iter__(self) -> Iterator[x509.Certificate]:
        return iter(self._certs)

    def __contains__(self, cert: object) -> bool:
        return cert in self._certs

    def subjects(self) -> list[str]:
        """RFC 4514 subject names of the pooled certificates."""
        return [cert.subject.rfc4514_string() for cert in self._certs]

    def to_pem(self) -> bytes:
        """Concatenated PEM encoding of every pooled certificate."""
        return b"".join(cert.public_bytes(serialization.Encoding.PEM) for cert in self._certs)

    def create_ssl_context(self) -> ssl.SSLContext:
        """Build a client-side TLS context trusting only this pool."""
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        if self._certs:
            context.load_verify_locations(cadata=self.to_pem().decode("ascii"))
        return context


def first_pem_block(raw_data: bytes) -> tuple[str, bytes] | None:
    """Decode the first PEM block in ``raw_data``, whatever its type.

    Header lines (``Proc-Type: ...``) inside the block are skipped.

    Returns:
        The block label and its DER body, or None when there is no block

    Raises:
        ValueError: If the block body is not valid base64
    """
    match = _PEM_BLOCK.search(raw_data)
    if match is None:
        return None
    lines = [line.strip() for line in match.group(2).splitlines()]
    body = b"".join(line for line in lines if line and b":" not in line)
    return match.group(1).decode("ascii"), base64.b64decode(body, validate=True)


def load_ca_cert(raw_data: bytes, path: Path | str = "<memory>") -> x509.Certificate:
    """Parse the first PEM block of ``raw_data`` as a certificate.

    Later blocks are ignored, so a bundle starting with a private key is
    rejected even if a certificate follows.

    Raises:
        CertificateParseError: If the first block is missing or is not a
            certificate
    """
    try:
        block = first_pem_block(raw_data)
    except ValueError as exc:
        raise CertificateParseError(path, exc) from exc
    if block is None:
        raise CertificateParseError(path, ValueError("no PEM data found"))

    label, der = block
    try:
        return x509.load_der_x509_certificate(der)
    except ValueError as exc:
        raise CertificateParseError(path, ValueError(f"{label} block: {exc}")) from exc


def get_tls_ca_cert_pool(tls_certificate: Path | str) -> TrustPool:
    """Build a trust pool holding the CA certificate at ``tls_certificate``.

    Args:
        tls_certificate: Path to a PEM file. An empty path yields an empty pool

    Returns:
        A new pool owned by the caller

    Raises:
        CertificateReadError: If the file cannot be read
        CertificateParseError: If the file holds no parsable certificate
    """
    pool = TrustPool()
    if not str(tls_certificate):
        return pool

    path = Path(tls_certificate)
    try:
        raw_data = path.read_bytes()
    except OSError as exc:
        raise CertificateReadError(path, exc) from exc

    cert = load_ca_cert(raw_data, path)
    pool.add_cert(cert)
    logger.debug("Loaded CA certificate %s from %s", cert.subject.rfc4514_string(), path)
    return pool

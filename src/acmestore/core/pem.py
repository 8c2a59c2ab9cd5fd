"""Best-effort PEM inspection helpers.

The store accepts opaque PEM text (test fixtures and some callers pass
placeholders), so parse failures return ``None`` instead of raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

if TYPE_CHECKING:
    from datetime import datetime

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CertificateInfo:
    """Metadata read from a leaf certificate."""

    not_before: datetime
    not_after: datetime
    dns_names: tuple[str, ...]


def public_key_pem_from_private(private_key_pem: str) -> str | None:
    """Return the SubjectPublicKeyInfo PEM matching *private_key_pem*."""
    try:
        key = serialization.load_pem_private_key(
            private_key_pem.encode("ascii"),
            password=None,
        )
    except (ValueError, TypeError, UnicodeEncodeError, UnsupportedAlgorithm) as exc:
        log.debug("Private key PEM not parseable, no public key derived: %s", exc)
        return None
    return (
        key.public_key()
        .public_bytes(
            serialization.Encoding.PEM,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode("ascii")
    )


def inspect_certificate(cert_pem: str) -> CertificateInfo | None:
    """Read validity and DNS SANs from the first certificate in *cert_pem*."""
    try:
        cert = x509.load_pem_x509_certificate(cert_pem.encode("ascii"))
    except (ValueError, UnicodeEncodeError) as exc:
        log.debug("Certificate PEM not parseable, no metadata read: %s", exc)
        return None

    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)
        dns_names = tuple(san.value.get_values_for_type(x509.DNSName))
    except x509.ExtensionNotFound:
        dns_names = ()

    return CertificateInfo(
        not_before=cert.not_valid_before_utc,
        not_after=cert.not_valid_after_utc,
        dns_names=dns_names,
    )

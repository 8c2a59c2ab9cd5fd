"""Deterministic identifiers.

Ids are content hashes, so storing the same key material twice
overwrites one record instead of creating a duplicate.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

from acmestore.core.errors import InvalidArgumentError

if TYPE_CHECKING:
    from acmestore.models.certificate import CertificateBundle
    from acmestore.models.keypair import Keypair


def sha256_hex(value: str) -> str:
    """Hex SHA-256 digest of the UTF-8 encoding of *value*."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def keypair_id(keypair: Keypair) -> str:
    if not keypair.public_key_pem:
        msg = "keypair has no public key PEM to derive an id from"
        raise InvalidArgumentError(msg)
    return sha256_hex(keypair.public_key_pem)


def account_id(keypair: Keypair) -> str:
    """Account id: same digest as :func:`keypair_id`, different key namespace."""
    return keypair_id(keypair)


def certificate_id(bundle: CertificateBundle) -> str:
    if not bundle.cert:
        msg = "certificate bundle has no 'cert' PEM to derive an id from"
        raise InvalidArgumentError(msg)
    return sha256_hex(bundle.cert)

"""Root conftest for the acmestore test suite."""

from __future__ import annotations

import datetime
import logging
import sys
from pathlib import Path

import fakeredis
import pytest
import yaml
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

# ---------------------------------------------------------------------------
# Make ``src/`` importable without installing the package
# ---------------------------------------------------------------------------
_SRC = str(Path(__file__).resolve().parent.parent / "src")
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)


# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------


@pytest.fixture()
def redis_client():
    """An isolated in-memory Redis speaking the real protocol semantics."""
    client = fakeredis.FakeRedis(decode_responses=True)
    yield client
    client.flushall()
    client.close()


@pytest.fixture()
def store(redis_client):
    """A store with default settings on top of :func:`redis_client`."""
    from acmestore import create

    with create(client=redis_client) as s:
        yield s


# ---------------------------------------------------------------------------
# Key material
# ---------------------------------------------------------------------------


def make_keypair_record() -> dict:
    """Generate a real EC keypair in the wire format callers send."""
    key = ec.generate_private_key(ec.SECP256R1())
    return {
        "privateKeyPem": key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        ).decode("ascii"),
        "publicKeyPem": key.public_key()
        .public_bytes(
            serialization.Encoding.PEM,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode("ascii"),
    }


def make_certificate_pem(domains: list[str], days: int = 90) -> tuple[str, str]:
    """Self-sign a leaf for *domains*; returns ``(cert_pem, key_pem)``."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, domains[0])])
    not_before = datetime.datetime(2026, 1, 1, tzinfo=datetime.UTC)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_before + datetime.timedelta(days=days))
        .add_extension(
            x509.SubjectAlternativeName([x509.DNSName(d) for d in domains]),
            critical=False,
        )
        .sign(key, hashes.SHA256())
    )
    cert_pem = cert.public_bytes(serialization.Encoding.PEM).decode("ascii")
    key_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("ascii")
    return cert_pem, key_pem


@pytest.fixture()
def keypair_record() -> dict:
    return make_keypair_record()


@pytest.fixture()
def opaque_keypair() -> dict:
    """Placeholder PEM text, as the ACME client's own conformance tests use."""
    return {
        "privateKeyPem": "PRIVKEY.PEM",
        "privateKeyJwk": {"e": "EXPO", "n": "MODULO"},
        "publicKeyPem": "PUBKEY.PEM",
    }


# ---------------------------------------------------------------------------
# Config files
# ---------------------------------------------------------------------------


@pytest.fixture()
def minimal_config_data() -> dict:
    return {
        "cert_expiry": 86400,
        "backend": {"url": "redis://localhost:6379/3", "key_prefix": "test:"},
    }


@pytest.fixture()
def tmp_config_file(tmp_path: Path, minimal_config_data: dict) -> Path:
    """Write *minimal_config_data* to a temp YAML file and return its path."""
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        yaml.safe_dump(minimal_config_data, default_flow_style=False, sort_keys=False),
        encoding="utf-8",
    )
    return cfg


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """Undo handler/level changes made by configure_logging() or debug=True."""
    logger = logging.getLogger("acmestore")
    saved = (logger.level, list(logger.handlers), logger.propagate)
    yield
    logger.setLevel(saved[0])
    logger.handlers[:] = saved[1]
    logger.propagate = saved[2]

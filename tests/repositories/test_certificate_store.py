"""Unit tests for acmestore.repositories.certificate — CertificateStore."""

from __future__ import annotations

import datetime
import hashlib

import pytest
from conftest import make_certificate_pem

from acmestore.backend.keys import KeySpace
from acmestore.core.errors import InvalidArgumentError
from acmestore.core.types import IndexFamily
from acmestore.models.certificate import CertificateBundle
from acmestore.repositories.account import AccountStore
from acmestore.repositories.certificate import CertificateStore

_TTL = 3600


@pytest.fixture()
def certificates(redis_client):
    return CertificateStore(redis_client, cert_expiry=_TTL)


def _bundle(tag: str) -> dict:
    return {"cert": f"CERT_{tag}.PEM", "privkey": f"PRIVKEY_{tag}.PEM", "chain": f"CHAIN_{tag}.PEM"}


def _ttl_of(redis_client, key: str) -> int:
    ttl = redis_client.ttl(key)
    assert 0 < ttl <= _TTL, f"{key} has ttl {ttl}"
    return ttl


# ---------------------------------------------------------------------------
# Keypairs
# ---------------------------------------------------------------------------


class TestKeypairs:
    def test_any_listed_domain_finds_keypair(self, certificates, opaque_keypair):
        certificates.set_keypair(opaque_keypair, domains=["example.com", "www.example.com"])

        assert certificates.check_keypair(domains=["example.com"]).public_key_pem == "PUBKEY.PEM"
        assert certificates.check_keypair(domains=["www.example.com"]) is not None

    def test_only_first_domain_consulted(self, certificates, opaque_keypair):
        certificates.set_keypair(opaque_keypair, domains=["example.com"])

        assert certificates.check_keypair(domains=["other.test", "example.com"]) is None

    def test_record_and_indexes_expire(self, certificates, redis_client, opaque_keypair):
        certificates.set_keypair(opaque_keypair, domains=["example.com"])

        digest = hashlib.sha256(b"PUBKEY.PEM").hexdigest()
        _ttl_of(redis_client, f"keypair-{digest}")
        _ttl_of(redis_client, KeySpace().index(IndexFamily.DOMAIN_TO_KEYPAIR, "example.com"))

    def test_reused_account_keypair_stays_persistent(
        self, certificates, redis_client, opaque_keypair,
    ):
        AccountStore(redis_client).set_keypair(opaque_keypair, email="a@b.com")

        certificates.set_keypair(opaque_keypair, domains=["example.com"])

        digest = hashlib.sha256(b"PUBKEY.PEM").hexdigest()
        assert redis_client.ttl(f"keypair-{digest}") == -1
        _ttl_of(redis_client, KeySpace().index(IndexFamily.DOMAIN_TO_KEYPAIR, "example.com"))

    def test_check_needs_domains(self, certificates):
        with pytest.raises(InvalidArgumentError):
            certificates.check_keypair(domains=[])
        with pytest.raises(InvalidArgumentError):
            certificates.check_keypair()


# ---------------------------------------------------------------------------
# Certificates
# ---------------------------------------------------------------------------


class TestSet:
    def test_returns_stored_bundle(self, certificates):
        stored = certificates.set(
            _bundle("A"),
            domains=["example.com", "www.example.com"],
            email="goodguy@example.com",
        )

        assert stored.id == hashlib.sha256(b"CERT_A.PEM").hexdigest()
        assert stored.domains == ("example.com", "www.example.com")
        assert stored.email == "goodguy@example.com"
        assert stored.privkey == "PRIVKEY_A.PEM"
        assert stored.issued_at is None

    def test_every_key_carries_the_expiry(self, certificates, redis_client):
        stored = certificates.set(
            _bundle("A"),
            domains=["a.com", "b.com"],
            email="e@x.com",
            account_id="acct",
        )

        keys = KeySpace()
        _ttl_of(redis_client, f"cert-{stored.id}")
        _ttl_of(redis_client, keys.index(IndexFamily.DOMAIN_TO_CERTIFICATE, "a.com"))
        _ttl_of(redis_client, keys.index(IndexFamily.DOMAIN_TO_CERTIFICATE, "b.com"))
        _ttl_of(redis_client, keys.index(IndexFamily.EMAIL_TO_CERTIFICATE, "e@x.com"))
        _ttl_of(redis_client, keys.index(IndexFamily.ACCOUNT_TO_CERTIFICATE, "acct"))

    def test_only_supplied_indexes_written(self, certificates, redis_client):
        certificates.set(_bundle("A"), domains=["a.com"])

        # one record plus one d2c entry
        assert len(redis_client.keys("*")) == 2

    def test_same_cert_overwrites(self, certificates, redis_client):
        first = certificates.set(_bundle("A"), domains=["a.com"])
        second = certificates.set({**_bundle("A"), "chain": "NEW_CHAIN"}, domains=["a.com"])

        assert first.id == second.id
        assert certificates.check(domains=["a.com"]).chain == "NEW_CHAIN"
        assert len(redis_client.keys("cert-*")) == 1

    def test_metadata_read_from_real_certificate(self, certificates):
        cert_pem, key_pem = make_certificate_pem(["example.com", "www.example.com"], days=90)

        stored = certificates.set({"cert": cert_pem, "privkey": key_pem, "chain": ""})

        assert stored.domains == ("example.com", "www.example.com")
        assert stored.issued_at == datetime.datetime(2026, 1, 1, tzinfo=datetime.UTC)
        assert stored.expires_at == stored.issued_at + datetime.timedelta(days=90)
        found = certificates.check(domains=["www.example.com"])
        assert found.expires_at == stored.expires_at

    def test_explicit_domains_win_over_sans(self, certificates):
        cert_pem, key_pem = make_certificate_pem(["example.com", "www.example.com"])

        certificates.set({"cert": cert_pem, "privkey": key_pem}, domains=["example.com"])

        assert certificates.check(domains=["www.example.com"]) is None

    def test_single_domain_string_in_bundle(self, certificates, redis_client):
        stored = certificates.set({"cert": "C", "domains": "example.com"})

        assert stored.domains == ("example.com",)
        assert certificates.check(domains=["example.com"]).cert == "C"
        assert len(redis_client.keys("idx-d2c-*")) == 1

    def test_iso_timestamp_rejected(self, certificates, redis_client):
        with pytest.raises(InvalidArgumentError):
            certificates.set({"cert": "C", "expiresAt": "2026-04-01T00:00:00Z"}, domains=["a.com"])
        assert redis_client.keys("*") == []

    def test_requires_cert(self, certificates):
        with pytest.raises(InvalidArgumentError):
            certificates.set({"privkey": "K"}, domains=["a.com"])

    def test_accepts_model(self, certificates):
        stored = certificates.set(CertificateBundle(cert="C", privkey="K"), account_id="acct")
        assert certificates.check(account_id="acct") == stored


class TestCheck:
    def test_every_domain_finds_bundle(self, certificates):
        domains = ["example.com", "www.example.com", "foo.net", "bar.foo.net"]
        certificates.set(_bundle("A"), domains=domains)

        for domain in (domains[0], domains[-1]):
            assert certificates.check(domains=[domain]).privkey == "PRIVKEY_A.PEM"

    def test_by_email(self, certificates):
        certificates.set(_bundle("A"), domains=["a.com"], email="e@x.com")
        assert certificates.check(email="e@x.com").cert == "CERT_A.PEM"

    def test_by_account_id(self, certificates):
        certificates.set(_bundle("B"), domains=["b.com"], account_id="acct")
        assert certificates.check(account_id="acct").cert == "CERT_B.PEM"

    def test_domain_takes_precedence(self, certificates):
        certificates.set(_bundle("A"), domains=["a.com"], email="e@x.com")

        assert certificates.check(domains=["unknown.test"], email="e@x.com") is None

    def test_unknown_domain_returns_none(self, certificates):
        assert certificates.check(domains=["nowhere.test"]) is None

    def test_needs_a_lookup_field(self, certificates):
        with pytest.raises(InvalidArgumentError):
            certificates.check()

    def test_expired_record_reads_as_miss(self, certificates, redis_client):
        stored = certificates.set(_bundle("A"), domains=["a.com"])
        redis_client.delete(f"cert-{stored.id}")

        assert certificates.check(domains=["a.com"]) is None

"""Certificate keypairs and issued certificate bundles.

Everything written here carries the configured certificate expiry, so
records and their index entries age out together.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from acmestore.backend.unit_of_work import UnitOfWork
from acmestore.config.settings import DEFAULT_CERT_EXPIRY
from acmestore.core import ids
from acmestore.core.errors import InvalidArgumentError
from acmestore.core.pem import inspect_certificate
from acmestore.core.types import IndexFamily, RecordKind
from acmestore.logging.sanitize import sanitize_for_logs
from acmestore.models.certificate import CertificateBundle
from acmestore.models.keypair import Keypair
from acmestore.repositories.base import BaseRedisRepository, as_domains
from acmestore.repositories.index import IndexManager

if TYPE_CHECKING:
    import redis

    from acmestore.backend.keys import KeySpace

log = logging.getLogger(__name__)


class CertificateStore(BaseRedisRepository):
    def __init__(
        self,
        client: redis.Redis,
        keys: KeySpace | None = None,
        *,
        cert_expiry: int = DEFAULT_CERT_EXPIRY,
    ) -> None:
        super().__init__(client, keys)
        self._indexes = IndexManager(client, self._keys)
        self.cert_expiry = cert_expiry

    # -- keypairs ------------------------------------------------------------

    def set_keypair(
        self,
        keypair: Keypair | Mapping[str, Any],
        *,
        domains: str | Iterable[str] | None = None,
    ) -> Keypair:
        """Store a certificate keypair with one ``d2k`` entry per domain."""
        keypair = Keypair.coerce(keypair)
        kid = ids.keypair_id(keypair)
        ttl = self.cert_expiry

        # An account keypair reused for certificates stays persistent.
        key = self._keys.record(RecordKind.KEYPAIR, kid)
        record_ttl = None if self._is_persistent(key) else ttl

        with UnitOfWork(self._client) as uow:
            self._queue_record(uow, RecordKind.KEYPAIR, kid, keypair.to_record(), record_ttl)
            for domain in as_domains(domains):
                self._indexes.create_index(IndexFamily.DOMAIN_TO_KEYPAIR, domain, kid, ttl, uow)

        log.debug("Stored certificate keypair %s", kid)
        return keypair

    def check_keypair(self, *, domains: str | Iterable[str] | None = None) -> Keypair | None:
        """Look up a certificate keypair by the first of *domains*."""
        names = as_domains(domains)
        if not names:
            msg = "certificates.check_keypair needs 'domains'"
            raise InvalidArgumentError(msg)
        record = self._indexes.get_by_index(IndexFamily.DOMAIN_TO_KEYPAIR, names[0])
        return Keypair.from_record(record) if record is not None else None

    # -- certificates --------------------------------------------------------

    def set(
        self,
        bundle: CertificateBundle | Mapping[str, Any],
        *,
        domains: str | Iterable[str] | None = None,
        email: str | None = None,
        account_id: str | None = None,
    ) -> CertificateBundle:
        """Store a certificate bundle and index it by account, email and domain.

        The record and every index entry are committed in one
        transaction and share the certificate expiry.
        """
        bundle = CertificateBundle.coerce(bundle)
        cid = ids.certificate_id(bundle)
        info = inspect_certificate(bundle.cert)

        names = as_domains(domains) or as_domains(bundle.domains)
        if not names and info is not None:
            names = info.dns_names

        stored = replace(
            bundle,
            id=cid,
            domains=names,
            account_id=account_id or bundle.account_id,
            email=email or bundle.email,
            issued_at=bundle.issued_at or (info.not_before if info else None),
            expires_at=bundle.expires_at or (info.not_after if info else None),
        )
        record = stored.to_record()
        ttl = self.cert_expiry

        with UnitOfWork(self._client) as uow:
            self._queue_record(uow, RecordKind.CERTIFICATE, cid, record, ttl)
            if stored.account_id:
                self._indexes.create_index(
                    IndexFamily.ACCOUNT_TO_CERTIFICATE,
                    stored.account_id,
                    cid,
                    ttl,
                    uow,
                )
            if stored.email:
                self._indexes.create_index(
                    IndexFamily.EMAIL_TO_CERTIFICATE,
                    stored.email,
                    cid,
                    ttl,
                    uow,
                )
            for domain in names:
                self._indexes.create_index(
                    IndexFamily.DOMAIN_TO_CERTIFICATE,
                    domain,
                    cid,
                    ttl,
                    uow,
                )

        log.debug("Stored certificate %s: %s", cid, sanitize_for_logs(record))
        return stored

    def check(
        self,
        *,
        domains: str | Iterable[str] | None = None,
        email: str | None = None,
        account_id: str | None = None,
    ) -> CertificateBundle | None:
        """Look up a bundle by first domain, else *email*, else *account_id*."""
        names = as_domains(domains)
        if names:
            record = self._indexes.get_by_index(IndexFamily.DOMAIN_TO_CERTIFICATE, names[0])
        elif email:
            record = self._indexes.get_by_index(IndexFamily.EMAIL_TO_CERTIFICATE, email)
        elif account_id:
            record = self._indexes.get_by_index(IndexFamily.ACCOUNT_TO_CERTIFICATE, account_id)
        else:
            msg = "certificates.check needs 'domains', 'email' or 'account_id'"
            raise InvalidArgumentError(msg)
        return CertificateBundle.from_record(record) if record is not None else None

"""Account keypairs and account registrations."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from acmestore.backend.unit_of_work import UnitOfWork
from acmestore.core import ids
from acmestore.core.errors import InvalidArgumentError
from acmestore.core.types import IndexFamily, RecordKind
from acmestore.logging.sanitize import sanitize_for_logs
from acmestore.models.account import Account
from acmestore.models.keypair import Keypair
from acmestore.repositories.base import BaseRedisRepository, as_domains
from acmestore.repositories.index import IndexManager

if TYPE_CHECKING:
    import redis

    from acmestore.backend.keys import KeySpace

log = logging.getLogger(__name__)


class AccountStore(BaseRedisRepository):
    """Accounts never expire; re-registering a keypair overwrites its record."""

    def __init__(self, client: redis.Redis, keys: KeySpace | None = None) -> None:
        super().__init__(client, keys)
        self._indexes = IndexManager(client, self._keys)

    # -- keypairs ------------------------------------------------------------

    def set_keypair(
        self,
        keypair: Keypair | Mapping[str, Any],
        *,
        email: str | None = None,
        account_id: str | None = None,
    ) -> Keypair:
        """Store an account keypair, indexed by *email* and *account_id* when given."""
        keypair = Keypair.coerce(keypair)
        kid = ids.keypair_id(keypair)

        with UnitOfWork(self._client) as uow:
            self._queue_record(uow, RecordKind.KEYPAIR, kid, keypair.to_record())
            if email:
                self._indexes.create_index(IndexFamily.EMAIL_TO_KEYPAIR, email, kid, uow=uow)
            if account_id:
                self._indexes.create_index(
                    IndexFamily.ACCOUNT_TO_KEYPAIR,
                    account_id,
                    kid,
                    uow=uow,
                )

        log.debug("Stored account keypair %s", kid)
        return keypair

    def check_keypair(
        self,
        *,
        email: str | None = None,
        account_id: str | None = None,
    ) -> Keypair | None:
        """Look up an account keypair by *email*, else by *account_id*."""
        if email:
            record = self._indexes.get_by_index(IndexFamily.EMAIL_TO_KEYPAIR, email)
        elif account_id:
            record = self._indexes.get_by_index(IndexFamily.ACCOUNT_TO_KEYPAIR, account_id)
        else:
            msg = "accounts.check_keypair needs 'email' or 'account_id'"
            raise InvalidArgumentError(msg)
        return Keypair.from_record(record) if record is not None else None

    # -- accounts ------------------------------------------------------------

    def set(
        self,
        registration: Mapping[str, Any],
        *,
        email: str | None = None,
        agree_tos: bool | str | None = None,
        account_id: str | None = None,
    ) -> Account:
        """Store an account registration and return the stored account.

        The id is always the SHA-256 of the keypair's public key PEM.
        A caller-supplied *account_id* (or ``id``/``accountId`` inside
        *registration*) is ignored.  Unknown registration fields are
        kept verbatim in :attr:`Account.extra`.
        """
        reg = copy.deepcopy(dict(registration))
        keypair = Keypair.coerce(reg.pop("keypair", None))
        derived = ids.account_id(keypair)

        supplied = {account_id, reg.pop("id", None), reg.pop("accountId", None)}
        if supplied - {None, derived}:
            log.debug("Ignoring caller-supplied account id; using derived id %s", derived)

        reg_email = reg.pop("email", None)
        reg_tos = reg.pop("agreeTos", None)
        account = Account(
            id=derived,
            keypair=keypair,
            receipt=reg.pop("receipt", None) or {},
            email=email or reg_email,
            agree_tos=agree_tos if agree_tos is not None else reg_tos,
            extra=reg,
        )

        record = account.to_record()
        with UnitOfWork(self._client) as uow:
            self._queue_record(uow, RecordKind.ACCOUNT, derived, record)
            self._queue_record(uow, RecordKind.KEYPAIR, derived, keypair.to_record())
            self._indexes.create_index(IndexFamily.ACCOUNT_TO_KEYPAIR, derived, derived, uow=uow)
            if account.email:
                self._indexes.create_index(
                    IndexFamily.EMAIL_TO_ACCOUNT,
                    account.email,
                    derived,
                    uow=uow,
                )

        log.debug("Stored account %s: %s", derived, sanitize_for_logs(record))
        return account

    def check(
        self,
        *,
        email: str | None = None,
        account_id: str | None = None,
        domains: str | Iterable[str] | None = None,
    ) -> Account | None:
        """Look up an account by *email*, else *account_id*, else *domains*.

        The first supplied field decides the lookup; a miss returns
        ``None`` without trying the remaining fields.
        """
        names = as_domains(domains)
        if email:
            record = self._indexes.get_by_index(IndexFamily.EMAIL_TO_ACCOUNT, email)
        elif account_id:
            record = self.fetch_record(RecordKind.ACCOUNT, account_id)
        elif names:
            record = self._find_by_domain(names[0])
        else:
            msg = "accounts.check needs 'email', 'account_id' or 'domains'"
            raise InvalidArgumentError(msg)
        return Account.from_record(record) if record is not None else None

    def _find_by_domain(self, domain: str) -> dict[str, Any] | None:
        """Follow the certificate stored for *domain* back to its account."""
        cert = self._indexes.get_by_index(IndexFamily.DOMAIN_TO_CERTIFICATE, domain)
        if cert is None:
            return None
        if cert.get("accountId"):
            return self.fetch_record(RecordKind.ACCOUNT, cert["accountId"])
        if cert.get("email"):
            return self._indexes.get_by_index(IndexFamily.EMAIL_TO_ACCOUNT, cert["email"])
        return None

"""Certificate bundle entity."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from acmestore.core.errors import InvalidArgumentError

_FIELDS = (
    "id",
    "cert",
    "privkey",
    "chain",
    "domains",
    "accountId",
    "email",
    "issuedAt",
    "expiresAt",
)


def _to_millis(value: datetime | None) -> int | None:
    if value is None:
        return None
    return int(value.timestamp() * 1000)


def _as_tuple(domains: Any) -> tuple[str, ...]:  # noqa: ANN401
    """A bare string is one domain, not a sequence of characters."""
    if not domains:
        return ()
    if isinstance(domains, str):
        return (domains,)
    return tuple(domains)


def _from_millis(value: int | None, name: str) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        msg = f"'{name}' must be milliseconds since the epoch (got {value!r})"
        raise InvalidArgumentError(msg)
    return datetime.fromtimestamp(value / 1000, tz=UTC)


@dataclass(frozen=True)
class CertificateBundle:
    """Issued leaf certificate with its private key and CA chain.

    ``issued_at`` / ``expires_at`` are stored as integer milliseconds
    since the epoch (``issuedAt`` / ``expiresAt``).
    """

    cert: str
    privkey: str | None = None
    chain: str | None = None
    domains: tuple[str, ...] = ()
    account_id: str | None = None
    email: str | None = None
    id: str | None = None
    issued_at: datetime | None = None
    expires_at: datetime | None = None
    extra: dict = field(default_factory=dict)

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = copy.deepcopy(self.extra)
        record.update(
            {
                "id": self.id,
                "cert": self.cert,
                "privkey": self.privkey,
                "chain": self.chain,
                "domains": list(self.domains),
                "accountId": self.account_id,
                "email": self.email,
            },
        )
        if self.issued_at is not None:
            record["issuedAt"] = _to_millis(self.issued_at)
        if self.expires_at is not None:
            record["expiresAt"] = _to_millis(self.expires_at)
        return record

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> CertificateBundle:
        data = copy.deepcopy(dict(record))
        return cls(
            cert=data.get("cert"),
            privkey=data.get("privkey"),
            chain=data.get("chain"),
            domains=_as_tuple(data.get("domains")),
            account_id=data.get("accountId"),
            email=data.get("email"),
            id=data.get("id"),
            issued_at=_from_millis(data.get("issuedAt"), "issuedAt"),
            expires_at=_from_millis(data.get("expiresAt"), "expiresAt"),
            extra={k: v for k, v in data.items() if k not in _FIELDS},
        )

    @classmethod
    def coerce(cls, value: CertificateBundle | Mapping[str, Any]) -> CertificateBundle:
        return value if isinstance(value, CertificateBundle) else cls.from_record(value)

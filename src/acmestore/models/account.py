"""Account entity."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from acmestore.models.keypair import Keypair

_FIELDS = ("id", "accountId", "email", "agreeTos", "keypair", "receipt")


@dataclass(frozen=True)
class Account:
    """A registration with the ACME server.

    ``extra`` carries every caller-supplied registration field the
    store does not interpret; it round-trips verbatim.
    """

    id: str
    keypair: Keypair
    receipt: dict = field(default_factory=dict)
    email: str | None = None
    agree_tos: bool | str | None = None
    extra: dict = field(default_factory=dict)

    @property
    def account_id(self) -> str:
        return self.id

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = copy.deepcopy(self.extra)
        record.update(
            {
                "id": self.id,
                "accountId": self.id,
                "email": self.email,
                "agreeTos": self.agree_tos,
                "keypair": self.keypair.to_record(),
                "receipt": copy.deepcopy(self.receipt),
            },
        )
        return record

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Account:
        data = copy.deepcopy(dict(record))
        return cls(
            id=data.get("id") or data["accountId"],
            keypair=Keypair.from_record(data.get("keypair") or {}),
            receipt=data.get("receipt") or {},
            email=data.get("email"),
            agree_tos=data.get("agreeTos"),
            extra={k: v for k, v in data.items() if k not in _FIELDS},
        )

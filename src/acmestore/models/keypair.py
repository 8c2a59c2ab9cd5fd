"""Keypair entity."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from acmestore.core.errors import InvalidArgumentError
from acmestore.core.pem import public_key_pem_from_private

_FIELDS = ("privateKeyPem", "privateKeyJwk", "publicKeyPem")


@dataclass(frozen=True)
class Keypair:
    private_key_pem: str | None = None
    private_key_jwk: dict | None = None
    public_key_pem: str | None = None
    extra: dict = field(default_factory=dict)

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = copy.deepcopy(self.extra)
        if self.private_key_pem is not None:
            record["privateKeyPem"] = self.private_key_pem
        if self.private_key_jwk is not None:
            record["privateKeyJwk"] = copy.deepcopy(self.private_key_jwk)
        if self.public_key_pem is not None:
            record["publicKeyPem"] = self.public_key_pem
        return record

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Keypair:
        data = copy.deepcopy(dict(record))
        return cls(
            private_key_pem=data.get("privateKeyPem"),
            private_key_jwk=data.get("privateKeyJwk"),
            public_key_pem=data.get("publicKeyPem"),
            extra={k: v for k, v in data.items() if k not in _FIELDS},
        )

    @classmethod
    def coerce(cls, value: Keypair | Mapping[str, Any] | None) -> Keypair:
        """Accept a :class:`Keypair` or wire-format mapping, filling in the public PEM.

        Raises :class:`InvalidArgumentError` when no public key PEM is
        present and none can be derived from ``privateKeyPem``.
        """
        if value is None:
            msg = "a keypair is required"
            raise InvalidArgumentError(msg)
        keypair = value if isinstance(value, Keypair) else cls.from_record(value)
        if keypair.public_key_pem:
            return keypair

        derived = None
        if keypair.private_key_pem:
            derived = public_key_pem_from_private(keypair.private_key_pem)
        if derived is None:
            msg = "keypair needs 'publicKeyPem' or a parseable 'privateKeyPem'"
            raise InvalidArgumentError(msg)
        return cls(
            private_key_pem=keypair.private_key_pem,
            private_key_jwk=keypair.private_key_jwk,
            public_key_pem=derived,
            extra=keypair.extra,
        )

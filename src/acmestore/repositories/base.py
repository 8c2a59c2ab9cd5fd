"""Shared record access for Redis-backed repositories."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from acmestore.backend.keys import KeySpace
from acmestore.core.codec import decode, encode
from acmestore.core.errors import backend_errors

if TYPE_CHECKING:
    import redis

    from acmestore.backend.unit_of_work import UnitOfWork
    from acmestore.core.types import RecordKind


def as_domains(domains: str | Iterable[str] | None) -> tuple[str, ...]:
    """Normalise a domain argument; a bare string is one domain, not its characters."""
    if not domains:
        return ()
    if isinstance(domains, str):
        return (domains,)
    return tuple(d for d in domains if d)


class BaseRedisRepository:
    def __init__(self, client: redis.Redis, keys: KeySpace | None = None) -> None:
        self._client = client
        self._keys = keys or KeySpace()

    def _read(self, key: str) -> str | None:
        """GET *key* as text; clients built without ``decode_responses`` return bytes."""
        with backend_errors(f"read of {key}"):
            value = self._client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def _is_persistent(self, key: str) -> bool:
        """True when *key* exists and carries no expiry."""
        with backend_errors(f"ttl of {key}"):
            return self._client.ttl(key) == -1  # noqa: PLR2004

    def fetch_record(self, kind: RecordKind, record_id: str) -> dict[str, Any] | None:
        """Fetch and decode one record; ``None`` when the key is absent."""
        return decode(self._read(self._keys.record(kind, record_id)))

    def _queue_record(
        self,
        uow: UnitOfWork,
        kind: RecordKind,
        record_id: str,
        record: dict[str, Any],
        ttl: int | None = None,
    ) -> None:
        uow.set(self._keys.record(kind, record_id), encode(record), ttl)

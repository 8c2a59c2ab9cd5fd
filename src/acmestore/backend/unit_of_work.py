"""Unit of Work — atomic multi-key writes in one ``MULTI/EXEC``.

A store operation writes a record together with its secondary indexes.
Queuing them on a transactional pipeline means either every key is
written or, when the commit fails, none are.

Usage::

    from acmestore.backend import UnitOfWork

    with UnitOfWork(client) as uow:
        uow.set("cert-<id>", payload, ttl=8640000)
        uow.set("idx-d2c-<hash>", "<id>", ttl=8640000)
        # EXEC on clean exit; DISCARD on exception
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

from acmestore.core.errors import backend_errors

if TYPE_CHECKING:
    import redis


class UnitOfWork:
    """Transaction-scoped helper for multi-key atomic writes.

    Commands are buffered client-side and sent with ``EXEC`` when the
    context exits cleanly; nothing reaches Redis if the block raises.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client
        self._pipe = None
        self.queued = 0

    # -- context manager -----------------------------------------------------

    def __enter__(self) -> Self:
        self._pipe = self._client.pipeline(transaction=True)
        self.queued = 0
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        pipe, self._pipe = self._pipe, None
        try:
            if exc_type is None and self.queued:
                with backend_errors("transaction commit"):
                    pipe.execute()
        finally:
            pipe.reset()

    # -- helpers -------------------------------------------------------------

    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        """Queue ``SET key value [EX ttl]``."""
        assert self._pipe is not None, "UnitOfWork must be used as a context manager"
        self._pipe.set(key, value, ex=ttl)
        self.queued += 1

"""Exception hierarchy for the store.

Every failure surfaced by a store operation is a :class:`StoreError`.
A ``None`` result from a ``check*`` call is *not* an error: it means
the record is absent.
"""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING

from redis import exceptions as redis_exceptions

if TYPE_CHECKING:
    from collections.abc import Iterator

log = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for store failures.

    Parameters
    ----------
    detail:
        Human-readable description of the failure.
    retryable:
        Whether re-issuing the whole operation may succeed.

    """

    def __init__(self, detail: str, *, retryable: bool = False) -> None:
        self.detail = detail
        self.retryable = retryable
        super().__init__(detail)


class InvalidArgumentError(StoreError, ValueError):
    """None of the lookup fields an operation needs were supplied."""


class BackendIOError(StoreError):
    """The Redis backend failed to read or write."""


class DecodeError(StoreError):
    """A stored value is not a valid serialized record."""


_TRANSIENT = (redis_exceptions.ConnectionError, redis_exceptions.TimeoutError)


@contextlib.contextmanager
def backend_errors(operation: str) -> Iterator[None]:
    """Translate :class:`redis.exceptions.RedisError` into :class:`BackendIOError`."""
    try:
        yield
    except redis_exceptions.RedisError as exc:
        retryable = isinstance(exc, _TRANSIENT)
        log.warning("Backend %s failed (retryable=%s): %s", operation, retryable, exc)
        raise BackendIOError(
            f"Backend {operation} failed: {exc}",
            retryable=retryable,
        ) from exc

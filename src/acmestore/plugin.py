"""Plugin factory: the object handed to the ACME client library.

Usage::

    import acmestore

    store = acmestore.create({"debug": True, "cert_expiry": 86400})
    try:
        account = store.accounts.check(email="admin@example.com")
    finally:
        store.close()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Self

from acmestore.backend.init import init_redis
from acmestore.backend.keys import KeySpace
from acmestore.config.loader import parse_config
from acmestore.config.settings import StoreSettings
from acmestore.core.errors import backend_errors
from acmestore.logging.setup import enable_debug_logging
from acmestore.repositories.account import AccountStore
from acmestore.repositories.certificate import CertificateStore

if TYPE_CHECKING:
    import redis

log = logging.getLogger(__name__)


class RedisStore:
    """Owns the Redis client and exposes the ``accounts`` / ``certificates`` stores.

    A client passed in by the caller is borrowed and left open by
    :meth:`close`; a client created here is closed with the store.
    """

    def __init__(self, settings: StoreSettings, client: redis.Redis | None = None) -> None:
        self._settings = settings
        self._owns_client = client is None
        self._client = client if client is not None else init_redis(settings.backend)

        keys = KeySpace(settings.backend.key_prefix)
        self.accounts = AccountStore(self._client, keys)
        self.certificates = CertificateStore(
            self._client,
            keys,
            cert_expiry=settings.cert_expiry,
        )

    def get_options(self) -> StoreSettings:
        """The resolved configuration, defaults included."""
        return self._settings

    @property
    def client(self) -> redis.Redis:
        return self._client

    def ping(self) -> bool:
        """Round-trip to the backend; raises :class:`BackendIOError` on failure."""
        with backend_errors("ping"):
            return bool(self._client.ping())

    def close(self) -> None:
        if self._owns_client:
            with backend_errors("close"):
                self._client.close()
            log.debug("Closed Redis client")

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def create(
    config: StoreSettings | Mapping[str, Any] | None = None,
    *,
    client: redis.Redis | None = None,
) -> RedisStore:
    """Build a :class:`RedisStore` from settings, a raw mapping, or defaults.

    Raises :class:`~acmestore.config.ConfigValidationError` when a
    mapping fails validation.
    """
    settings = config if isinstance(config, StoreSettings) else parse_config(config)
    if settings.debug:
        enable_debug_logging()
    log.debug(
        "Creating store (cert_expiry=%ss, key_prefix=%r)",
        settings.cert_expiry,
        settings.backend.key_prefix,
    )
    return RedisStore(settings, client=client)

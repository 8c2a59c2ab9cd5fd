"""Redis client construction from store configuration.

Usage::

    from acmestore.backend.init import init_redis

    client = init_redis(settings.backend)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import redis
from redis.backoff import ExponentialBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from redis.retry import Retry

if TYPE_CHECKING:
    from acmestore.config.settings import BackendSettings, RetrySettings

log = logging.getLogger(__name__)


def _build_retry(settings: RetrySettings) -> Retry:
    """Map :class:`RetrySettings` to a redis-py reconnect policy."""
    return Retry(
        ExponentialBackoff(cap=settings.backoff_cap, base=settings.backoff_base),
        settings.attempts,
    )


def _client_kwargs(settings: BackendSettings) -> dict[str, Any]:
    return {
        "decode_responses": True,
        "socket_timeout": settings.socket_timeout,
        "socket_connect_timeout": settings.socket_connect_timeout,
        "health_check_interval": settings.health_check_interval,
        "retry": _build_retry(settings.retry),
        "retry_on_error": [RedisConnectionError, RedisTimeoutError],
    }


def init_redis(settings: BackendSettings) -> redis.Redis:
    """Create a :class:`redis.Redis` client for the ``backend`` settings.

    No connection is opened here; redis-py connects lazily on the first
    command and reconnects according to the configured retry policy.

    Parameters
    ----------
    settings:
        The ``backend`` section from :class:`StoreSettings`.

    Returns
    -------
    redis.Redis
        A client returning ``str`` values.

    """
    kwargs = _client_kwargs(settings)

    if settings.url:
        log.info("Initialising Redis client from URL (db from URL)")
        return redis.Redis.from_url(settings.url, **kwargs)

    log.info(
        "Initialising Redis client: %s:%s/%s",
        settings.host,
        settings.port,
        settings.db,
    )
    return redis.Redis(
        host=settings.host,
        port=settings.port,
        db=settings.db,
        username=settings.username,
        password=settings.password,
        ssl=settings.ssl,
        **kwargs,
    )

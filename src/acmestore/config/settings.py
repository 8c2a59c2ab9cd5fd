"""Typed, frozen dataclasses for every configuration section.

This module is the **single source of truth** for default values.

Access pattern::

    from acmestore.config import build_settings

    settings = build_settings({"backend": {"url": "redis://cache:6379/2"}})
    print(settings.cert_expiry, settings.backend.url)
"""

from __future__ import annotations

from dataclasses import dataclass

# Roughly the validity window of a Let's Encrypt certificate plus margin.
DEFAULT_CERT_EXPIRY = 100 * 24 * 60 * 60

# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RetrySettings:
    """Reconnect policy handed to the Redis client."""

    attempts: int
    backoff_base: float
    backoff_cap: float


@dataclass(frozen=True)
class BackendSettings:
    """Redis connection settings.

    ``url`` wins over the discrete host/port/db fields when set.
    ``key_prefix`` is prepended to every key the store writes.
    """

    url: str | None
    host: str
    port: int
    db: int
    username: str | None
    password: str | None
    ssl: bool
    key_prefix: str
    socket_timeout: float
    socket_connect_timeout: float
    health_check_interval: int
    retry: RetrySettings


def _build_backend(data: dict | None) -> BackendSettings:
    d = data or {}
    r = d.get("retry") or {}
    return BackendSettings(
        url=d.get("url"),
        host=d.get("host", "localhost"),
        port=d.get("port", 6379),
        db=d.get("db", 0),
        username=d.get("username"),
        password=d.get("password"),
        ssl=d.get("ssl", False),
        key_prefix=d.get("key_prefix", ""),
        socket_timeout=d.get("socket_timeout", 5.0),
        socket_connect_timeout=d.get("socket_connect_timeout", 5.0),
        health_check_interval=d.get("health_check_interval", 30),
        retry=RetrySettings(
            attempts=r.get("attempts", 3),
            backoff_base=r.get("backoff_base", 0.008),
            backoff_cap=r.get("backoff_cap", 0.512),
        ),
    )


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingSettings:
    """Handler configuration used by the command-line tool."""

    level: str
    format: str


def _build_logging(data: dict | None) -> LoggingSettings:
    d = data or {}
    return LoggingSettings(
        level=d.get("level", "INFO"),
        format=d.get("format", "text"),
    )


# ---------------------------------------------------------------------------
# Root settings aggregate
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StoreSettings:
    debug: bool
    cert_expiry: int
    backend: BackendSettings
    logging: LoggingSettings


def build_settings(data: dict) -> StoreSettings:
    """Build the full typed settings tree from raw config data.

    Accepts the original plugin option names ``certExpiry`` and
    ``backendOptions`` as aliases of ``cert_expiry`` and ``backend``.
    """
    return StoreSettings(
        debug=data.get("debug", False),
        cert_expiry=data.get("cert_expiry", data.get("certExpiry", DEFAULT_CERT_EXPIRY)),
        backend=_build_backend(data.get("backend", data.get("backendOptions"))),
        logging=_build_logging(data.get("logging")),
    )

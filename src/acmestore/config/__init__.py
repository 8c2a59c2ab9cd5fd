"""Configuration subsystem.

Public API::

    from acmestore.config import load_config, parse_config, StoreSettings

    settings = load_config("config.yaml")
    settings.backend.url          # typed access
"""

from acmestore.config.loader import (
    ConfigValidationError,
    load_config,
    parse_config,
)
from acmestore.config.settings import (
    DEFAULT_CERT_EXPIRY,
    BackendSettings,
    LoggingSettings,
    RetrySettings,
    StoreSettings,
    build_settings,
)

__all__ = [
    "DEFAULT_CERT_EXPIRY",
    "BackendSettings",
    "ConfigValidationError",
    "LoggingSettings",
    "RetrySettings",
    "StoreSettings",
    "build_settings",
    "load_config",
    "parse_config",
]

"""Configuration loading and validation.

Lifecycle::

    # From a YAML file (command-line tool)
    settings = load_config("/etc/acmestore/config.yaml")

    # From a mapping handed to acmestore.create()
    settings = parse_config({"cert_expiry": 86400})
"""

from __future__ import annotations

import copy
import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from acmestore.config.settings import StoreSettings, build_settings

_ENV_RE = re.compile(
    r"^\$\{([^}:]+?)(?::-(.*))?\}$",
    re.DOTALL,
)

_LOG_FORMATS = frozenset({"json", "text"})
_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
_KNOWN_TOP_LEVEL = frozenset(
    {"debug", "cert_expiry", "certExpiry", "backend", "backendOptions", "logging"},
)

log = logging.getLogger(__name__)


class ConfigValidationError(Exception):
    """Raised when validation finds one or more problems."""

    def __init__(self, errors: list[str]) -> None:
        """Store *errors* and build a human-readable message."""
        self.errors = errors
        body = "\n".join(f"  - {e}" for e in errors)
        super().__init__(f"Configuration validation failed:\n{body}")


# ---------------------------------------------------------------------------
# Environment variable resolution
# ---------------------------------------------------------------------------


def _resolve_value(value: str, path: str) -> str:
    """Replace ``${VAR}`` or ``${VAR:-default}`` with env var value."""
    match = _ENV_RE.match(value)
    if match is None:
        return value
    var_name = match.group(1)
    fallback = match.group(2)
    resolved = os.environ.get(var_name)
    if resolved is not None:
        return resolved
    if fallback is not None:
        return fallback
    raise ConfigValidationError(
        [
            f"Environment variable '${{{var_name}}}' referenced "
            f"at '{path}' is not set and has no default",
        ],
    )


def _resolve_env_vars(data: Any, path: str = "") -> None:  # noqa: ANN401
    """Walk *data* in-place and resolve ``${VAR}``/``${VAR:-default}`` strings."""
    if isinstance(data, dict):
        for key in data:
            child_path = f"{path}.{key}" if path else key
            if isinstance(data[key], str):
                data[key] = _resolve_value(data[key], child_path)
            elif isinstance(data[key], (dict, list)):
                _resolve_env_vars(data[key], child_path)
    elif isinstance(data, list):
        for idx, item in enumerate(data):
            child_path = f"{path}[{idx}]"
            if isinstance(item, str):
                data[idx] = _resolve_value(item, child_path)
            elif isinstance(item, (dict, list)):
                _resolve_env_vars(item, child_path)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _is_int(value: Any) -> bool:  # noqa: ANN401
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:  # noqa: ANN401
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate(data: dict) -> None:  # noqa: C901, PLR0912
    """Collect every problem in *data* and raise them together."""
    errors: list[str] = []

    unknown = sorted(set(data) - _KNOWN_TOP_LEVEL)
    if unknown:
        log.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))

    debug = data.get("debug", False)
    if not isinstance(debug, bool):
        errors.append(f"debug must be a boolean (got {debug!r})")

    expiry = data.get("cert_expiry", data.get("certExpiry", 1))
    if not _is_int(expiry) or expiry <= 0:
        errors.append(f"cert_expiry must be a positive integer of seconds (got {expiry!r})")

    backend = data.get("backend", data.get("backendOptions")) or {}
    if not isinstance(backend, dict):
        errors.append("backend must be a mapping")
        backend = {}

    port = backend.get("port", 6379)
    if not _is_int(port) or not 0 < port < 65536:  # noqa: PLR2004
        errors.append(f"backend.port must be between 1 and 65535 (got {port!r})")

    db = backend.get("db", 0)
    if not _is_int(db) or db < 0:
        errors.append(f"backend.db must be a non-negative integer (got {db!r})")

    url = backend.get("url")
    if url is not None and not (
        isinstance(url, str) and url.startswith(("redis://", "rediss://", "unix://"))
    ):
        errors.append(
            f"backend.url must use the redis://, rediss:// or unix:// scheme (got {url!r})",
        )

    if not isinstance(backend.get("key_prefix", ""), str):
        errors.append("backend.key_prefix must be a string")

    for name in ("socket_timeout", "socket_connect_timeout"):
        value = backend.get(name, 1)
        if not _is_number(value) or value <= 0:
            errors.append(f"backend.{name} must be a positive number (got {value!r})")

    retry = backend.get("retry") or {}
    if not isinstance(retry, dict):
        errors.append("backend.retry must be a mapping")
        retry = {}
    attempts = retry.get("attempts", 0)
    if not _is_int(attempts) or attempts < 0:
        errors.append(f"backend.retry.attempts must be >= 0 (got {attempts!r})")
    base = retry.get("backoff_base", 0.008)
    cap = retry.get("backoff_cap", 0.512)
    if not (_is_number(base) and _is_number(cap)) or base < 0 or cap < base:
        errors.append(
            "backend.retry.backoff_cap must be >= backend.retry.backoff_base >= 0 "
            f"(got base={base!r}, cap={cap!r})",
        )

    logging_cfg = data.get("logging") or {}
    if not isinstance(logging_cfg, dict):
        errors.append("logging must be a mapping")
        logging_cfg = {}
    level = str(logging_cfg.get("level", "INFO")).upper()
    if level not in _LOG_LEVELS:
        errors.append(f"logging.level must be one of {sorted(_LOG_LEVELS)} (got {level!r})")
    fmt = logging_cfg.get("format", "text")
    if not isinstance(fmt, str) or fmt not in _LOG_FORMATS:
        errors.append(f"logging.format must be one of {sorted(_LOG_FORMATS)} (got {fmt!r})")

    if errors:
        raise ConfigValidationError(errors)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_config(data: Mapping[str, Any] | None) -> StoreSettings:
    """Validate *data* and build :class:`StoreSettings` with defaults applied."""
    raw = copy.deepcopy(dict(data or {}))
    _validate(raw)
    return build_settings(raw)


def load_config(config_file: str | Path) -> StoreSettings:
    """Load a YAML (or JSON) config file, resolving ``${VAR}`` references."""
    path = Path(config_file)
    with path.open(encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = f"top level of {path} must be a mapping"
        raise ConfigValidationError([msg])
    _resolve_env_vars(data)
    log.debug("Loaded configuration from %s", path)
    return parse_config(data)

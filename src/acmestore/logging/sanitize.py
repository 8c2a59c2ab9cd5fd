"""Sensitive data sanitization for log output.

Provides :func:`sanitize_for_logs` which redacts private key material
(PEM bodies, JWK key values, stored ``privateKeyPem`` / ``privkey``
fields) from records before they are written to logs or printed.
Only metadata (key type, curve, ids, domains) is preserved.
"""

from __future__ import annotations

import re
from typing import Any

REDACTED = "[REDACTED]"

# JWK fields that contain raw key material
_JWK_SECRET_FIELDS = frozenset({"n", "e", "x", "y", "d", "p", "q", "dp", "dq", "qi", "k"})

# Record fields whose whole value is private key material
_SECRET_RECORD_FIELDS = frozenset({"privateKeyPem", "privateKeyJwk", "privkey"})

# Regex matching the base64 body inside PEM blocks
_PEM_BODY_RE = re.compile(
    r"(-----BEGIN [A-Z0-9 ]+-----)"
    r"([\s\S]*?)"
    r"(-----END [A-Z0-9 ]+-----)",
)


def sanitize_jwk(jwk: dict) -> dict:
    """Return a copy of *jwk* with key material replaced by ``[REDACTED]``.

    Preserves ``kty``, ``crv``, ``use``, ``alg``, ``kid``, and ``key_ops``
    for diagnostic context.
    """
    result = {}
    for key, value in jwk.items():
        if key in _JWK_SECRET_FIELDS:
            result[key] = REDACTED
        else:
            result[key] = value
    return result


def sanitize_pem(pem: str) -> str:
    """Replace the base64 body of PEM blocks with ``[REDACTED]``.

    Preserves BEGIN/END markers so the type of object is still visible.
    """

    def _redact(m) -> str:
        return f"{m.group(1)}\n{REDACTED}\n{m.group(3)}"

    return _PEM_BODY_RE.sub(_redact, pem)


def sanitize_for_logs(data: Any) -> Any:  # noqa: ANN401
    """Recursively sanitize sensitive material in *data*.

    Handles dicts (store records, JWK-like structures, PEM strings in
    values), lists, and plain strings.  Non-sensitive data passes
    through unchanged.
    """
    if isinstance(data, dict):
        # Detect JWK-like dicts by presence of "kty"
        if "kty" in data:
            return sanitize_jwk(data)
        return {
            k: REDACTED if k in _SECRET_RECORD_FIELDS and v is not None else sanitize_for_logs(v)
            for k, v in data.items()
        }

    if isinstance(data, (list, tuple)):
        return type(data)(sanitize_for_logs(item) for item in data)

    if isinstance(data, str):
        if "-----BEGIN " in data:
            return sanitize_pem(data)
        return data

    return data

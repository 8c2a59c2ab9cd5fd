"""JSON text codec for stored records."""

from __future__ import annotations

import copy
import json
from typing import Any

from acmestore.core.errors import DecodeError


def encode(record: dict[str, Any]) -> str:
    """Serialize *record*; the caller's object is never aliased or mutated."""
    return json.dumps(copy.deepcopy(record), separators=(",", ":"))


def decode(text: str | bytes | None) -> dict[str, Any] | None:
    """Parse stored text back into a record.

    ``None`` (key absent) passes through.  Anything that is not a JSON
    object raises :class:`DecodeError`.
    """
    if text is None:
        return None
    try:
        record = json.loads(text)
    except (ValueError, TypeError) as exc:
        msg = f"stored value is not valid JSON: {exc}"
        raise DecodeError(msg) from exc
    if not isinstance(record, dict):
        msg = f"stored value is a JSON {type(record).__name__}, expected an object"
        raise DecodeError(msg)
    return record

"""Key layout of the store.

=============================  ====================
Key                            Value
=============================  ====================
``keypair-<id>``               JSON keypair
``account-<id>``               JSON account
``cert-<id>``                  JSON certificate
``idx-<family>-<sha256(x)>``   target record id
=============================  ====================
"""

from __future__ import annotations

from acmestore.core.ids import sha256_hex
from acmestore.core.types import IndexFamily, RecordKind


class KeySpace:
    """Builds Redis keys, optionally under a namespace prefix."""

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix

    def record(self, kind: RecordKind, record_id: str) -> str:
        return f"{self.prefix}{kind.value}-{record_id}"

    def index(self, family: IndexFamily, lookup: str) -> str:
        """Index keys hash the lookup string so arbitrary input is key-safe."""
        return f"{self.prefix}idx-{family.value}-{sha256_hex(lookup)}"

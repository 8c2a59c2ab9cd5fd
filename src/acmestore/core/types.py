"""Enumerated types for the store's key space.

All enums inherit from :class:`enum.StrEnum` so their ``.value`` is the
literal fragment written into Redis keys.
"""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class RecordKind(StrEnum):
    KEYPAIR = "keypair"
    ACCOUNT = "account"
    CERTIFICATE = "cert"


# ---------------------------------------------------------------------------
# Secondary indexes
# ---------------------------------------------------------------------------


class IndexFamily(StrEnum):
    """Secondary index families, named ``<lookup>2<target>``.

    ``e`` is an email address, ``a`` an account id, ``d`` a domain,
    ``k`` a keypair and ``c`` a certificate.
    """

    EMAIL_TO_ACCOUNT = "e2a"
    EMAIL_TO_KEYPAIR = "e2k"
    EMAIL_TO_CERTIFICATE = "e2c"
    ACCOUNT_TO_CERTIFICATE = "a2c"
    ACCOUNT_TO_KEYPAIR = "a2k"
    DOMAIN_TO_CERTIFICATE = "d2c"
    DOMAIN_TO_KEYPAIR = "d2k"

    @property
    def target_kind(self) -> RecordKind:
        """The kind of record an entry of this family points at."""
        return _TARGETS[self.value[-1]]


_TARGETS = {
    "a": RecordKind.ACCOUNT,
    "k": RecordKind.KEYPAIR,
    "c": RecordKind.CERTIFICATE,
}

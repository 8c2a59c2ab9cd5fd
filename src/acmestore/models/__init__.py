"""Entity models for the store.

All models are frozen dataclasses.  Use :func:`dataclasses.replace`
for modifications (copy-on-write).
"""

from acmestore.models.account import Account
from acmestore.models.certificate import CertificateBundle
from acmestore.models.keypair import Keypair

__all__ = [
    "Account",
    "CertificateBundle",
    "Keypair",
]

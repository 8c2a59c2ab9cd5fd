"""Repository classes for the Redis persistence layer.

Each store composes the :class:`IndexManager` with record reads and
writes from :class:`BaseRedisRepository`.
"""

from acmestore.repositories.account import AccountStore
from acmestore.repositories.base import BaseRedisRepository
from acmestore.repositories.certificate import CertificateStore
from acmestore.repositories.index import IndexManager

__all__ = [
    "AccountStore",
    "BaseRedisRepository",
    "CertificateStore",
    "IndexManager",
]

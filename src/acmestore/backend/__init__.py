"""Redis backend subsystem.

Public API::

    from acmestore.backend import init_redis, KeySpace, UnitOfWork
"""

from acmestore.backend.init import init_redis
from acmestore.backend.keys import KeySpace
from acmestore.backend.unit_of_work import UnitOfWork

__all__ = [
    "KeySpace",
    "UnitOfWork",
    "init_redis",
]

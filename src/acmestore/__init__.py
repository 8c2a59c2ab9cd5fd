"""ACME certificate-store plugin backed by Redis.

Public API::

    import acmestore

    with acmestore.create({"backend": {"url": "redis://localhost:6379/0"}}) as store:
        store.accounts.set_keypair(keypair, email="admin@example.com")
        cert = store.certificates.check(domains=["example.com"])
"""

from acmestore.plugin import RedisStore, create

__version__ = "1.0.0"

__all__ = ["RedisStore", "__version__", "create"]

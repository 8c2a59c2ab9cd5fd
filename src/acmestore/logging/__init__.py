"""Logging subsystem.

Public API::

    from acmestore.logging import configure_logging

    configure_logging(settings.logging)
"""

from acmestore.logging.setup import configure_logging, enable_debug_logging

__all__ = ["configure_logging", "enable_debug_logging"]

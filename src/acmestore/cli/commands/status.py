"""Backend connectivity check."""

from __future__ import annotations

import logging
import sys

from acmestore.core.errors import BackendIOError

log = logging.getLogger(__name__)


def run_status(settings, args) -> None:  # noqa: ARG001
    """Ping Redis; exit 0 when reachable, 1 otherwise."""
    from acmestore.plugin import create

    with create(settings) as store:
        try:
            store.ping()
        except BackendIOError as exc:
            print(f"backend unreachable: {exc.detail}", file=sys.stderr)  # noqa: T201
            sys.exit(1)
    print("backend OK")  # noqa: T201

"""Inspect subcommand — look up stored records for debugging.

Usage::

    acmestore -c config.yaml inspect account --email <email>
    acmestore -c config.yaml inspect certificate --domain <domain>
    acmestore -c config.yaml inspect keypair --account-id <id>
"""

from __future__ import annotations

import json
import sys

from acmestore.core.errors import StoreError
from acmestore.logging.sanitize import sanitize_for_logs


def run_inspect(settings, args) -> None:
    """Dispatch to the appropriate inspect sub-handler."""
    sub = getattr(args, "inspect_command", None)
    if sub is None:
        sys.exit(1)

    from acmestore.plugin import create

    domains = [args.domain] if args.domain else None
    with create(settings) as store:
        try:
            if sub == "account":
                found = store.accounts.check(
                    email=args.email,
                    account_id=args.account_id,
                    domains=domains,
                )
            elif sub == "certificate":
                found = store.certificates.check(
                    domains=domains,
                    email=args.email,
                    account_id=args.account_id,
                )
            elif domains:
                found = store.certificates.check_keypair(domains=domains)
            else:
                found = store.accounts.check_keypair(
                    email=args.email,
                    account_id=args.account_id,
                )
        except StoreError as exc:
            print(f"error: {exc.detail}", file=sys.stderr)  # noqa: T201
            sys.exit(1)

    if found is None:
        print(f"{sub} not found", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    record = found.to_record()
    if not args.show_secrets:
        record = sanitize_for_logs(record)
    print(json.dumps(record, indent=2, sort_keys=True))  # noqa: T201

"""acmestore command-line entry point.

Usage::

    acmestore -c /etc/acmestore/config.yaml status
    acmestore -c config.yaml --validate-only
    acmestore -c config.yaml inspect account --email admin@example.com
    acmestore -c config.yaml inspect certificate --domain www.example.com
    acmestore -c config.yaml inspect keypair --domain www.example.com
    python -m acmestore -c config.yaml status
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

log = logging.getLogger(__name__)


def _get_version() -> str:
    from acmestore import __version__

    return __version__


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="acmestore",
        description="Redis storage for ACME accounts and certificates",
    )
    parser.add_argument(
        "-c",
        "--config",
        required=True,
        metavar="PATH",
        help="Path to the configuration file (YAML or JSON).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable debug output (full tracebacks, verbose logging).",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        default=False,
        help="Validate the configuration file and exit.",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # status
    subparsers.add_parser("status", help="Check backend connectivity")

    # inspect
    inspect_parser = subparsers.add_parser("inspect", help="Look up stored records")
    inspect_sub = inspect_parser.add_subparsers(dest="inspect_command")
    for name, help_text in [
        ("account", "Inspect an account by email, account id or domain"),
        ("certificate", "Inspect a certificate by domain, email or account id"),
        ("keypair", "Inspect a keypair (account keypair unless --domain is given)"),
    ]:
        p = inspect_sub.add_parser(name, help=help_text)
        p.add_argument("--email", help="Email address the record is indexed by")
        p.add_argument("--account-id", dest="account_id", help="Account id")
        p.add_argument("--domain", help="Domain name the record is indexed by")
        p.add_argument(
            "--show-secrets",
            action="store_true",
            default=False,
            help="Print private key material instead of redacting it.",
        )

    return parser


def _print_error(message: str) -> None:
    """Print a user-facing error to stderr."""
    print(f"acmestore: error: {message}", file=sys.stderr)  # noqa: T201


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.  Parses arguments, loads config, dispatches."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    # -- resolve config path ---
    config_path = Path(args.config)
    if not config_path.is_file():
        _print_error(f"configuration file not found: {config_path}")
        sys.exit(1)

    # -- bootstrap logging early (basic stderr until config is loaded) ---
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    # -- load & validate config ---
    from acmestore.config import ConfigValidationError, load_config

    try:
        settings = load_config(config_path)
    except ConfigValidationError as exc:
        _print_error(str(exc))
        sys.exit(1)
    except Exception as exc:
        if args.debug:
            raise
        _print_error(f"failed to load configuration: {exc}")
        sys.exit(1)

    # -- replace bootstrap logging with structured logging ---
    from acmestore.logging import configure_logging

    configure_logging(settings.logging, debug=args.debug or settings.debug)

    if args.validate_only:
        _print_settings_summary(settings)
        sys.exit(0)

    command = args.command

    if command == "status":
        from acmestore.cli.commands.status import run_status

        run_status(settings, args)
    elif command == "inspect":
        from acmestore.cli.commands.inspect import run_inspect

        run_inspect(settings, args)
    else:
        parser.print_help(sys.stderr)
        sys.exit(2)


def _print_settings_summary(settings) -> None:
    """Print a short summary of the loaded configuration."""
    backend = settings.backend
    target = backend.url or f"{backend.host}:{backend.port}/{backend.db}"
    print("Configuration OK")  # noqa: T201
    print(f"  backend:     {target}")  # noqa: T201
    print(f"  key prefix:  {backend.key_prefix!r}")  # noqa: T201
    print(f"  cert expiry: {settings.cert_expiry}s")  # noqa: T201

"""Command-line entry point: `zvault` runs the TUI, `zvault version` prints the version."""

from __future__ import annotations

import argparse
import logging
import sys

from zvault import __version__
from zvault.config import APP_NAME, load_settings, setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Terminal vault for secrets and tasks",
    )
    parser.add_argument("--dir", help="Vault directory (default: $ZVAULT_DIR or XDG data dir)")
    parser.add_argument(
        "--log-level",
        help="Log level for the log file (default: $ZVAULT_LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("version", help="Print version and exit")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "version":
        print(f"{APP_NAME} {__version__}")
        return 0

    settings = load_settings(vault_dir=args.dir, log_level=args.log_level)
    setup_logging(settings)
    logger.info("starting %s %s (vault %s)", APP_NAME, __version__, settings.vault_dir)

    from zvault.app import run

    run(settings.vault_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())

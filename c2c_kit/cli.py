"""Command-line entry point for ``c2c-kit`` / ``python -m c2c_kit``."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from c2c_kit import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="c2c-kit",
        description="C2C Community Starter Kit helpers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  c2c-kit create\n"
            "  c2c-kit setup-db\n"
            "  c2c-kit check-security ./my-app\n"
            "  c2c-kit verify-setup\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subcommands = parser.add_subparsers(dest="command", metavar="COMMAND")
    subcommands.required = True

    subcommands.add_parser("create", help="Interactively scaffold a new app from a template")
    subcommands.add_parser("setup-db", help="Set up the Supabase database for the current project")

    security = subcommands.add_parser("check-security", help="Run security checks on a project")
    security.add_argument("path", nargs="?", default=None, help="Project directory (default: cwd)")

    verify = subcommands.add_parser("verify-setup", help="Verify a starter-kit checkout is complete")
    verify.add_argument("path", nargs="?", default=None, help="Kit directory (default: cwd)")

    return parser


def run(argv: Optional[Sequence[str]] = None) -> int:
    """Parse *argv* and dispatch to the selected helper; returns the exit code."""
    args = build_parser().parse_args(argv)

    if args.command == "create":
        from c2c_kit.create_app import create_new_app

        return create_new_app()
    if args.command == "setup-db":
        from c2c_kit.database import setup_database

        return setup_database()
    if args.command == "check-security":
        from c2c_kit.security import check_security

        return check_security(Path(args.path) if args.path else None)
    if args.command == "verify-setup":
        from c2c_kit.verify import verify_setup

        return verify_setup(Path(args.path) if args.path else None)
    return 2


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()

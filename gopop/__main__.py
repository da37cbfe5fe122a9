"""
gopop - Command-line client

Usage: python -m gopop [--url URL] [--user USER] [--password PASS] COMMAND ...

Connection settings fall back to GOPOP_URL, GOPOP_USER, GOPOP_PASS and
GOPOP_TIMEOUT, read from the environment or a .env file in the working
directory.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from gopop.core.connection import Connection
from gopop.core.errors import GopopError
from gopop.core.models import ArgValue

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_IO = 3


def parse_arg(raw: str) -> ArgValue:
    """Parse a statement argument as a JSON scalar, else keep it as text."""
    try:
        value = json.loads(raw)
    except ValueError:
        return raw
    if isinstance(value, (list, dict)):
        return raw
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gopop", description="gopop database service client")
    parser.add_argument("--url", help="service base URL (GOPOP_URL)")
    parser.add_argument("--user", help="basic auth user (GOPOP_USER)")
    parser.add_argument("--password", help="basic auth password (GOPOP_PASS)")
    parser.add_argument("--timeout", type=float, help="request timeout in seconds (GOPOP_TIMEOUT)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log requests")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("create", help="create a database from a migration file")
    p.add_argument("name")
    p.add_argument("migration_file")

    p = sub.add_parser("get", help="show database metadata")
    p.add_argument("name")

    p = sub.add_parser("drop", help="drop a database")
    p.add_argument("name")

    for command, help_text in (("query", "run a read statement"), ("exec", "run a write statement")):
        p = sub.add_parser(command, help=help_text)
        p.add_argument("name")
        p.add_argument("sql")
        p.add_argument("args", nargs="*", help="positional arguments as JSON scalars")

    return parser


def _configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else os.environ.get("GOPOP_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def run(conn: Connection, args: argparse.Namespace) -> Optional[str]:
    """Dispatch one parsed command; returns the message to print, if any."""
    if args.command == "create":
        return conn.create(args.name, args.migration_file).message
    if args.command == "get":
        return conn.get(args.name).message
    if args.command == "drop":
        conn.drop(args.name)
        return None
    values = [parse_arg(a) for a in args.args]
    if args.command == "query":
        return conn.query(args.name, args.sql, *values).message
    return conn.exec(args.name, args.sql, *values).message


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command-line client."""
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    with Connection(args.user, args.password, args.url, timeout=args.timeout) as conn:
        try:
            message = run(conn, args)
        except GopopError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return EXIT_ERROR
        except OSError as exc:
            print(f"I/O error: {exc}", file=sys.stderr)
            return EXIT_IO

    if message:
        print(message)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

"""Command-line front doors for quickfile.

``main`` launches the interactive launcher. ``client_main`` is the scriptable
one-shot client that sends a single request and prints the raw response.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .bridge import RESPONSE_TIMEOUT_SECONDS, OneShotClient
from .config import LOG_DIR, LOG_FILENAME, save_theme_name
from .errors import DaemonUnavailable, TransportUnavailable
from .logs import configure_logging
from .paths import BRIDGE_SOCKETS, SocketPaths
from .protocol import request_for_command
from .ui_theme import available_theme_names

CLIENT_COMMANDS = ("search", "status", "refresh")


def _positive_float(value: str) -> float:
    """argparse type for positive float values."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def _error_json(message: str) -> str:
    return json.dumps({"type": "Error", "message": message}, separators=(",", ":"))


def build_client_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quickfile-client",
        description="Send one request to the quickfile daemon and print the response.",
    )
    parser.add_argument("command", choices=CLIENT_COMMANDS, help="Request to send.")
    parser.add_argument("query", nargs="?", default="", help="Search query (search only).")
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=RESPONSE_TIMEOUT_SECONDS,
        help=f"Seconds to wait for a response (default: {RESPONSE_TIMEOUT_SECONDS:g}).",
    )
    parser.add_argument(
        "--request-socket",
        type=Path,
        default=BRIDGE_SOCKETS.request,
        help="Daemon request socket path.",
    )
    parser.add_argument(
        "--response-socket",
        type=Path,
        default=BRIDGE_SOCKETS.response,
        help="Response socket path.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log transport details to stderr.")
    return parser


def client_main(argv: list[str] | None = None) -> int:
    """Run one request; returns the process exit code.

    Unknown or missing subcommands exit through argparse with usage on stderr.
    """
    args = build_client_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)

    client = OneShotClient(
        SocketPaths(request=args.request_socket, response=args.response_socket),
        timeout=args.timeout,
    )
    try:
        response = client.call(request_for_command(args.command, args.query))
    except DaemonUnavailable as exc:
        sys.stderr.write(_error_json(exc.message) + "\n")
        return 1
    except TransportUnavailable as exc:
        sys.stderr.write(_error_json(str(exc)) + "\n")
        return 1

    if response is not None:
        sys.stdout.write(response.rstrip("\n") + "\n")
        sys.stdout.flush()
    return 0


def build_launcher_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quickfile",
        description="Fuzzy-find files through the quickfile daemon and open the selection.",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument(
        "--runtime-dir",
        type=Path,
        default=None,
        help="Directory holding the session sockets (default: /run/user/<uid>).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Write debug logs.")
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help=f"Log file path (default: {LOG_DIR / LOG_FILENAME}).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and run the interactive launcher."""
    args = build_launcher_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, log_path=args.log_file or LOG_DIR / LOG_FILENAME)
    if args.theme and args.theme.strip().lower() in available_theme_names():
        save_theme_name(args.theme.strip().lower())

    from .app import run_launcher

    return run_launcher(runtime_dir=args.runtime_dir, theme_name=args.theme, no_color=args.no_color)


if __name__ == "__main__":
    sys.exit(main())

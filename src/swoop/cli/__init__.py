"""Swoop CLI.

Entry point registered as ``swoop`` in ``pyproject.toml``::

    [project.scripts]
    swoop = "swoop.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``swoop`` command."""
    parser = argparse.ArgumentParser(
        prog="swoop",
        description="Swoop — a small HTTP routing layer with ordered middleware.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- swoop run --------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Serve an app until interrupted")
    run_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app)",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--log-level",
        default=None,
        choices=["debug", "info", "warning", "error", "critical"],
        help="Logging level (default: app config)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from swoop.cli._run import run_server

        run_server(args)

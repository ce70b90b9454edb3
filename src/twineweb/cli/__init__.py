"""twineweb CLI: route generation, route listing, and the dev watcher.

Entry point registered as ``twineweb`` in ``pyproject.toml``::

    [project.scripts]
    twineweb = "twineweb.cli:main"
"""

import argparse
import sys

from twineweb import __version__


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--project-root",
        default=".",
        help="Directory holding pyproject.toml (default: current directory)",
    )
    parser.add_argument("--app-dir", default=None, help="App directory, relative to the project root")
    parser.add_argument("--output", default=None, help="Generated module, relative to the app directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``twineweb`` command."""
    parser = argparse.ArgumentParser(
        prog="twineweb",
        description="twineweb: file-based routing for Python web apps.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- twineweb routes ----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="Manage file-based routes")
    routes_sub = routes_parser.add_subparsers(dest="routes_command")

    generate_parser = routes_sub.add_parser(
        "generate", help="Generate the route registration module from app/"
    )
    _add_common_args(generate_parser)

    list_parser = routes_sub.add_parser("list", help="List all discovered routes")
    _add_common_args(list_parser)

    # -- twineweb dev -------------------------------------------------------
    dev_parser = subparsers.add_parser(
        "dev", help="Watch app/ and regenerate routes on change"
    )
    _add_common_args(dev_parser)
    dev_parser.add_argument(
        "--debounce",
        type=float,
        default=None,
        help="Seconds of quiet before regenerating",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        if args.routes_command is None:
            routes_parser.print_help()
            sys.exit(0)

        from twineweb.cli._routes import run_generate, run_list

        if args.routes_command == "generate":
            run_generate(args)
        elif args.routes_command == "list":
            run_list(args)
    elif args.command == "dev":
        from twineweb.cli._dev import run_dev

        run_dev(args)

"""``twineweb routes generate`` and ``twineweb routes list``.

Both commands scan the app directory and print the discovered routes.
``generate`` also validates the tree and writes the registration module.
"""

import argparse
import os
import sys
from pathlib import Path

from twineweb.cli._config import load_config
from twineweb.errors import TwineError
from twineweb.routing.codegen import collect_routes
from twineweb.routing.pipeline import generate_routes, list_routes
from twineweb.routing.types import RouteNode


def run_generate(args: argparse.Namespace) -> None:
    """Scan, validate, and write the route registration module.

    Exits with status 1 on any scan, validation, or write failure.
    """
    project_root, config = load_config(args)
    output = config.output_path(project_root)

    print(f"Scanning routes in {config.app_dir}/...")
    try:
        tree = generate_routes(project_root, config)
    except TwineError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    print(f"Routes generated successfully: {_relative(output, project_root)}")
    print_route_table(tree, project_root)


def run_list(args: argparse.Namespace) -> None:
    """Print discovered routes and active layouts without writing anything."""
    project_root, config = load_config(args)
    try:
        tree = list_routes(project_root, config)
    except TwineError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    print_route_table(tree, project_root)


def _relative(path: str | Path, base: Path) -> str:
    return Path(os.path.relpath(path, base)).as_posix()


def collect_layouts(tree: RouteNode) -> list[RouteNode]:
    return [node for node in tree.walk() if node.has_layout]


def layout_pattern(node: RouteNode) -> str:
    """Pattern a layout covers (``/users/*``; ``/`` at the root)."""
    path = node.full_path()
    if not path:
        return "/"
    return path + "/*"


def print_route_table(tree: RouteNode, project_root: Path) -> None:
    routes = collect_routes(tree)
    if not routes:
        print("No routes found.")
        return

    # Build rows: (method, pattern, handler file)
    rows: list[tuple[str, str, str]] = [
        (method, route.url_pattern(), _relative(route.handler_file, project_root))
        for route in routes
        for method in route.methods
    ]

    max_method = max(6, max((len(r[0]) for r in rows), default=0))  # "METHOD" header
    max_path = max(4, max((len(r[1]) for r in rows), default=0))  # "PATH" header
    max_file = max(4, max((len(r[2]) for r in rows), default=0))  # "FILE" header

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{}}"
    print()
    print(fmt.format("METHOD", "PATH", "FILE"))
    print("-" * min(max_method + max_path + 4 + max_file, 80))
    for row in rows:
        print(fmt.format(*row))

    layouts = collect_layouts(tree)
    if layouts:
        patterns = [layout_pattern(node) for node in layouts]
        width = max(len(p) for p in patterns)
        print()
        print("Layouts active:")
        for node, pattern in zip(layouts, patterns, strict=True):
            print(f"  {pattern:<{width}}  {_relative(node.layout_file, project_root)}")

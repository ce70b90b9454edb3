"""``twineweb dev`` — regenerate routes on every change under app/.

Generates once at startup, then hands off to :class:`RouteWatcher`
until interrupted.
"""

import argparse
import functools
import logging
import sys

import anyio

from twineweb.cli._config import load_config
from twineweb.dev import RouteWatcher
from twineweb.errors import TwineError
from twineweb.routing.pipeline import generate_routes

logger = logging.getLogger("twineweb.dev")


def run_dev(args: argparse.Namespace) -> None:
    """Watch the app directory and keep the registration module current."""
    project_root, config = load_config(args)
    app_dir = config.app_path(project_root)

    if not app_dir.is_dir():
        print(f"Error: {config.app_dir}/ directory not found", file=sys.stderr)
        raise SystemExit(1)

    regenerate = functools.partial(generate_routes, project_root, config)
    try:
        regenerate()
    except TwineError as exc:
        # Keep watching: the next save may fix it
        logger.warning("Failed to generate routes: %s", exc)

    watcher = RouteWatcher(
        regenerate,
        app_dir,
        debounce=config.debounce,
        poll_interval=config.poll_interval,
        ignore=(config.output_path(project_root),),
    )
    try:
        anyio.run(watcher.run)
    except KeyboardInterrupt:
        print("Stopped watching.")

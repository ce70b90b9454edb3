"""Shared CLI setup: configuration loading and logging."""

import argparse
import logging
import sys
from pathlib import Path

from twineweb.config import RoutesConfig
from twineweb.errors import ConfigurationError


def load_config(args: argparse.Namespace) -> tuple[Path, RoutesConfig]:
    """Resolve the project root and merge ``[tool.twineweb]`` with CLI flags.

    Exits with status 1 on invalid configuration.
    """
    project_root = Path(args.project_root).resolve()
    try:
        config = RoutesConfig.from_pyproject(project_root).with_overrides(
            app_dir=args.app_dir,
            output_file=args.output,
            debounce=getattr(args, "debounce", None),
            log_level="debug" if args.verbose else None,
        )
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return project_root, config

"""Scan, validate, generate: the full route pipeline.

Each call owns the tree it builds, so repeated runs (from the dev watcher
or the CLI) share no state and are safe to repeat.
"""

import logging
from pathlib import Path

from twineweb.config import RoutesConfig
from twineweb.errors import ScanError
from twineweb.manifest import get_module_path
from twineweb.routing.codegen import CodeGenerator
from twineweb.routing.scanner import scan_routes
from twineweb.routing.types import RouteNode
from twineweb.routing.validator import validate_routes

logger = logging.getLogger("twineweb.routing")


def _require_app_dir(project_root: Path, config: RoutesConfig) -> Path:
    app_dir = config.app_path(project_root)
    if not app_dir.is_dir():
        raise ScanError(app_dir, f"{config.app_dir}/ directory not found")
    return app_dir


def generate_routes(project_root: str | Path, config: RoutesConfig | None = None) -> RouteNode:
    """Regenerate the registration module for a project.

    The module path is resolved first, so a broken ``pyproject.toml``
    fails before any scanning.

    Returns:
        The validated route tree the module was generated from.

    Raises:
        TwineError: Any module-resolution, scan, validation, or write
            failure.  The output file is unchanged on error.
    """
    root = Path(project_root)
    config = config or RoutesConfig()

    module_path = get_module_path(root)
    app_dir = _require_app_dir(root, config)

    logger.debug("Scanning routes in %s", app_dir)
    tree = scan_routes(app_dir)
    validate_routes(tree)

    CodeGenerator(
        route_tree=tree,
        module_path=module_path,
        project_root=root,
        output_file=config.output_path(root),
    ).generate()
    return tree


def list_routes(project_root: str | Path, config: RoutesConfig | None = None) -> RouteNode:
    """Scan a project's routes without validating or writing anything."""
    root = Path(project_root)
    config = config or RoutesConfig()
    return scan_routes(_require_app_dir(root, config))

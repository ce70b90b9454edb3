"""Filesystem route discovery for the ``app/`` directory.

Walks ``app/pages`` and ``app/api`` and discovers:

- ``page.py`` and ``route.py`` files as handler modules
- ``layout.py`` files as layout middleware

Directory names wrapped in ``[brackets]`` become path parameters and
``[...name]`` directories become catch-all parameters.  Handler modules are
never imported: HTTP methods are read from the source with :mod:`ast`,
so scanning is safe on code that has side effects at import time.
"""

from __future__ import annotations

import ast
import logging
from pathlib import Path

from twineweb.errors import ScanError
from twineweb.routing.pattern import parse_segment, sanitize_package_name
from twineweb.routing.types import (
    API_DIR,
    HTTP_METHODS,
    LAYOUT_FILE,
    LAYOUT_FUNC,
    PAGE_FILE,
    PAGES_DIR,
    ROUTE_FILE,
    RouteNode,
)

logger = logging.getLogger("twineweb.routing")


def scan_routes(root_dir: str | Path) -> RouteNode:
    """Walk an app directory and build the route tree.

    The returned root has up to two children: the ``pages`` branch and the
    ``api`` branch, in that order.  Missing directories yield an empty tree.

    Raises:
        ScanError: A directory could not be listed or a handler/layout
            file could not be parsed.
    """
    root = RouteNode(path=str(root_dir))

    for branch in (PAGES_DIR, API_DIR):
        branch_dir = Path(root_dir) / branch
        if not branch_dir.is_dir():
            continue
        node = _scan_directory(branch_dir, branch)
        if node.has_content():
            root.add_child(node)

    return root


def _scan_directory(directory: Path, url_segment: str) -> RouteNode:
    """Build the node for *directory* and recurse into its subdirectories."""
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise ScanError(directory, f"reading directory: {exc.strerror or exc}") from exc

    node = RouteNode(path=str(directory), url_segment=url_segment)

    for entry in entries:
        if not entry.is_file():
            continue

        if entry.name == PAGE_FILE:
            _set_handler(node, entry)
            node.is_page = True
        elif entry.name == ROUTE_FILE:
            _set_handler(node, entry)
            node.is_api = True
        elif entry.name == LAYOUT_FILE:
            node.layout_file = str(entry)
            node.has_layout = True
            node.layout_func = has_layout_function(entry)
            if not node.package_name:
                node.package_name = sanitize_package_name(directory.name)
            logger.debug("Discovered layout %s", entry)

    for entry in entries:
        if not entry.is_dir() or _is_ignored_dir(entry.name):
            continue

        segment = parse_segment(entry.name)
        child = _scan_directory(entry, segment.value)

        # Empty branches are pruned silently
        if not child.has_content():
            continue

        child.is_dynamic = segment.is_dynamic
        child.is_catch_all = segment.is_catch_all
        child.param_name = segment.param_name
        node.add_child(child)

    return node


def _set_handler(node: RouteNode, file: Path) -> None:
    node.handler_file = str(file)
    node.methods = detect_methods(file)
    # Handler wins over a layout seen earlier in the same directory
    node.package_name = sanitize_package_name(file.parent.name)
    logger.debug("Discovered handler %s (%s)", file, ", ".join(node.methods) or "no methods")


def _is_ignored_dir(name: str) -> bool:
    return name == "__pycache__" or name.startswith(".")


def _parse(file: Path) -> ast.Module:
    try:
        source = file.read_text(encoding="utf-8")
    except OSError as exc:
        raise ScanError(file, f"reading file: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise ScanError(file, f"decoding file: {exc}") from exc

    try:
        return ast.parse(source, filename=str(file))
    except SyntaxError as exc:
        raise ScanError(file, f"parsing source: {exc.msg} (line {exc.lineno})") from exc


def _top_level_functions(module: ast.Module) -> list[str]:
    return [
        stmt.name
        for stmt in module.body
        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef))
    ]


def _top_level_bindings(module: ast.Module) -> set[str]:
    """Names bound at module top level by ``def``, assignment, or import."""
    names = set(_top_level_functions(module))
    for stmt in module.body:
        if isinstance(stmt, ast.Assign):
            names.update(t.id for t in stmt.targets if isinstance(t, ast.Name))
        elif isinstance(stmt, ast.AnnAssign) and stmt.value is not None:
            if isinstance(stmt.target, ast.Name):
                names.add(stmt.target.id)
        elif isinstance(stmt, (ast.Import, ast.ImportFrom)):
            for alias in stmt.names:
                if alias.name != "*":
                    names.add(alias.asname or alias.name.split(".")[0])
    return names


def _declared_all(module: ast.Module) -> set[str] | None:
    """Names listed in a literal ``__all__``, or None when absent or dynamic."""
    declared: set[str] | None = None
    for stmt in module.body:
        if isinstance(stmt, ast.Assign):
            targets = stmt.targets
            value = stmt.value
        elif isinstance(stmt, ast.AnnAssign) and stmt.value is not None:
            targets = [stmt.target]
            value = stmt.value
        else:
            continue

        if not any(isinstance(t, ast.Name) and t.id == "__all__" for t in targets):
            continue
        if not isinstance(value, (ast.List, ast.Tuple)):
            return None
        names = set()
        for elt in value.elts:
            if not (isinstance(elt, ast.Constant) and isinstance(elt.value, str)):
                return None
            names.add(elt.value)
        declared = names
    return declared


def detect_methods(file_path: str | Path) -> list[str]:
    """Return the exported HTTP-method functions defined in a handler file.

    A function is exported when it is defined at module top level and,
    if the module declares a literal ``__all__``, is listed there.  Only
    exact upper-case verb names count (``GET``, ``POST``, ``PUT``,
    ``DELETE``, ``PATCH``); anything else is ignored.

    Methods are returned in source order without duplicates.

    Raises:
        ScanError: The file cannot be read or is not valid Python.
    """
    module = _parse(Path(file_path))
    exported = _declared_all(module)

    methods: list[str] = []
    for name in _top_level_functions(module):
        if name not in HTTP_METHODS or name in methods:
            continue
        if exported is not None and name not in exported:
            continue
        methods.append(name)
    return methods


def has_layout_function(file_path: str | Path) -> bool:
    """True if a layout file binds ``layout`` at module top level.

    A ``def``, an assignment (``layout = make_layout()``), or an import
    (``from shared import layout``) all count.

    Raises:
        ScanError: The file cannot be read or is not valid Python.
    """
    module = _parse(Path(file_path))
    return LAYOUT_FUNC in _top_level_bindings(module)

"""Layout chain construction.

Walks from a route node up to the tree root collecting ``layout.py``
files.  The chain is ordered outermost first, so the root layout runs
before any nested layout when a request reaches the handler.
"""

from pathlib import Path

from twineweb.routing.types import LAYOUT_FILE, LayoutChain, LayoutInfo, RouteNode


def layout_alias(node: RouteNode) -> str:
    """Alias the generated module binds a node's layout module to."""
    return f"{node.package_alias()}_layout"


def layout_import_path(
    node: RouteNode, module_path: str, project_root: str | Path | None = None
) -> str:
    """Dotted import path of a node's ``layout.py``."""
    return f"{node.package_path(module_path, project_root)}.{Path(LAYOUT_FILE).stem}"


def build_layout_chain(
    node: RouteNode,
    module_path: str,
    project_root: str | Path | None = None,
) -> LayoutChain:
    """Collect every layout from the tree root down to *node* (inclusive).

    Nodes without a layout are skipped without breaking the chain.

    Args:
        node: Route node whose middleware chain is wanted.
        module_path: Import root from ``pyproject.toml``.
        project_root: Directory holding ``pyproject.toml``.

    Raises:
        GenerationError: A layout lies outside *project_root*.
    """
    layouts = tuple(
        LayoutInfo(
            file_path=current.layout_file,
            package_path=layout_import_path(current, module_path, project_root),
            package_name=layout_alias(current),
        )
        for current in node.ancestors()
        if current.has_layout
    )
    return LayoutChain(layouts)

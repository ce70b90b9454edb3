"""Data models for the file-based route tree.

``RouteNode`` mirrors one directory under ``app/``.  Nodes are built once
per scan, then read by the validator, the layout chain builder, and the
code generator.  Only ``children`` grows, and only while scanning.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path, PurePath

from twineweb.errors import GenerationError
from twineweb.routing.pattern import sanitize_package_name

# Verbs recognised as handler functions, in registration order
HTTP_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH")

PAGE_FILE = "page.py"
ROUTE_FILE = "route.py"
LAYOUT_FILE = "layout.py"

# Function a layout file must define
LAYOUT_FUNC = "layout"

# Branch directories under the app root
PAGES_DIR = "pages"
API_DIR = "api"


@dataclass(slots=True, eq=False)
class RouteNode:
    """A directory in the scanned route tree.

    Attributes:
        path: Filesystem path of the directory (e.g. ``app/pages/users``).
        url_segment: Routing token: a literal, ``{param}``, or ``{param...}``.
            Empty for the tree root.
        children: Child nodes in directory-scan order.
        parent: Back-reference used for upward walks only.
        handler_file: Path to ``page.py`` or ``route.py``, or ``""``.
        layout_file: Path to ``layout.py``, or ``""``.
        methods: HTTP verbs exported by the handler file.
        package_name: Python package name of the directory.
        layout_func: False when the layout file lacks a ``layout`` function.
    """

    path: str
    url_segment: str = ""
    children: list[RouteNode] = field(default_factory=list)
    parent: RouteNode | None = field(default=None, repr=False)

    handler_file: str = ""
    layout_file: str = ""

    methods: list[str] = field(default_factory=list)
    package_name: str = ""

    is_directory: bool = True
    is_page: bool = False
    is_api: bool = False
    has_layout: bool = False
    layout_func: bool = True

    is_dynamic: bool = False
    is_catch_all: bool = False
    param_name: str = ""

    def add_child(self, child: RouteNode) -> None:
        child.parent = self
        self.children.append(child)

    @property
    def has_handler(self) -> bool:
        return bool(self.handler_file)

    def has_content(self) -> bool:
        """True if this subtree holds any handler or layout."""
        return self.has_handler or self.has_layout or bool(self.children)

    def ancestors(self) -> list[RouteNode]:
        """Return this node and its ancestors, root first."""
        chain: list[RouteNode] = []
        current: RouteNode | None = self
        while current is not None:
            chain.append(current)
            current = current.parent
        chain.reverse()
        return chain

    def walk(self) -> Iterator[RouteNode]:
        """Yield this node and every descendant, depth-first, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    # -- URL derivation -------------------------------------------------------

    def full_path(self) -> str:
        """URL path from the tree root to this node.

        The ``pages`` branch is elided, the ``api`` branch is kept::

            pages -> users -> {id}   =>  /users/{id}
            api   -> users -> {id}   =>  /api/users/{id}

        Returns ``""`` for the root and for the ``pages`` node itself.
        """
        segments = [node.url_segment for node in self.ancestors() if node.url_segment]
        if segments and segments[0] == PAGES_DIR:
            segments = segments[1:]
        if not segments:
            return ""
        return "/" + "/".join(segments)

    def url_pattern(self) -> str:
        """Router pattern for this node (``/`` for the index)."""
        return self.full_path() or "/"

    # -- Import naming --------------------------------------------------------

    def _relative_parts(self) -> tuple[str, ...]:
        # Parts below the app root: the top of the chain is either the root
        # node (segment "") or, for detached subtrees, a branch node.
        top = self.ancestors()[0]
        base = PurePath(top.path) if not top.url_segment else PurePath(top.path).parent
        try:
            return PurePath(self.path).relative_to(base).parts
        except ValueError:
            return tuple(p for p in PurePath(self.path).parts if p not in ("/", "app"))

    def package_alias(self) -> str:
        """Identifier-safe alias built from the path below the app root.

        ``app/pages/users/[id]`` becomes ``pages_users_id_param``; the app
        root itself becomes ``root``.
        """
        parts = [sanitize_package_name(p) for p in self._relative_parts()]
        parts = [p for p in parts if p]
        if not parts:
            return "root"
        return "_".join(parts)

    def package_path(self, module_path: str, project_root: str | Path | None = None) -> str:
        """Dotted import path of this node's directory.

        Args:
            module_path: Import root from ``pyproject.toml``.
            project_root: Directory holding ``pyproject.toml``.  When given,
                the node must live beneath it.

        Raises:
            GenerationError: If the node lies outside *project_root*.
        """
        path = PurePath(self.path)
        if project_root is not None:
            try:
                parts = path.relative_to(project_root).parts
            except ValueError as exc:
                msg = f"{self.path} is not inside project root {project_root}"
                raise GenerationError(msg) from exc
        else:
            parts = tuple(p for p in path.parts if p != path.anchor)

        sanitized = [sanitize_package_name(p) for p in parts]
        return ".".join([module_path, *sanitized]) if sanitized else module_path


@dataclass(frozen=True, slots=True)
class LayoutInfo:
    """One layout in a route's middleware chain.

    Attributes:
        file_path: Filesystem path to ``layout.py``.
        package_path: Dotted import path of the layout module.
        package_name: Unique alias the generated module binds it to.
        func_name: Middleware function to call on the module.
    """

    file_path: str
    package_path: str
    package_name: str
    func_name: str = LAYOUT_FUNC

    @property
    def layout_dir(self) -> str:
        return str(Path(self.file_path).parent)


@dataclass(frozen=True, slots=True)
class LayoutChain:
    """Ordered layouts from outermost (tree root) to innermost (leaf)."""

    layouts: tuple[LayoutInfo, ...] = ()

    def has_layouts(self) -> bool:
        return bool(self.layouts)

    def __len__(self) -> int:
        return len(self.layouts)

    def __iter__(self) -> Iterator[LayoutInfo]:
        return iter(self.layouts)

"""Registration module generation.

Renders a validated route tree into one Python module exposing
``register_routes(router)``.  The module is assembled from ordered
sections (header, imports, loader, module bindings, middleware helper,
registrations) so that import aliasing is decided in one place before
any text is produced.

Output is deterministic: page routes come before API routes, each group
sorted by URL pattern, and module bindings are sorted by alias.  Regenerating
an unchanged tree yields identical bytes.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from twineweb.errors import GenerationError
from twineweb.routing import _templates
from twineweb.routing.layouts import build_layout_chain
from twineweb.routing.pattern import router_method_name
from twineweb.routing.types import LayoutChain, RouteNode

logger = logging.getLogger("twineweb.routing")


@dataclass(frozen=True, slots=True)
class ModuleBinding:
    """A module the generated file loads and binds to a global name.

    Attributes:
        alias: Global name in the generated module.
        import_path: Dotted name registered in ``sys.modules``.
        file_path: Source file the module is loaded from.
    """

    alias: str
    import_path: str
    file_path: str


@dataclass(slots=True)
class ImportSet:
    """Deduplicated module bindings keyed by import path.

    The first module to claim an alias keeps it; later modules whose
    preferred alias is taken get ``_2``, ``_3``, ... appended.
    """

    _by_path: dict[str, ModuleBinding] = field(default_factory=dict)
    _aliases: set[str] = field(default_factory=set)

    def add(self, import_path: str, file_path: str, preferred_alias: str) -> str:
        """Register a module and return the alias it is bound to.

        Raises:
            GenerationError: Two different files map to the same import path.
        """
        existing = self._by_path.get(import_path)
        if existing is not None:
            if existing.file_path != file_path:
                msg = (
                    f"import path collision: {file_path} and {existing.file_path} "
                    f"both resolve to {import_path}"
                )
                raise GenerationError(msg)
            return existing.alias

        alias = preferred_alias
        suffix = 2
        while alias in self._aliases:
            alias = f"{preferred_alias}_{suffix}"
            suffix += 1

        self._aliases.add(alias)
        self._by_path[import_path] = ModuleBinding(alias, import_path, file_path)
        return alias

    def alias_for(self, import_path: str) -> str:
        return self._by_path[import_path].alias

    @property
    def bindings(self) -> list[ModuleBinding]:
        """Bindings sorted by alias."""
        return sorted(self._by_path.values(), key=lambda b: b.alias)

    def __len__(self) -> int:
        return len(self._by_path)

    def __contains__(self, alias: object) -> bool:
        return alias in self._aliases


def handler_import_path(node: RouteNode, module_path: str, project_root: str | Path | None) -> str:
    """Dotted import path of a node's handler module."""
    return f"{node.package_path(module_path, project_root)}.{Path(node.handler_file).stem}"


def handler_alias(node: RouteNode) -> str:
    return f"{node.package_alias()}_{Path(node.handler_file).stem}"


def collect_routes(node: RouteNode) -> list[RouteNode]:
    """Every handler-bearing node at or below *node*, sorted by URL pattern.

    Ties (the same pattern reached from two files) are broken by the
    handler path so the order never depends on filesystem scan order.
    """
    routes = [n for n in node.walk() if n.has_handler]
    routes.sort(key=lambda n: (n.url_pattern(), n.handler_file))
    return routes


def _literal(value: str) -> str:
    """Render a double-quoted Python string literal."""
    return json.dumps(value, ensure_ascii=False)


@dataclass
class CodeGenerator:
    """Generates the route registration module for a scanned app tree.

    Attributes:
        route_tree: Validated tree from :func:`~twineweb.routing.scan_routes`.
        module_path: Import root from ``pyproject.toml``.
        project_root: Directory holding ``pyproject.toml``.
        output_file: Path of the module to write.
    """

    route_tree: RouteNode
    module_path: str = ""
    project_root: str | Path | None = None
    output_file: str | Path | None = None

    def generate(self) -> None:
        """Render the module and write it to ``output_file``.

        The file is replaced atomically: on any failure the previous
        contents are left untouched.

        Raises:
            GenerationError: Rendering failed, the result does not compile,
                or the file could not be written.
        """
        if self.output_file is None:
            raise GenerationError("no output file configured")
        output = Path(self.output_file)

        routes = self.collect_routes(self.route_tree)
        code = self.generate_code(routes)

        try:
            compile(code, str(output), "exec")
        except (SyntaxError, ValueError) as exc:
            # ValueError covers null bytes and undecodable (surrogate) path names
            raise GenerationError(f"generated code does not compile: {exc}") from exc

        _write_atomic(output, code)
        logger.info("Generated %d route(s) into %s", len(routes), output)

    def collect_routes(self, node: RouteNode) -> list[RouteNode]:
        return collect_routes(node)

    def build_layout_chain(self, node: RouteNode) -> LayoutChain:
        return build_layout_chain(node, self.module_path, self.project_root)

    def collect_imports(self, routes: list[RouteNode]) -> ImportSet:
        """Gather handler and layout modules for *routes*, deduplicated.

        Layouts are registered before the route's own handler so that the
        outermost modules claim their preferred aliases first.
        """
        imports = ImportSet()
        for route in routes:
            for layout in self.build_layout_chain(route):
                imports.add(layout.package_path, layout.file_path, layout.package_name)
            imports.add(
                handler_import_path(route, self.module_path, self.project_root),
                route.handler_file,
                handler_alias(route),
            )
        return imports

    def generate_code(self, routes: list[RouteNode]) -> str:
        """Render the module source for an already-sorted route list."""
        imports = self.collect_imports(routes)

        sections = [
            _templates.PRELUDE.format(
                header=_templates.HEADER,
                package=Path(self.route_tree.path).name or "app",
            ),
            _templates.LOAD_HELPER.format(),
        ]
        if len(imports):
            sections.append(self._render_bindings(imports))
        sections.append(_templates.APPLY_MIDDLEWARE)
        sections.append(_templates.REGISTER_ROUTES.format(body=self._render_body(routes, imports)))

        return "\n\n\n".join(sections) + "\n"

    def _output_dir(self) -> Path:
        if self.output_file is not None:
            return Path(self.output_file).parent
        return Path(self.route_tree.path)

    def _render_bindings(self, imports: ImportSet) -> str:
        out_dir = self._output_dir()
        lines = []
        for binding in imports.bindings:
            relpath = Path(os.path.relpath(binding.file_path, out_dir)).as_posix()
            lines.append(
                _templates.BINDING.format(
                    alias=binding.alias,
                    import_path=_literal(binding.import_path),
                    relpath=_literal(relpath),
                )
            )
        return "\n".join(lines)

    def _render_body(self, routes: list[RouteNode], imports: ImportSet) -> str:
        groups = (
            ("Page routes", [r for r in routes if not r.is_api]),
            ("API routes", [r for r in routes if r.is_api]),
        )
        sections = []
        for title, group in groups:
            lines = [_templates.SECTION.format(title=title)]
            for route in group:
                lines.extend(self._render_registrations(route, imports))
            if len(lines) > 1:
                sections.append("\n".join(lines))
        if not sections:
            return _templates.EMPTY_BODY
        return "\n\n".join(sections)

    def _render_registrations(self, route: RouteNode, imports: ImportSet) -> list[str]:
        handler = imports.alias_for(
            handler_import_path(route, self.module_path, self.project_root)
        )
        middlewares = ", ".join(
            f"{imports.alias_for(layout.package_path)}.{layout.func_name}"
            for layout in self.build_layout_chain(route)
        )
        return [
            _templates.REGISTRATION.format(
                router_method=router_method_name(method),
                pattern=_literal(route.url_pattern()),
                handler=f"{handler}.{method}",
                middlewares=middlewares,
            )
            for method in route.methods
        ]


def _write_atomic(output: Path, code: str) -> None:
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=output.parent, prefix=f".{output.name}.", suffix=".tmp"
        )
    except OSError as exc:
        raise GenerationError(f"writing {output}: {exc.strerror or exc}") from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(code)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, output)
    except OSError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise GenerationError(f"writing {output}: {exc.strerror or exc}") from exc
    except UnicodeError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise GenerationError(f"writing {output}: {exc}") from exc

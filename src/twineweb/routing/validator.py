"""Route tree validation.

Checks the structural rules the code generator relies on and stops at the
first violation.  The walk is depth-first: a node is checked, then each
child subtree, then the node's children as a group.  Siblings that mix
static and dynamic segments are allowed; the router resolves precedence.
"""

from collections.abc import Iterator

from twineweb.errors import RouteValidationError
from twineweb.routing.types import HTTP_METHODS, LAYOUT_FUNC, RouteNode


def validate_routes(root: RouteNode) -> None:
    """Validate a scanned route tree.

    Raises:
        RouteValidationError: On the first rule the tree breaks.
    """
    _validate_tree(root)
    _check_patterns(root)


def _validate_tree(node: RouteNode) -> None:
    _validate_node(node)
    for child in node.children:
        _validate_tree(child)
    _check_conflicts(node)


def validate_param_name(name: str) -> None:
    """Check a ``[param]`` name is a valid identifier.

    The first character must be a letter or underscore and the rest
    letters, digits, or underscores.  Letters and digits follow Unicode
    classification, so ``[café]`` and ``[ид]`` are accepted.

    Raises:
        ValueError: Describing the problem.
    """
    if not name:
        raise ValueError("parameter name cannot be empty")

    first = name[0]
    if not (first.isalpha() or first == "_"):
        raise ValueError(f"parameter name must start with letter or underscore: {name}")

    for char in name[1:]:
        if not (char.isalpha() or char.isdecimal() or char == "_"):
            raise ValueError(f"parameter name contains invalid character: {name}")


def _validate_node(node: RouteNode) -> None:
    if node.is_dynamic:
        try:
            validate_param_name(node.param_name)
        except ValueError as exc:
            raise RouteValidationError(node.path, "param-name", f"{node.path}: {exc}") from exc

    if node.is_catch_all:
        for descendant in _descendants(node):
            if descendant.has_handler:
                raise RouteValidationError(
                    node.path,
                    "catch-all-last",
                    f"{node.path}: catch-all segment must be the last segment in the route",
                )

    if node.has_handler and not node.methods:
        verbs = ", ".join(HTTP_METHODS)
        raise RouteValidationError(
            node.handler_file,
            "no-methods",
            f"{node.handler_file}: handler file must export at least one "
            f"HTTP method function ({verbs})",
        )

    if node.has_layout and not node.layout_func:
        raise RouteValidationError(
            node.layout_file,
            "layout-func",
            f"{node.layout_file}: layout file must define a {LAYOUT_FUNC}() function",
        )


def _descendants(node: RouteNode) -> Iterator[RouteNode]:
    for child in node.children:
        yield from child.walk()


def _check_conflicts(node: RouteNode) -> None:
    static: list[RouteNode] = []
    catch_all: list[RouteNode] = []

    for child in node.children:
        if child.is_catch_all:
            catch_all.append(child)
        elif not child.is_dynamic:
            static.append(child)

    if len(catch_all) > 1:
        raise RouteValidationError(
            node.path,
            "multiple-catch-all",
            f"{node.path}: multiple catch-all routes at same level",
        )

    seen: dict[str, RouteNode] = {}
    for child in static:
        existing = seen.get(child.url_segment)
        if existing is not None and existing.has_handler and child.has_handler:
            raise RouteValidationError(
                child.path,
                "duplicate-route",
                f"duplicate route: {child.handler_file} and {existing.handler_file} "
                f"both map to /{child.url_segment}",
            )
        if existing is None or child.has_handler:
            seen[child.url_segment] = child


def _check_patterns(root: RouteNode) -> None:
    # Sibling checks miss clashes across branches, e.g. app/pages/api/users
    # and app/api/users both deriving /api/users.
    seen: dict[tuple[str, str], RouteNode] = {}
    for node in root.walk():
        if not node.has_handler:
            continue
        pattern = node.url_pattern()
        for method in node.methods:
            existing = seen.setdefault((method, pattern), node)
            if existing is not node:
                raise RouteValidationError(
                    node.path,
                    "duplicate-route",
                    f"duplicate route: {node.handler_file} and {existing.handler_file} "
                    f"both register {method} {pattern}",
                )

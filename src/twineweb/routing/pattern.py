"""Naming rules shared by the scanner, layout builder, and code generator.

Turns directory names into URL segments, Python identifiers, and dotted
import paths.  Pure string functions; no filesystem access.
"""

import re
from dataclasses import dataclass

# Segment parts that cannot appear inside an identifier
_INVALID_IDENT_RE = re.compile(r"\W")


@dataclass(frozen=True, slots=True)
class Segment:
    """A directory name mapped onto the URL.

    Attributes:
        value: URL token (``users``, ``{id}``, ``{slug...}``).
        is_dynamic: True for ``[param]`` and ``[...param]`` directories.
        is_catch_all: True for ``[...param]`` directories.
        param_name: Parameter identifier, ``""`` for literals.
    """

    value: str
    is_dynamic: bool = False
    is_catch_all: bool = False
    param_name: str = ""


def is_bracketed(dir_name: str) -> bool:
    return dir_name.startswith("[") and dir_name.endswith("]") and len(dir_name) >= 2


def parse_segment(dir_name: str) -> Segment:
    """Map a directory name to its URL segment.

    Examples::

        "users"     -> Segment("users")
        "[id]"      -> Segment("{id}", is_dynamic=True, param_name="id")
        "[...slug]" -> Segment("{slug...}", is_dynamic=True, is_catch_all=True,
                               param_name="slug")

    The parameter name is not checked here; the validator owns that rule.
    """
    if not is_bracketed(dir_name):
        return Segment(dir_name)

    param = dir_name[1:-1]
    if param.startswith("..."):
        param = param[3:]
        return Segment(f"{{{param}...}}", is_dynamic=True, is_catch_all=True, param_name=param)
    return Segment(f"{{{param}}}", is_dynamic=True, param_name=param)


def sanitize_package_name(dir_name: str) -> str:
    """Convert a directory name into a valid Python identifier fragment.

    ``[id]`` becomes ``id_param`` and ``[...slug]`` becomes ``slug_catchall``.
    Dashes, dots, and any other non-word characters become underscores.
    """
    name = dir_name
    suffix = ""
    if is_bracketed(name):
        name = name[1:-1]
        if name.startswith("..."):
            name = name[3:]
            suffix = "_catchall"
        else:
            suffix = "_param"
    name = _INVALID_IDENT_RE.sub("_", name) + suffix
    if name and name[0].isdigit():
        name = "_" + name
    return name


def router_method_name(http_method: str) -> str:
    """Router registration method for an HTTP verb (``GET`` -> ``get``).

    Unknown verbs are returned unchanged.
    """
    if http_method in {"GET", "POST", "PUT", "DELETE", "PATCH"}:
        return http_method.lower()
    return http_method

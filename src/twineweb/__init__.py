"""twineweb — file-based routing for Python web apps.

Scans ``app/pages`` and ``app/api`` for ``page.py``, ``route.py``, and
``layout.py`` files and generates a module that registers every route,
wrapped in its layouts, on a router::

    from app.routes_gen import register_routes

    register_routes(router)

Regenerate with ``twineweb routes generate`` or keep it current with
``twineweb dev``.
"""

__version__ = "0.1.0"
__all__ = [
    "CodeGenerator",
    "ConfigurationError",
    "GenerationError",
    "ModuleResolutionError",
    "RouteNode",
    "RouteValidationError",
    "RoutesConfig",
    "ScanError",
    "TwineError",
    "generate_routes",
    "list_routes",
    "scan_routes",
    "validate_routes",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import twineweb`` fast while providing a clean top-level API.
    """
    if name == "RoutesConfig":
        from twineweb.config import RoutesConfig

        return RoutesConfig

    if name in (
        "CodeGenerator",
        "RouteNode",
        "generate_routes",
        "list_routes",
        "scan_routes",
        "validate_routes",
    ):
        from twineweb import routing as _routing

        return getattr(_routing, name)

    if name in (
        "ConfigurationError",
        "GenerationError",
        "ModuleResolutionError",
        "RouteValidationError",
        "ScanError",
        "TwineError",
    ):
        from twineweb import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

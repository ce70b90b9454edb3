"""Source templates for the generated registration module.

Plain Python strings with ``str.format()`` substitution.  Literal braces
in the emitted code are doubled.
"""

HEADER = "# Code generated by twineweb routes generate. DO NOT EDIT."

PRELUDE = '''\
{header}
"""File-based route registrations for the ``{package}`` package.

Regenerate with ``twineweb routes generate``; edits to this file are lost.
"""

import importlib.util
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from types import ModuleType
from typing import Any

Handler = Callable[..., Any]
Middleware = Callable[[Handler], Handler]

_HERE = Path(__file__).resolve().parent'''

LOAD_HELPER = '''\
def _load(name: str, relpath: str) -> ModuleType:
    """Load a handler or layout module from a path relative to this file."""
    module = sys.modules.get(name)
    if module is not None:
        return module
    spec = importlib.util.spec_from_file_location(name, _HERE / relpath)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot load route module {{name}} from {{relpath}}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        del sys.modules[name]
        raise
    return module'''

BINDING = "{alias} = _load({import_path}, {relpath})"

APPLY_MIDDLEWARE = '''\
def _apply_middleware(handler: Handler, middlewares: Sequence[Middleware]) -> Handler:
    """Wrap *handler* so the first middleware in the sequence runs outermost."""
    for middleware in reversed(middlewares):
        handler = middleware(handler)
    return handler'''

REGISTER_ROUTES = '''\
def register_routes(router: Any) -> None:
    """Register every file-based route on *router*."""
{body}'''

REGISTRATION = "    router.{router_method}({pattern}, _apply_middleware({handler}, [{middlewares}]))"

SECTION = "    # {title}"

EMPTY_BODY = "    pass"

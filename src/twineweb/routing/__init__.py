"""File-based routing: scan ``app/``, validate, generate registrations.

Conventions::

    app/
      pages/
        layout.py        # Root layout middleware
        page.py          # GET /
        users/
          page.py        # GET, POST /users
          [id]/
            page.py      # GET, PUT, DELETE /users/{id}
      api/
        docs/
          [...path]/
            route.py     # GET /api/docs/{path...}
"""

from twineweb.manifest import get_module_path
from twineweb.routing.codegen import CodeGenerator, collect_routes
from twineweb.routing.layouts import build_layout_chain
from twineweb.routing.pipeline import generate_routes, list_routes
from twineweb.routing.scanner import detect_methods, scan_routes
from twineweb.routing.types import LayoutChain, LayoutInfo, RouteNode
from twineweb.routing.validator import validate_param_name, validate_routes

__all__ = [
    "CodeGenerator",
    "LayoutChain",
    "LayoutInfo",
    "RouteNode",
    "build_layout_chain",
    "collect_routes",
    "detect_methods",
    "generate_routes",
    "get_module_path",
    "list_routes",
    "scan_routes",
    "validate_param_name",
    "validate_routes",
]

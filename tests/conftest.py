"""Shared fixtures for twineweb tests.

``project`` builds a throwaway project on disk: a ``pyproject.toml`` plus
whatever ``app/`` files a test writes.  ``load_generated`` executes a
generated registration module against a recording router.
"""

import importlib.util
import sys
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from textwrap import dedent
from typing import Any

import pytest

PYPROJECT = """\
[project]
name = "demo-app"
version = "0.1.0"
"""

PAGE_GET_POST = """\
def GET(request):
    return "list"


def POST(request):
    return "create"
"""

PAGE_ITEM = """\
def GET(request):
    return "show"


def PUT(request):
    return "update"


def DELETE(request):
    return "destroy"
"""


def layout_source(tag: str) -> str:
    """A layout whose middleware wraps the handler result in ``tag(...)``."""
    return dedent(
        f"""\
        def layout(handler):
            def wrapped(request):
                return "{tag}(" + handler(request) + ")"
            return wrapped
        """
    )


@dataclass
class Project:
    """A project directory under ``tmp_path``."""

    root: Path

    @property
    def app(self) -> Path:
        return self.root / "app"

    def write(self, relpath: str, content: str = "") -> Path:
        path = self.root / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def mkdir(self, relpath: str) -> Path:
        path = self.root / relpath
        path.mkdir(parents=True, exist_ok=True)
        return path


@pytest.fixture
def project(tmp_path: Path) -> Project:
    proj = Project(tmp_path / "demo")
    proj.write("pyproject.toml", PYPROJECT)
    proj.mkdir("app")
    return proj


@dataclass
class RecordingRouter:
    """Router stand-in that records per-verb registrations."""

    calls: list[tuple[str, str, Callable[..., Any]]] = field(default_factory=list)

    def _record(self, method: str) -> Callable[[str, Callable[..., Any]], None]:
        def register(pattern: str, handler: Callable[..., Any]) -> None:
            self.calls.append((method, pattern, handler))

        return register

    def __getattr__(self, name: str) -> Callable[[str, Callable[..., Any]], None]:
        if name in {"get", "post", "put", "delete", "patch"}:
            return self._record(name.upper())
        raise AttributeError(name)

    @property
    def registered(self) -> list[tuple[str, str]]:
        return [(method, pattern) for method, pattern, _ in self.calls]

    def handler(self, method: str, pattern: str) -> Callable[..., Any]:
        for m, p, h in self.calls:
            if (m, p) == (method, pattern):
                return h
        raise KeyError((method, pattern))


@pytest.fixture
def load_generated() -> Iterator[Callable[[Path], RecordingRouter]]:
    """Execute a generated module and return the router it registered on.

    Modules the generated file loads are removed from ``sys.modules``
    afterwards so tests never see each other's handlers.
    """
    before = set(sys.modules)

    def load(path: Path) -> RecordingRouter:
        spec = importlib.util.spec_from_file_location(f"_generated_{id(path)}", path)
        assert spec is not None
        assert spec.loader is not None
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        router = RecordingRouter()
        module.register_routes(router)
        return router

    yield load

    for name in set(sys.modules) - before:
        del sys.modules[name]

"""Project manifest access: ``pyproject.toml`` reading and import-root resolution."""

import re
import tomllib
from pathlib import Path

from twineweb.errors import ModuleResolutionError

MANIFEST = "pyproject.toml"

_NAME_SEPARATORS_RE = re.compile(r"[-_.]+")


def read_manifest(project_root: str | Path) -> dict:
    """Load and parse the project's ``pyproject.toml``.

    Raises:
        ModuleResolutionError: The file is missing, unreadable, or not TOML.
    """
    manifest = Path(project_root) / MANIFEST
    try:
        with manifest.open("rb") as f:
            return tomllib.load(f)
    except OSError as exc:
        msg = f"reading {MANIFEST}: {exc.strerror or exc} ({manifest})"
        raise ModuleResolutionError(msg) from exc
    except tomllib.TOMLDecodeError as exc:
        raise ModuleResolutionError(f"parsing {MANIFEST}: {exc} ({manifest})") from exc


def normalize_module_name(name: str) -> str:
    """Turn a distribution name into an import name (``My-App`` -> ``my_app``)."""
    return _NAME_SEPARATORS_RE.sub("_", name.strip()).lower()


def get_module_path(project_root: str | Path) -> str:
    """Return the import root declared by ``[project].name``.

    Raises:
        ModuleResolutionError: The manifest is missing, unparseable, or
            declares no usable project name.
    """
    data = read_manifest(project_root)
    project = data.get("project")
    name = project.get("name") if isinstance(project, dict) else None
    if not isinstance(name, str) or not name.strip():
        msg = f"no [project] name declared in {Path(project_root) / MANIFEST}"
        raise ModuleResolutionError(msg)

    module_path = normalize_module_name(name)
    if not module_path.isidentifier():
        msg = f"project name {name!r} does not map to a valid import name"
        raise ModuleResolutionError(msg)
    return module_path

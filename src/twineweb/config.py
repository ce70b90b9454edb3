"""Route generation configuration.

RoutesConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups.  Projects may override
defaults in ``pyproject.toml``::

    [tool.twineweb]
    app_dir = "src/myapp/app"
    output_file = "routes_gen.py"
    debounce = 0.3
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from twineweb.errors import ConfigurationError, ModuleResolutionError
from twineweb.manifest import read_manifest


@dataclass(frozen=True, slots=True)
class RoutesConfig:
    """Route generation configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RoutesConfig(app_dir="web", debounce=0.2)
    """

    # Layout
    app_dir: str = "app"  # Relative to the project root
    output_file: str = "routes_gen.py"  # Relative to app_dir

    # Dev watcher
    debounce: float = 0.5  # Seconds of quiet before regenerating
    poll_interval: float = 0.25  # Seconds between filesystem snapshots

    # Logging
    log_level: str = "info"

    def app_path(self, project_root: str | Path) -> Path:
        return Path(project_root) / self.app_dir

    def output_path(self, project_root: str | Path) -> Path:
        return self.app_path(project_root) / self.output_file

    @classmethod
    def from_pyproject(cls, project_root: str | Path) -> RoutesConfig:
        """Build a config from ``[tool.twineweb]`` in ``pyproject.toml``.

        A missing manifest or section yields the defaults; the manifest
        itself is required later, when the module path is resolved.

        Raises:
            ConfigurationError: Unknown keys or values of the wrong type.
        """
        try:
            data = read_manifest(project_root)
        except ModuleResolutionError:
            return cls()

        section = data.get("tool", {}).get("twineweb", {})
        if not isinstance(section, dict):
            raise ConfigurationError("[tool.twineweb] must be a table")
        return cls().with_overrides(**section)

    def with_overrides(self, **overrides: Any) -> RoutesConfig:
        """Return a copy with the given fields replaced, type-checked.

        ``None`` values are ignored so CLI flags can be passed through as-is.
        """
        known = {f.name: f for f in fields(self)}
        changes: dict[str, Any] = {}
        for key, value in overrides.items():
            if value is None:
                continue
            if key not in known:
                msg = f"unknown twineweb setting: {key!r}"
                raise ConfigurationError(msg)
            default = getattr(self, key)
            if isinstance(default, float) and isinstance(value, int) and not isinstance(value, bool):
                value = float(value)
            if not isinstance(value, type(default)):
                msg = (
                    f"twineweb setting {key!r} must be {type(default).__name__}, "
                    f"got {type(value).__name__}"
                )
                raise ConfigurationError(msg)
            changes[key] = value
        return replace(self, **changes)

"""twineweb exception hierarchy.

Shared across the scanner, validator, code generator, and CLI so every
stage of the route pipeline raises and catches the same types.
"""

from pathlib import Path


class TwineError(Exception):
    """Base for all twineweb-specific errors."""


class ConfigurationError(TwineError):
    """Raised when ``[tool.twineweb]`` settings are invalid."""


class ScanError(TwineError):
    """A directory or source file could not be read or parsed.

    Carries the offending filesystem path so the CLI can point at it.
    """

    def __init__(self, path: str | Path, detail: str) -> None:
        self.path = str(path)
        self.detail = detail
        super().__init__(f"{self.path}: {detail}")


class RouteValidationError(TwineError):
    """The route tree breaks a structural rule.

    Attributes:
        path: Directory or file that triggered the rule.
        rule: Short machine-readable rule name (e.g. ``"duplicate-route"``).
    """

    def __init__(self, path: str | Path, rule: str, message: str) -> None:
        self.path = str(path)
        self.rule = rule
        self.message = message
        super().__init__(message)


class ModuleResolutionError(TwineError):
    """The project's ``pyproject.toml`` is missing or has no usable name."""


class GenerationError(TwineError):
    """The registration module could not be rendered or written."""

"""Tests for twineweb.errors — exception hierarchy and error messages."""

from twineweb.errors import (
    ConfigurationError,
    GenerationError,
    ModuleResolutionError,
    RouteValidationError,
    ScanError,
    TwineError,
)


class TestHierarchy:
    def test_all_are_twine_errors(self) -> None:
        for cls in (
            ConfigurationError,
            GenerationError,
            ModuleResolutionError,
            RouteValidationError,
            ScanError,
        ):
            assert issubclass(cls, TwineError)


class TestScanError:
    def test_str_includes_path(self) -> None:
        err = ScanError("app/pages/page.py", "parsing source: invalid syntax (line 1)")
        assert err.path == "app/pages/page.py"
        assert str(err) == "app/pages/page.py: parsing source: invalid syntax (line 1)"


class TestRouteValidationError:
    def test_attributes(self) -> None:
        err = RouteValidationError("app/pages/users", "duplicate-route", "duplicate route: x")
        assert err.path == "app/pages/users"
        assert err.rule == "duplicate-route"
        assert str(err) == "duplicate route: x"

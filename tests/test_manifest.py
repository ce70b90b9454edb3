"""Tests for twineweb.manifest — import-root resolution from pyproject.toml."""

from pathlib import Path

import pytest

from twineweb.errors import ModuleResolutionError
from twineweb.manifest import get_module_path, normalize_module_name


def _write(tmp_path: Path, content: str) -> Path:
    (tmp_path / "pyproject.toml").write_text(content)
    return tmp_path


class TestGetModulePath:
    @pytest.mark.parametrize(
        ("content", "expected"),
        [
            ('[project]\nname = "project"\n', "project"),
            ('# Project manifest\n[project]\nname = "demo-app"\nversion = "1.0"\n', "demo_app"),
            ('[build-system]\nrequires = []\n\n[project]\nname = "My.Site"\n', "my_site"),
            ('[tool.other]\nx = 1\n\n[project]\nname = "  spaced  "\n', "spaced"),
        ],
    )
    def test_reads_project_name(self, tmp_path: Path, content: str, expected: str) -> None:
        assert get_module_path(_write(tmp_path, content)) == expected

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ModuleResolutionError, match="reading pyproject.toml"):
            get_module_path(tmp_path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        with pytest.raises(ModuleResolutionError, match="parsing pyproject.toml"):
            get_module_path(_write(tmp_path, "[project\nname = \n"))

    def test_missing_name(self, tmp_path: Path) -> None:
        with pytest.raises(ModuleResolutionError, match=r"no \[project\] name"):
            get_module_path(_write(tmp_path, '[tool.poetry]\nname = "x"\n'))

    def test_non_identifier_name(self, tmp_path: Path) -> None:
        with pytest.raises(ModuleResolutionError, match="valid import name"):
            get_module_path(_write(tmp_path, '[project]\nname = "2fast"\n'))


class TestNormalizeModuleName:
    def test_separators_collapse(self) -> None:
        assert normalize_module_name("a-b__c..d") == "a_b_c_d"

"""Pytest configuration and shared fixtures."""

import textwrap
from pathlib import Path
from typing import Callable

import pytest

from gensmith.config import Settings
from gensmith.placeholders import MappingTable, build_mapping


@pytest.fixture
def type_table() -> MappingTable:
    """Mapping table for ``type=int``."""
    return build_mapping([("type", "int")])


@pytest.fixture
def map_table() -> MappingTable:
    """Mapping table for ``typeKey=str typeValue=int``."""
    return build_mapping([("typeKey", "str"), ("typeValue", "int")])


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def test_settings(output_dir: Path) -> Settings:
    """Create settings with test values."""
    return Settings(
        output_dir=output_dir,
        case_rule="title",
        test_suffix="_test",
        log_level="DEBUG",
        dry_run=False,
    )


@pytest.fixture
def write_template(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a dedented template into a temporary templates directory."""
    templates = tmp_path / "templates"
    templates.mkdir()

    def _write(name: str, source: str) -> Path:
        path = templates / name
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return _write

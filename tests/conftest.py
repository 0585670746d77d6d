"""Shared fixtures: real route modules written under ``tmp_path``."""

import textwrap
from collections.abc import Callable
from pathlib import Path
from typing import TypeAlias

import pytest

RouteWriter: TypeAlias = Callable[[dict[str, str]], Path]


@pytest.fixture
def write_routes(tmp_path: Path) -> RouteWriter:
    """Write ``{relative path: source}`` under ``tmp_path/routes``; return that dir."""
    root = tmp_path / "routes"
    root.mkdir()

    def write(files: dict[str, str]) -> Path:
        for relative, source in files.items():
            target = root / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(textwrap.dedent(source), encoding="utf-8")
        return root

    return write

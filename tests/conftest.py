"""Shared fixtures: throwaway modules on disk and the bundled examples."""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"


@pytest.fixture
def examples_dir() -> Path:
    return EXAMPLES_DIR


@pytest.fixture
def write_module(tmp_path: Path) -> Callable[..., Path]:
    """Write dedented *source* to ``tmp_path/<name>`` and return the path."""

    def _write(source: str, name: str = "module_under_test.py") -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return _write

"""Module argument resolution shared by the CLI commands."""

from __future__ import annotations

import importlib.util
from pathlib import Path


def resolve_module(module_id: str) -> Path:
    """Turn a CLI module argument into an absolute source path.

    An existing file path wins; otherwise *module_id* is looked up as an
    importable module name.

    Raises:
        FileNotFoundError: If neither lookup yields a ``.py`` file.
    """
    candidate = Path(module_id).expanduser()
    if candidate.is_file():
        return candidate.resolve()

    if not module_id.startswith(".") and not candidate.is_absolute():
        try:
            spec = importlib.util.find_spec(module_id)
        except (ImportError, ValueError):
            spec = None
        if spec is not None and spec.origin and spec.origin.endswith(".py"):
            return Path(spec.origin).resolve()

    msg = f"Module not found: {module_id}"
    raise FileNotFoundError(msg)

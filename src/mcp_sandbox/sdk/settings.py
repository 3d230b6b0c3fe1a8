"""Settings file loading for the sandbox SDK."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from mcp_sandbox.sdk.errors import SettingsError
from mcp_sandbox.sdk.models import SandboxSettings


class SettingsLoader:
    """Load and validate a settings YAML file into :class:`SandboxSettings`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> SandboxSettings:
        """Read YAML, interpolate env vars, and validate.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before YAML parsing.  An empty file
        yields the defaults.

        Raises:
            SettingsError: On read errors, YAML parse errors or schema validation failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SettingsError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise SettingsError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SettingsError("Settings YAML must be a mapping")

        try:
            return SandboxSettings.model_validate(data)
        except ValidationError as exc:
            raise SettingsError(str(exc)) from exc


def load_settings(path: str | Path | None = None, **overrides: Any) -> SandboxSettings:
    """Load settings from *path* (or defaults) and apply non-``None`` *overrides*.

    Raises:
        SettingsError: If the file is invalid or an override fails validation.
    """
    settings = SettingsLoader(Path(path)).load() if path is not None else SandboxSettings()
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return settings
    try:
        return SandboxSettings.model_validate({**settings.model_dump(), **updates})
    except ValidationError as exc:
        raise SettingsError(str(exc)) from exc

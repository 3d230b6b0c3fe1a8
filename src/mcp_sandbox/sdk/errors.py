"""SDK error types."""

from __future__ import annotations


class SessionError(Exception):
    """Raised when a session operation needs a loaded module but has none."""

    def __init__(self, message: str = "No module loaded. Call load_module() first.") -> None:
        super().__init__(message)


class SettingsError(Exception):
    """Raised when a settings YAML fails parsing or validation."""

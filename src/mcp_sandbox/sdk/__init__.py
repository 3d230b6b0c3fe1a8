"""MCP Sandbox SDK — programmatic interface for loading and serving modules."""

from mcp_sandbox.sdk.errors import SessionError, SettingsError
from mcp_sandbox.sdk.models import SandboxSettings, TelemetrySettings
from mcp_sandbox.sdk.session import MCPSandbox
from mcp_sandbox.sdk.settings import SettingsLoader, load_settings

__all__ = [
    "MCPSandbox",
    "SandboxSettings",
    "SessionError",
    "SettingsError",
    "SettingsLoader",
    "TelemetrySettings",
    "load_settings",
]

"""MCP Sandbox — serve any Python module as a sandboxed set of MCP tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "1.0.0"

if TYPE_CHECKING:
    from mcp_sandbox.sdk.session import MCPSandbox as MCPSandbox
    from mcp_sandbox.sdk.models import SandboxSettings as SandboxSettings

_SDK_EXPORTS = {
    "MCPSandbox": "mcp_sandbox.sdk.session",
    "SandboxSettings": "mcp_sandbox.sdk.models",
}


def __getattr__(name: str) -> object:
    module_path = _SDK_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'mcp_sandbox' has no attribute {name!r}")

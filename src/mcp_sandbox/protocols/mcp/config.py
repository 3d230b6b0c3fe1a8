"""Generated configuration document for a sandbox server."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp_sandbox.protocols.mcp.models import ConfigEndpoints, MCPConfig, MCPToolDef

if TYPE_CHECKING:
    from mcp_sandbox.core.reflection.registry import ToolRegistry

TOOLS_PATH = "/mcp/tools"
EXECUTE_PATH = "/mcp/execute"
SSE_PATH = "/sse"
JSONRPC_PATH = "/mcp/jsonrpc"


def endpoints_for(host: str, port: int) -> ConfigEndpoints:
    base = f"http://{host}:{port}"
    return ConfigEndpoints(
        tools=base + TOOLS_PATH,
        execute=base + EXECUTE_PATH,
        sse=base + SSE_PATH,
        jsonrpc=base + JSONRPC_PATH,
    )


def build_mcp_config(registry: ToolRegistry, host: str, port: int) -> MCPConfig:
    """Describe *registry* as served at ``host:port``.

    Derived purely from the registry and the bind address; writing it to
    disk is the caller's concern.
    """
    return MCPConfig(
        tools=[MCPToolDef.model_validate(definition) for definition in registry.definitions()],
        endpoints=endpoints_for(host, port),
    )

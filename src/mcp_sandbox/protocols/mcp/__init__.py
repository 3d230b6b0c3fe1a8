"""MCP protocol — Model Context Protocol server."""

from mcp_sandbox.protocols.mcp.config import build_mcp_config
from mcp_sandbox.protocols.mcp.dispatcher import MCPDispatcher
from mcp_sandbox.protocols.mcp.models import (
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    MCPConfig,
    MCPToolDef,
    PushSettings,
    ServerConfig,
)
from mcp_sandbox.protocols.mcp.push import PushChannel, QueueTransport, SSEClient, SSETransport
from mcp_sandbox.protocols.mcp.server import MCPServer, ServerState

__all__ = [
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPConfig",
    "MCPDispatcher",
    "MCPServer",
    "MCPToolDef",
    "PushChannel",
    "PushSettings",
    "QueueTransport",
    "SSEClient",
    "SSETransport",
    "ServerConfig",
    "ServerState",
    "build_mcp_config",
]

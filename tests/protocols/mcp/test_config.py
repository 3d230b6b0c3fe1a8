"""Tests for generated MCP configuration documents."""

from __future__ import annotations

from mcp_sandbox.core.reflection.models import ToolDescriptor
from mcp_sandbox.core.reflection.registry import ToolRegistry
from mcp_sandbox.protocols.mcp.config import build_mcp_config, endpoints_for


def _registry() -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(ToolDescriptor(name="echo", description="Echo input", handler=lambda text: text))
    registry.seal()
    return registry


class TestBuildMcpConfig:
    def test_document_shape(self) -> None:
        document = build_mcp_config(_registry(), "localhost", 3000).to_document()

        assert document["name"] == "mcp-sandbox"
        assert document["description"] == "Dynamically generated MCP server from Python module"
        assert document["capabilities"] == {"tools": True, "sampling": False, "logging": True}
        assert document["tools"] == [
            {
                "name": "echo",
                "description": "Echo input",
                "inputSchema": {"type": "object", "properties": {}, "required": []},
            }
        ]
        assert document["endpoints"]["tools"] == "http://localhost:3000/mcp/tools"

    def test_endpoints_follow_bind_address(self) -> None:
        endpoints = endpoints_for("0.0.0.0", 8080)

        assert endpoints.execute == "http://0.0.0.0:8080/mcp/execute"
        assert endpoints.sse == "http://0.0.0.0:8080/sse"
        assert endpoints.jsonrpc == "http://0.0.0.0:8080/mcp/jsonrpc"

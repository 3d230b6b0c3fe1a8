"""MCP models — JSON-RPC 2.0 messages and server-side MCP payloads.

Implements the message format used by the Model Context Protocol for the
server half of tool discovery (``tools/list``), execution (``tools/call``)
and push notifications.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from mcp_sandbox import __version__

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "mcp-sandbox"
SERVER_VERSION = __version__

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request (``id`` absent for notifications)."""

    jsonrpc: str = "2.0"
    method: str
    id: int | str | None = None
    params: dict[str, Any] | None = Field(default_factory=dict)


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response: exactly one of ``result`` or ``error``."""

    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @classmethod
    def success(cls, request_id: int | str | None, result: dict[str, Any]) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: int | str | None, code: int, message: str) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message))

    def to_wire(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", exclude={"error"} if self.error is None else {"result"})
        if self.error is not None and self.error.data is None:
            data["error"].pop("data")
        return data


class JsonRpcNotification(BaseModel):
    """A server-to-client notification pushed over the SSE channel."""

    jsonrpc: str = "2.0"
    method: str
    params: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class MCPToolDef(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")


class ToolCallParams(BaseModel):
    """``params`` of a ``tools/call`` request."""

    name: str = Field(..., min_length=1)
    arguments: dict[str, Any] | None = Field(default_factory=dict)


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolCallResult(BaseModel):
    """``result`` of a ``tools/call`` response."""

    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent]
    is_error: bool = Field(default=False, alias="isError")


class ServerInfo(BaseModel):
    name: str = SERVER_NAME
    version: str = SERVER_VERSION


def initialize_result() -> dict[str, Any]:
    """Payload for ``initialize`` and the SSE ``notifications/initialized`` push."""
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {"tools": {}, "logging": {}},
        "serverInfo": ServerInfo().model_dump(),
    }


# ---------------------------------------------------------------------------
# Generated configuration document
# ---------------------------------------------------------------------------


class ConfigCapabilities(BaseModel):
    tools: bool = True
    sampling: bool = False
    logging: bool = True


class ConfigEndpoints(BaseModel):
    tools: str
    execute: str
    sse: str | None = None
    jsonrpc: str | None = None


class MCPConfig(BaseModel):
    """Declarative description of how to reach a running sandbox server.

    Contains tool definitions only; handlers are never serialized.
    """

    name: str = SERVER_NAME
    version: str = SERVER_VERSION
    description: str = "Dynamically generated MCP server from Python module"
    tools: list[MCPToolDef] = Field(default_factory=list)
    capabilities: ConfigCapabilities = Field(default_factory=ConfigCapabilities)
    endpoints: ConfigEndpoints

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Server configuration
# ---------------------------------------------------------------------------


class PushSettings(BaseModel):
    """Timing of the SSE push channel, in seconds."""

    initialized_delay: float = Field(default=0.05, ge=0, description="Delay before the initialized notification.")
    tools_delay: float = Field(default=0.1, ge=0, description="Further delay before tools_changed.")
    heartbeat_interval: float = Field(default=15.0, gt=0, description="Interval between heartbeat lines.")
    sweep_interval: float = Field(default=30.0, gt=0, description="Interval between staleness sweeps.")
    stale_after: float = Field(default=60.0, gt=0, description="Inactivity after which a client is evicted.")
    queue_size: int = Field(default=256, gt=0, description="Undelivered chunks buffered per client.")


class ServerConfig(BaseModel):
    """Bind address and push-channel timing for :class:`MCPServer`."""

    host: str = "localhost"
    port: int = Field(default=3000, ge=0, le=65535)
    push: PushSettings = Field(default_factory=PushSettings)

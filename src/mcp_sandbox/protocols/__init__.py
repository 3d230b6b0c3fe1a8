"""Protocol layer — MCP over JSON-RPC, REST and SSE."""

from mcp_sandbox.protocols.errors import (
    ProtocolError,
    ProtocolFormatError,
    ServerStateError,
    TransportError,
)

__all__ = [
    "ProtocolError",
    "ProtocolFormatError",
    "ServerStateError",
    "TransportError",
]

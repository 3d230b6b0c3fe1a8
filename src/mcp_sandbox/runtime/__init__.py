"""Runtime layer — sandboxed tool execution and its error types."""

from mcp_sandbox.runtime.errors import (
    ExecutionError,
    ExecutionTimeoutError,
    RuntimeSandboxError,
    ToolNotFoundError,
)

__all__ = [
    "ExecutionError",
    "ExecutionTimeoutError",
    "RuntimeSandboxError",
    "ToolNotFoundError",
]

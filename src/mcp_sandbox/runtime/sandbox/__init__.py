"""Sandbox subsystem — deadline-bounded tool execution."""

from mcp_sandbox.runtime.sandbox.executor import ToolExecutor, order_arguments
from mcp_sandbox.runtime.sandbox.models import ExecutionResult, SandboxConfig

__all__ = [
    "ExecutionResult",
    "SandboxConfig",
    "ToolExecutor",
    "order_arguments",
]

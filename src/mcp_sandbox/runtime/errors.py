"""Error types for the tool execution layer.

Only :class:`ToolNotFoundError` ever leaves the executor.  Timeouts and tool
failures are raised internally and folded into an ``ExecutionResult``.
"""

from __future__ import annotations


class RuntimeSandboxError(Exception):
    """Base error for all execution-layer failures."""


class ToolNotFoundError(RuntimeSandboxError):
    """The requested tool is not in the session's registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool '{name}' not found")


class ExecutionError(RuntimeSandboxError):
    """A tool raised, or its awaitable failed."""

    def __init__(self, tool_name: str, detail: str = "") -> None:
        self.tool_name = tool_name
        self.detail = detail
        super().__init__(detail or f"Tool '{tool_name}' execution failed")

    @classmethod
    def from_exception(cls, tool_name: str, exc: BaseException) -> ExecutionError:
        """Wrap *exc*, falling back to its class name when it has no message."""
        return cls(tool_name, str(exc) or type(exc).__name__)


class ExecutionTimeoutError(RuntimeSandboxError):
    """The deadline fired before the tool finished."""

    MESSAGE = "Execution timeout"

    def __init__(self, timeout_ms: float) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(self.MESSAGE)

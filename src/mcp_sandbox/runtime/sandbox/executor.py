"""ToolExecutor — runs reflected tools under a wall-clock deadline.

The deadline bounds how long the caller *waits*, not how long the tool
runs.  When it fires the invocation is abandoned, not killed: a coroutine
keeps running on the loop and a blocking callable keeps its own daemon
thread until it returns on its own, so abandoned calls never delay new
ones.  Abandoned invocations are tracked so they are not garbage-collected
mid-flight, and their late outcome is logged.

All invocations share the session's execution context.  Arguments are
isolated per call; module-level state the tool mutates is not.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import TYPE_CHECKING, Any

from mcp_sandbox.runtime.errors import ExecutionError, ExecutionTimeoutError, ToolNotFoundError
from mcp_sandbox.runtime.sandbox.models import ExecutionResult, SandboxConfig
from mcp_sandbox.utils.telemetry import (
    ATTR_EXECUTION_TIME_MS,
    ATTR_TOOL_NAME,
    ATTR_TOOL_SUCCESS,
    ATTR_TOOL_TIMED_OUT,
    get_tracer,
)
from mcp_sandbox.utils.threads import run_in_daemon_thread

if TYPE_CHECKING:
    from mcp_sandbox.core.reflection.context import ExecutionContext
    from mcp_sandbox.core.reflection.models import ToolDescriptor
    from mcp_sandbox.core.reflection.registry import ToolRegistry

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class ToolExecutor:
    """Executes tools from one registry against their execution context.

    Usage::

        executor = ToolExecutor(result.registry, result.context, SandboxConfig(timeout_ms=2000))
        outcome = await executor.execute("circle_area", {"radius": 5})
        outcome.success, outcome.result   # (True, 78.539...)
    """

    def __init__(
        self,
        registry: ToolRegistry,
        context: ExecutionContext,
        config: SandboxConfig | None = None,
    ) -> None:
        self._registry = registry
        self._context = context
        self._config = config or SandboxConfig()
        self._abandoned: set[asyncio.Task[Any]] = set()

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def context(self) -> ExecutionContext:
        return self._context

    @property
    def config(self) -> SandboxConfig:
        return self._config

    @property
    def abandoned_count(self) -> int:
        """Timed-out invocations that are still running."""
        return len(self._abandoned)

    def get_tools(self) -> list[ToolDescriptor]:
        return self._registry.tools()

    def get_tool(self, name: str) -> ToolDescriptor | None:
        return self._registry.get(name)

    async def execute(self, tool_name: str, arguments: dict[str, Any] | None = None) -> ExecutionResult:
        """Run *tool_name* with *arguments* and return a normalized result.

        Raises:
            ToolNotFoundError: Before any timing starts, if the tool is unknown.
        """
        tool = self._registry.get(tool_name)
        if tool is None:
            raise ToolNotFoundError(tool_name)

        positional = order_arguments(tool, arguments or {})
        start = time.perf_counter()

        with _tracer.start_as_current_span("mcp_sandbox.tool.execute") as span:
            span.set_attribute(ATTR_TOOL_NAME, tool_name)
            try:
                value = await self._run_with_deadline(tool, positional)
            except ExecutionTimeoutError as exc:
                logger.warning("Tool %s timed out after %sms", tool_name, exc.timeout_ms)
                outcome = self._result(tool_name, start, error=str(exc))
                span.set_attribute(ATTR_TOOL_TIMED_OUT, True)
            except ExecutionError as exc:
                logger.info("Tool %s failed: %s", tool_name, exc.detail)
                outcome = self._result(tool_name, start, error=exc.detail)
            else:
                outcome = self._result(tool_name, start, value=value)

            span.set_attribute(ATTR_TOOL_SUCCESS, outcome.success)
            span.set_attribute(ATTR_EXECUTION_TIME_MS, outcome.execution_time_ms)
        return outcome

    async def _run_with_deadline(self, tool: ToolDescriptor, positional: list[Any]) -> Any:
        if self._context.closed:
            raise ExecutionError(tool.name, "Execution context is closed")

        task = asyncio.ensure_future(_invoke(tool.handler, positional))
        done, _ = await asyncio.wait({task}, timeout=self._config.timeout_seconds)
        if not done:
            self._abandon(tool.name, task)
            raise ExecutionTimeoutError(self._config.timeout_ms)

        exc = task.exception()
        if exc is not None:
            raise ExecutionError.from_exception(tool.name, exc) from exc
        return task.result()

    def _abandon(self, tool_name: str, task: asyncio.Task[Any]) -> None:
        self._abandoned.add(task)

        def _finished(t: asyncio.Task[Any]) -> None:
            self._abandoned.discard(t)
            if t.cancelled():
                return
            late = t.exception()
            if late is not None:
                logger.debug("Abandoned call to %s later failed: %s", tool_name, late)
            else:
                logger.debug("Abandoned call to %s finished after its deadline", tool_name)

        task.add_done_callback(_finished)

    @staticmethod
    def _result(tool_name: str, start: float, *, value: Any = None, error: str | None = None) -> ExecutionResult:
        return ExecutionResult(
            success=error is None,
            result=value,
            error=error,
            tool_name=tool_name,
            execution_time_ms=(time.perf_counter() - start) * 1000,
        )


def order_arguments(tool: ToolDescriptor, arguments: dict[str, Any]) -> list[Any]:
    """Flatten an argument bag into positional values.

    Known parameters come first, in declaration order; keys the schema does
    not know follow in bag order.  Values are bound by position, so a
    missing earlier parameter shifts later values left.
    """
    declared = tool.parameter_names
    values = [arguments[name] for name in declared if name in arguments]
    values.extend(value for key, value in arguments.items() if key not in declared)
    return values


async def _invoke(handler: Any, positional: list[Any]) -> Any:
    """Call *handler*, off the loop unless it is a coroutine function."""
    if inspect.iscoroutinefunction(handler):
        return await handler(*positional)
    outcome = await run_in_daemon_thread(handler, *positional)
    if inspect.isawaitable(outcome):
        outcome = await outcome
    return outcome

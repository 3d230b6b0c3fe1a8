"""ModuleReflector — load a module in isolation and expose its callables as tools.

Reflection is all-or-nothing for the load step: a module that cannot be
found, fails to compile, raises, or overruns the deadline produces a
:class:`ReflectionError` and no registry.  Per-callable analysis is
forgiving: a callable whose source cannot be read or parsed becomes a
zero-parameter tool.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import types
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mcp_sandbox.core.reflection.context import ExecutionContext
from mcp_sandbox.core.reflection.errors import ReflectionError
from mcp_sandbox.core.reflection.models import ToolDescriptor, ToolInputSchema
from mcp_sandbox.core.reflection.registry import ToolRegistry
from mcp_sandbox.core.reflection.signature import extract_description, infer_parameters
from mcp_sandbox.utils.telemetry import ATTR_MODULE_PATH, ATTR_TOOL_COUNT, get_tracer
from mcp_sandbox.utils.threads import run_in_daemon_thread

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_TOOL_NAME = "default"


@dataclass(frozen=True)
class ReflectionResult:
    """A registry together with the context its handlers belong to."""

    registry: ToolRegistry
    context: ExecutionContext


class ModuleReflector:
    """Discovers tools in a Python module.

    Usage::

        reflector = ModuleReflector(timeout_ms=5000)
        result = await reflector.reflect("examples/math_utils.py")
        result.registry.names()   # ["circle_area", "fibonacci", ...]
    """

    def __init__(self, timeout_ms: int = 5000) -> None:
        self._timeout_ms = timeout_ms

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    async def reflect(self, module_path: Path | str) -> ReflectionResult:
        """Load *module_path* into a fresh context and build its tool registry."""
        path = Path(module_path)
        with _tracer.start_as_current_span("mcp_sandbox.reflect") as span:
            span.set_attribute(ATTR_MODULE_PATH, str(path))

            if not path.is_file():
                raise ReflectionError(f"Module not found: {path}")

            context = ExecutionContext(path)
            try:
                await asyncio.wait_for(
                    run_in_daemon_thread(context.load, name=f"mcp-sandbox-load-{path.stem}"),
                    timeout=self._timeout_ms / 1000,
                )
            except TimeoutError as exc:
                context.close()
                raise ReflectionError(
                    f"Module load timed out after {self._timeout_ms}ms"
                ) from exc
            except Exception as exc:  # any failure inside user code aborts the session
                context.close()
                raise ReflectionError(str(exc) or type(exc).__name__) from exc

            registry = self.analyze_exports(context.exports())
            span.set_attribute(ATTR_TOOL_COUNT, len(registry))

        logger.info("Reflected %d tool(s) from %s", len(registry), path)
        return ReflectionResult(registry=registry, context=context)

    def analyze_exports(self, exports: Any) -> ToolRegistry:
        """Walk an exported value and register every callable found in it."""
        registry = ToolRegistry()

        if _is_tool_callable(exports):
            registry.register(describe_callable(DEFAULT_TOOL_NAME, exports))
        elif _is_aggregate(exports):
            self._traverse(_members(exports), "", registry)

        registry.seal()
        return registry

    def _traverse(self, members: dict[str, Any], prefix: str, registry: ToolRegistry) -> None:
        for key, value in members.items():
            tool_name = f"{prefix}_{key}" if prefix else str(key)
            if _is_tool_callable(value):
                registry.register(describe_callable(tool_name, value))
            elif _is_aggregate(value):
                self._traverse(_members(value), tool_name, registry)


def describe_callable(name: str, func: Any) -> ToolDescriptor:
    """Build a :class:`ToolDescriptor` for *func* from its source text."""
    target = _source_target(func)
    source = callable_source(target)
    params = infer_parameters(source)
    if inspect.ismethod(target) and params and params[0].name in ("self", "cls"):
        params = params[1:]

    description = extract_description(source) or f"Execute {name} function"
    return ToolDescriptor(
        name=name,
        description=description,
        input_schema=ToolInputSchema.from_parameters(params),
        handler=func,
    )


def callable_source(func: Any) -> str:
    """Preceding comment block plus source of *func*; empty when unavailable."""
    try:
        comments = inspect.getcomments(func) or ""
        return comments + inspect.getsource(func)
    except (OSError, TypeError):
        return ""


def _source_target(func: Any) -> Any:
    if isinstance(func, (types.FunctionType, types.MethodType, types.BuiltinFunctionType)):
        return func
    # callable instances are described by their __call__
    return getattr(func, "__call__", func)


def _is_tool_callable(value: Any) -> bool:
    return callable(value) and not isinstance(value, type)


def _is_aggregate(value: Any) -> bool:
    return isinstance(value, (dict, types.SimpleNamespace))


def _members(value: Any) -> dict[str, Any]:
    if isinstance(value, types.SimpleNamespace):
        return dict(vars(value))
    return dict(value)

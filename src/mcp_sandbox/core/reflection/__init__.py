"""Reflection — discover callables in a module and infer their schemas."""

from mcp_sandbox.core.reflection.context import ExecutionContext
from mcp_sandbox.core.reflection.errors import ReflectionError
from mcp_sandbox.core.reflection.models import ParameterDescriptor, ToolDescriptor, ToolInputSchema
from mcp_sandbox.core.reflection.reflector import ModuleReflector, ReflectionResult
from mcp_sandbox.core.reflection.registry import ToolRegistry
from mcp_sandbox.core.reflection.signature import extract_description, infer_parameters

__all__ = [
    "ExecutionContext",
    "ModuleReflector",
    "ParameterDescriptor",
    "ReflectionError",
    "ReflectionResult",
    "ToolDescriptor",
    "ToolInputSchema",
    "ToolRegistry",
    "extract_description",
    "infer_parameters",
]

"""Data models for reflected tools.

A :class:`ToolDescriptor` is what the rest of the system sees of a reflected
callable: a name, a description, a JSON Schema for its inputs, and an opaque
``handler`` that only stays valid while its execution context is open.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

ParameterType = Literal["string", "number", "boolean", "array", "object"]


class ParameterDescriptor(BaseModel):
    """A single inferred parameter (transient, folded into the schema)."""

    name: str
    has_default: bool = False
    type: ParameterType = "string"


class ToolInputSchema(BaseModel):
    """JSON Schema for a tool's arguments."""

    type: Literal["object"] = "object"
    properties: dict[str, dict[str, Any]] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _required_are_properties(self) -> ToolInputSchema:
        unknown = [name for name in self.required if name not in self.properties]
        if unknown:
            msg = f"required parameters missing from properties: {', '.join(unknown)}"
            raise ValueError(msg)
        return self

    @classmethod
    def from_parameters(cls, params: list[ParameterDescriptor]) -> ToolInputSchema:
        """Fold inferred parameters into a schema."""
        properties: dict[str, dict[str, Any]] = {}
        for param in params:
            prop: dict[str, Any] = {
                "type": param.type,
                "description": f"Parameter: {param.name}",
            }
            if param.type == "array":
                prop["items"] = {"type": "string"}
            properties[param.name] = prop

        required: list[str] = []
        for param in params:
            if not param.has_default and param.name not in required:
                required.append(param.name)
        return cls(properties=properties, required=required)


class ToolDescriptor(BaseModel):
    """A callable exposed as a tool.

    ``handler`` is excluded from every dump: handlers never leave the
    execution context they were reflected from.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    name: str
    description: str
    input_schema: ToolInputSchema = Field(default_factory=ToolInputSchema, alias="inputSchema")
    handler: Callable[..., Any] = Field(exclude=True, repr=False)

    @property
    def parameter_names(self) -> list[str]:
        """Parameter names in declaration order."""
        return list(self.input_schema.properties)

    def to_definition(self) -> dict[str, Any]:
        """Return the ``{name, description, inputSchema}`` shape used on the wire."""
        return self.model_dump(by_alias=True)

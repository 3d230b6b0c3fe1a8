"""Tests for reflection data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from mcp_sandbox.core.reflection.models import ParameterDescriptor, ToolDescriptor, ToolInputSchema


class TestToolInputSchema:
    def test_from_parameters(self) -> None:
        schema = ToolInputSchema.from_parameters(
            [
                ParameterDescriptor(name="values", type="array"),
                ParameterDescriptor(name="limit", has_default=True, type="number"),
            ]
        )

        assert schema.required == ["values"]
        assert schema.properties["values"] == {
            "type": "array",
            "description": "Parameter: values",
            "items": {"type": "string"},
        }
        assert schema.properties["limit"] == {"type": "number", "description": "Parameter: limit"}

    def test_required_must_be_properties(self) -> None:
        with pytest.raises(ValidationError, match="missing from properties"):
            ToolInputSchema(properties={}, required=["ghost"])

    def test_repeated_parameter_is_required_once(self) -> None:
        schema = ToolInputSchema.from_parameters(
            [ParameterDescriptor(name="x"), ParameterDescriptor(name="x")]
        )

        assert schema.required == ["x"]


class TestToolDescriptor:
    def test_definition_uses_wire_names(self) -> None:
        tool = ToolDescriptor(name="t", description="d", handler=print)

        definition = tool.to_definition()

        assert set(definition) == {"name", "description", "inputSchema"}

    def test_parameter_names_follow_declaration_order(self) -> None:
        schema = ToolInputSchema.from_parameters(
            [ParameterDescriptor(name="b"), ParameterDescriptor(name="a")]
        )
        tool = ToolDescriptor(name="t", description="d", input_schema=schema, handler=print)

        assert tool.parameter_names == ["b", "a"]

"""Tests for runtime error hierarchy."""

import pytest

from mcp_sandbox.runtime.errors import (
    ExecutionError,
    ExecutionTimeoutError,
    RuntimeSandboxError,
    ToolNotFoundError,
)


class TestErrorHierarchy:
    @pytest.mark.parametrize("error_cls", [ToolNotFoundError, ExecutionError, ExecutionTimeoutError])
    def test_subclasses_runtime_sandbox_error(self, error_cls: type[Exception]) -> None:
        assert issubclass(error_cls, RuntimeSandboxError)


class TestToolNotFoundError:
    def test_message(self) -> None:
        err = ToolNotFoundError("nonexistent")
        assert str(err) == "Tool 'nonexistent' not found"
        assert err.name == "nonexistent"


class TestExecutionError:
    def test_message_with_detail(self) -> None:
        err = ExecutionError("divide", "division by zero")
        assert str(err) == "division by zero"
        assert err.tool_name == "divide"

    def test_message_without_detail(self) -> None:
        assert "Tool 'divide' execution failed" in str(ExecutionError("divide"))

    def test_from_exception_uses_class_name_when_message_empty(self) -> None:
        err = ExecutionError.from_exception("t", KeyError())
        assert err.detail == "KeyError"


class TestExecutionTimeoutError:
    def test_attributes(self) -> None:
        err = ExecutionTimeoutError(250)
        assert err.timeout_ms == 250
        assert str(err) == "Execution timeout"

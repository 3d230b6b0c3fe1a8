"""Tests for sandbox data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from mcp_sandbox.runtime.sandbox.models import ExecutionResult, SandboxConfig


class TestSandboxConfig:
    def test_defaults(self) -> None:
        config = SandboxConfig()
        assert config.timeout_ms == 5000
        assert config.timeout_seconds == 5.0

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            SandboxConfig(timeout_ms=0)


class TestExecutionResult:
    def test_success_payload_omits_error(self) -> None:
        result = ExecutionResult(success=True, result=[1, 2], tool_name="t", execution_time_ms=1.5)

        assert result.to_payload() == {
            "success": True,
            "result": [1, 2],
            "toolName": "t",
            "executionTimeMs": 1.5,
        }

    def test_failure_payload_omits_result(self) -> None:
        result = ExecutionResult(success=False, error="boom", tool_name="t", execution_time_ms=0)

        payload = result.to_payload()

        assert payload["error"] == "boom"
        assert "result" not in payload
        assert not result.timed_out

    def test_timed_out(self) -> None:
        result = ExecutionResult(success=False, error="Execution timeout", tool_name="t", execution_time_ms=100)
        assert result.timed_out

    def test_unserializable_result_falls_back_to_str(self) -> None:
        class Opaque:
            def __str__(self) -> str:
                return "opaque"

        result = ExecutionResult(success=True, result=Opaque(), tool_name="t", execution_time_ms=0)

        assert result.to_payload()["result"] == "opaque"

    def test_frozen(self) -> None:
        result = ExecutionResult(success=True, tool_name="t", execution_time_ms=0)
        with pytest.raises(ValidationError):
            result.success = False

    def test_negative_time_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ExecutionResult(success=True, tool_name="t", execution_time_ms=-1)

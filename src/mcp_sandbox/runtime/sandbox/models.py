"""Data models for the sandboxed executor."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic_core import to_jsonable_python


class SandboxConfig(BaseModel):
    """Configuration for a :class:`ToolExecutor`."""

    timeout_ms: int = Field(default=5000, gt=0, description="Max time to wait for a tool, in milliseconds.")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


class ExecutionResult(BaseModel):
    """Outcome of one tool invocation. Never shared between invocations."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    success: bool
    result: Any = None
    error: str | None = None
    tool_name: str = Field(..., alias="toolName")
    execution_time_ms: float = Field(..., ge=0, alias="executionTimeMs")

    @property
    def timed_out(self) -> bool:
        return not self.success and self.error == "Execution timeout"

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready ``{success, result|error, toolName, executionTimeMs}``."""
        data = to_jsonable_python(self.model_dump(by_alias=True), fallback=str)
        data.pop("error" if self.success else "result")
        return data

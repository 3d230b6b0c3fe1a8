"""Pydantic models for the sandbox settings YAML consumed by ``mcp-sandbox start``."""

from __future__ import annotations

from pydantic import BaseModel, Field

from mcp_sandbox.protocols.mcp.models import PushSettings, ServerConfig
from mcp_sandbox.runtime.sandbox.models import SandboxConfig


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class SandboxSettings(BaseModel):
    """Top-level settings for one sandbox session.

    Example YAML::

        host: 0.0.0.0
        port: 3000
        timeout_ms: 2000
        push:
          heartbeat_interval: 10
        telemetry:
          enabled: true
          otlp_endpoint: ${OTLP_ENDPOINT}
    """

    host: str = "localhost"
    port: int = Field(default=3000, ge=0, le=65535)
    timeout_ms: int = Field(default=5000, gt=0)
    push: PushSettings = Field(default_factory=PushSettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)

    def server_config(self) -> ServerConfig:
        return ServerConfig(host=self.host, port=self.port, push=self.push)

    def sandbox_config(self) -> SandboxConfig:
        return SandboxConfig(timeout_ms=self.timeout_ms)

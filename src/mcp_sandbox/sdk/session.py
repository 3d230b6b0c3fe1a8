"""MCPSandbox — one-object facade over reflection, execution and serving."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

from mcp_sandbox.core.reflection.reflector import ModuleReflector
from mcp_sandbox.protocols.mcp.server import MCPServer
from mcp_sandbox.runtime.sandbox.executor import ToolExecutor
from mcp_sandbox.sdk.errors import SessionError
from mcp_sandbox.sdk.models import SandboxSettings
from mcp_sandbox.utils.telemetry import configure_telemetry

if TYPE_CHECKING:
    from mcp_sandbox.core.reflection.models import ToolDescriptor
    from mcp_sandbox.core.reflection.reflector import ReflectionResult
    from mcp_sandbox.protocols.mcp.models import MCPConfig
    from mcp_sandbox.runtime.sandbox.models import ExecutionResult

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "mcp-config.json"


class MCPSandbox:
    """Load a module, then execute or serve its tools.

    Usage::

        sandbox = MCPSandbox(SandboxSettings(port=3000, timeout_ms=2000))
        config = await sandbox.load_module("examples/math_utils.py")
        await sandbox.execute_tool("circle_area", {"radius": 5})
        await sandbox.start()   # serves until stop()
        await sandbox.close()
    """

    def __init__(self, settings: SandboxSettings | None = None) -> None:
        self._settings = settings or SandboxSettings()
        self._reflector = ModuleReflector(timeout_ms=self._settings.timeout_ms)
        self._reflection: ReflectionResult | None = None
        self._executor: ToolExecutor | None = None
        self._server: MCPServer | None = None
        self._module_path: Path | None = None

    @property
    def settings(self) -> SandboxSettings:
        return self._settings

    @property
    def loaded(self) -> bool:
        return self._executor is not None

    @property
    def module_path(self) -> Path | None:
        return self._module_path

    @property
    def server(self) -> MCPServer:
        if self._server is None:
            raise SessionError
        return self._server

    async def load_module(self, module_path: str | Path) -> MCPConfig:
        """Reflect *module_path* and bind a server to its tools.

        A previously loaded module is released first.

        Raises:
            ReflectionError: If the module cannot be found, loaded or analyzed.
        """
        if self._reflection is not None:
            await self.close()

        path = Path(module_path).resolve()
        logger.info("Loading module: %s", path)
        result = await self._reflector.reflect(path)

        executor = ToolExecutor(result.registry, result.context, self._settings.sandbox_config())
        server = MCPServer(self._settings.server_config())
        server.bind(executor)

        self._reflection = result
        self._executor = executor
        self._server = server
        self._module_path = path

        for tool in result.registry:
            logger.info("Discovered tool: %s - %s", tool.name, tool.description)
        return server.generate_config()

    def generate_config(self) -> MCPConfig:
        return self.server.generate_config()

    def save_config(self, output_path: str | Path | None = None) -> Path:
        """Write the generated configuration as JSON and return its path."""
        path = Path(output_path) if output_path is not None else Path.cwd() / DEFAULT_CONFIG_FILE
        document = self.generate_config().to_document()
        path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
        logger.info("MCP configuration saved to: %s", path)
        return path

    async def start(self) -> None:
        """Serve the loaded tools until :meth:`stop` is called."""
        server = self.server
        telemetry = self._settings.telemetry
        if telemetry.enabled:
            configure_telemetry(otlp_endpoint=telemetry.otlp_endpoint)
        await server.serve()

    async def stop(self) -> None:
        if self._server is not None:
            await self._server.stop()

    async def execute_tool(self, tool_name: str, arguments: dict[str, Any] | None = None) -> ExecutionResult:
        """Run one tool directly, without HTTP.

        Raises:
            SessionError: If no module is loaded.
            ToolNotFoundError: If *tool_name* is not registered.
        """
        if self._executor is None:
            raise SessionError
        return await self._executor.execute(tool_name, arguments or {})

    def get_tools(self) -> list[ToolDescriptor]:
        if self._executor is None:
            return []
        return self._executor.get_tools()

    def inspect_report(self) -> dict[str, Any]:
        """Summarize the loaded tools for ``mcp-sandbox inspect --output``."""
        if self._module_path is None:
            raise SessionError
        tools = self.get_tools()
        return {
            "module": str(self._module_path),
            "analyzedAt": datetime.now(timezone.utc).isoformat(),
            "toolCount": len(tools),
            "tools": [
                {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.parameter_names,
                    "requiredParameters": list(tool.input_schema.required),
                }
                for tool in tools
            ],
        }

    async def close(self) -> None:
        """Stop serving and release the execution context. Safe to call twice."""
        await self.stop()
        if self._reflection is not None:
            self._reflection.context.close()
        self._reflection = None
        self._executor = None
        self._server = None
        self._module_path = None

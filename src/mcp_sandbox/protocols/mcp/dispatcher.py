"""MCPDispatcher — maps JSON-RPC methods onto the tool executor.

Stateless: each message is validated, routed through a fixed method table,
and answered with exactly one :class:`JsonRpcResponse` carrying its ``id``.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from mcp_sandbox.protocols.errors import ProtocolFormatError
from mcp_sandbox.protocols.mcp.models import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    JsonRpcRequest,
    JsonRpcResponse,
    TextContent,
    ToolCallParams,
    ToolCallResult,
    initialize_result,
)
from mcp_sandbox.runtime.errors import ExecutionError, ToolNotFoundError
from mcp_sandbox.utils.telemetry import ATTR_RPC_METHOD, get_tracer

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from mcp_sandbox.runtime.sandbox.executor import ToolExecutor

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class MCPDispatcher:
    """Routes ``initialize``, ``notifications/initialized``, ``tools/list``,
    ``tools/call`` and ``ping`` to their handlers.

    A failed tool surfaces as a JSON-RPC error (code ``-32603``) rather than
    a successful-looking result; a malformed ``tools/call`` is an
    invalid-params error (``-32602``).
    """

    def __init__(self, executor: ToolExecutor) -> None:
        self._executor = executor
        self._handlers: dict[str, Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]] = {
            "initialize": self._initialize,
            "notifications/initialized": self._initialized,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "ping": self._ping,
        }

    @property
    def methods(self) -> list[str]:
        return list(self._handlers)

    async def handle(self, message: Any) -> JsonRpcResponse:
        """Answer one decoded JSON-RPC message."""
        request_id = message.get("id") if isinstance(message, dict) else None
        try:
            request = JsonRpcRequest.model_validate(message)
        except ValidationError:
            return JsonRpcResponse.failure(_safe_id(request_id), INVALID_REQUEST, "Invalid Request")

        handler = self._handlers.get(request.method)
        if handler is None:
            logger.info("Unknown method: %s", request.method)
            return JsonRpcResponse.failure(request.id, INTERNAL_ERROR, f"Unknown method: {request.method}")

        logger.debug("Handling MCP request: %s", request.method)
        with _tracer.start_as_current_span("mcp_sandbox.rpc") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)
            try:
                result = await handler(request.params or {})
            except ProtocolFormatError as exc:
                return JsonRpcResponse.failure(request.id, INVALID_PARAMS, exc.detail)
            except ToolNotFoundError as exc:
                return JsonRpcResponse.failure(request.id, INTERNAL_ERROR, str(exc))
            except ExecutionError as exc:
                logger.info("tools/call failed: %s", exc.detail)
                return JsonRpcResponse.failure(request.id, INTERNAL_ERROR, exc.detail)
        return JsonRpcResponse.success(request.id, result)

    # ------------------------------------------------------------------
    # Method handlers
    # ------------------------------------------------------------------

    async def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        return initialize_result()

    async def _initialized(self, params: dict[str, Any]) -> dict[str, Any]:
        logger.info("Client initialized")
        return {}

    async def _tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        tools = self._executor.registry.definitions()
        logger.debug("Returning %d tools", len(tools))
        return {"tools": tools}

    async def _tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        call = parse_tool_call(params)
        logger.info("Executing tool: %s", call.name)
        outcome = await self._executor.execute(call.name, call.arguments or {})
        if not outcome.success:
            raise ExecutionError(call.name, outcome.error or "Tool execution failed")
        return tool_call_result(outcome.result).model_dump(by_alias=True)

    async def _ping(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"pong": True}


def parse_tool_call(params: dict[str, Any]) -> ToolCallParams:
    """Validate ``tools/call`` params.

    Raises:
        ProtocolFormatError: If ``name`` is missing or ``arguments`` is not an object.
    """
    if not params.get("name"):
        raise ProtocolFormatError("Tool name is required")
    try:
        return ToolCallParams.model_validate(params)
    except ValidationError as exc:
        raise ProtocolFormatError(f"Invalid tools/call params: {exc.errors()[0]['msg']}") from exc


def tool_call_result(value: Any, *, is_error: bool = False) -> ToolCallResult:
    """Wrap a tool's return value as MCP text content."""
    return ToolCallResult(
        content=[TextContent(text=json.dumps(value, indent=2, default=str))],
        is_error=is_error,
    )


def _safe_id(value: Any) -> int | str | None:
    return value if isinstance(value, (int, str)) and not isinstance(value, bool) else None

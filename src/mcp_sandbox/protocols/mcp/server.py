"""MCPServer — HTTP front end for one executor: JSON-RPC, REST and SSE.

Lifecycle::

    server = MCPServer(ServerConfig(port=3000))   # UNINITIALIZED
    server.bind(executor)                         # READY: routes installed
    await server.serve()                          # RUNNING until stop()
    await server.stop()                           # STOPPED

Serving, ``app`` and ``generate_config`` all need a bound executor.
"""

from __future__ import annotations

import contextlib
import logging
import time
from enum import Enum
from typing import TYPE_CHECKING, Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, StreamingResponse
from starlette.routing import Route

from mcp_sandbox import __version__
from mcp_sandbox.protocols.errors import ServerStateError
from mcp_sandbox.protocols.mcp.config import EXECUTE_PATH, JSONRPC_PATH, SSE_PATH, TOOLS_PATH, build_mcp_config
from mcp_sandbox.protocols.mcp.dispatcher import MCPDispatcher, tool_call_result
from mcp_sandbox.protocols.mcp.models import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    PARSE_ERROR,
    SERVER_NAME,
    JsonRpcResponse,
    ServerConfig,
)
from mcp_sandbox.protocols.mcp.push import TOOL_RESULT, PushChannel, QueueTransport
from mcp_sandbox.runtime.errors import ToolNotFoundError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from starlette.requests import Request
    from starlette.types import ASGIApp, Receive, Scope, Send

    from mcp_sandbox.protocols.mcp.models import MCPConfig
    from mcp_sandbox.runtime.sandbox.executor import ToolExecutor

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


class ServerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    RUNNING = "running"
    STOPPED = "stopped"


class RequestLogMiddleware:
    """Log every HTTP request at DEBUG before routing it."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            agent = dict(scope.get("headers") or []).get(b"user-agent", b"").decode("latin-1")
            logger.debug("%s %s - %s", scope["method"], scope["path"], agent[:50])
        await self.app(scope, receive, send)


class MCPServer:
    """Serves one bound :class:`ToolExecutor` over HTTP."""

    def __init__(self, config: ServerConfig | None = None) -> None:
        self._config = config or ServerConfig()
        self._state = ServerState.UNINITIALIZED
        self._executor: ToolExecutor | None = None
        self._dispatcher: MCPDispatcher | None = None
        self._app: Starlette | None = None
        self._uvicorn: Any = None
        self._push = PushChannel(self._config.push, tools=self._tool_definitions)

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def push(self) -> PushChannel:
        return self._push

    @property
    def app(self) -> Starlette:
        if self._app is None:
            raise ServerStateError("build the app", self._state.value)
        return self._app

    def bind(self, executor: ToolExecutor) -> None:
        """Attach *executor* and install the routes."""
        self._executor = executor
        self._dispatcher = MCPDispatcher(executor)
        self._app = self._build_app()
        if self._state is ServerState.UNINITIALIZED:
            self._state = ServerState.READY

    def generate_config(self) -> MCPConfig:
        registry = self._require_executor("generate a config").registry
        return build_mcp_config(registry, self._config.host, self._config.port)

    async def serve(self) -> None:
        """Run uvicorn until :meth:`stop` is called."""
        import uvicorn

        app = self.app
        config = uvicorn.Config(app, host=self._config.host, port=self._config.port, log_level="warning")
        self._uvicorn = uvicorn.Server(config)
        self._state = ServerState.RUNNING
        base = f"http://{self._config.host}:{self._config.port}"
        logger.info("MCP sandbox server running at %s", base)
        logger.info("MCP JSON-RPC: %s%s  SSE: %s%s", base, JSONRPC_PATH, base, SSE_PATH)
        try:
            await self._uvicorn.serve()
        finally:
            self._state = ServerState.STOPPED

    async def stop(self) -> None:
        """Ask uvicorn to exit, stop the timers and close every push client."""
        if self._uvicorn is not None:
            self._uvicorn.should_exit = True
        await self._push.stop_maintenance()
        self._push.close_all()
        if self._state is not ServerState.UNINITIALIZED:
            self._state = ServerState.STOPPED

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------

    def _build_app(self) -> Starlette:
        routes = [
            Route("/health", self._health, methods=["GET"]),
            Route(SSE_PATH, self._sse, methods=["GET"]),
            Route("/mcp/sse", self._sse, methods=["GET"]),
            Route(JSONRPC_PATH, self._jsonrpc, methods=["POST"]),
            Route("/tools", self._rest_tools, methods=["GET"]),
            Route("/execute/{tool_name}", self._rest_execute, methods=["POST"]),
            Route(TOOLS_PATH, self._mcp_tools, methods=["GET"]),
            Route(EXECUTE_PATH, self._mcp_execute, methods=["POST"]),
            Route("/mcp-config", self._mcp_config, methods=["GET"]),
            Route("/", self._root, methods=["GET"]),
        ]
        middleware = [
            Middleware(
                CORSMiddleware,
                allow_origins=["*"],
                allow_methods=["GET", "POST", "OPTIONS"],
                allow_headers=["Content-Type", "Cache-Control", "Accept", "Authorization"],
            ),
            Middleware(RequestLogMiddleware),
        ]
        return Starlette(routes=routes, middleware=middleware, lifespan=self._lifespan)

    @contextlib.asynccontextmanager
    async def _lifespan(self, app: Starlette) -> AsyncIterator[None]:
        self._push.start_maintenance()
        try:
            yield
        finally:
            await self._push.stop_maintenance()
            self._push.close_all()

    def _require_executor(self, operation: str) -> ToolExecutor:
        if self._executor is None:
            raise ServerStateError(operation, self._state.value)
        return self._executor

    def _tool_definitions(self) -> list[dict[str, Any]]:
        if self._executor is None:
            return []
        return self._executor.registry.definitions()

    def _broadcast_result(self, tool_name: Any, arguments: Any, result: Any) -> None:
        self._push.broadcast(
            TOOL_RESULT,
            {
                "toolName": tool_name,
                "arguments": arguments,
                "result": result,
                "timestamp": int(time.time() * 1000),
            },
        )

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    async def _health(self, request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "healthy",
                "tools": self._require_executor("report health").registry.names(),
                "clients": self._push.client_count,
            }
        )

    async def _sse(self, request: Request) -> StreamingResponse:
        transport = QueueTransport(self._config.push.queue_size)
        client = self._push.connect(transport)
        return StreamingResponse(
            self._stream(client.id, transport),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    async def _stream(self, client_id: str, transport: QueueTransport) -> AsyncIterator[str]:
        try:
            async for chunk in transport:
                self._push.touch(client_id)
                yield chunk
        finally:
            self._push.disconnect(client_id)

    async def _jsonrpc(self, request: Request) -> JSONResponse:
        try:
            body = await request.json()
        except ValueError:
            return JSONResponse(JsonRpcResponse.failure(None, PARSE_ERROR, "Parse error").to_wire(), status_code=400)

        if isinstance(body, list):
            if not body:
                failure = JsonRpcResponse.failure(None, INVALID_REQUEST, "Invalid Request")
                return JSONResponse(failure.to_wire(), status_code=400)
            return JSONResponse([(await self._answer(message)).to_wire() for message in body])
        return JSONResponse((await self._answer(body)).to_wire())

    async def _answer(self, message: Any) -> JsonRpcResponse:
        if self._dispatcher is None:
            raise ServerStateError("answer JSON-RPC", self._state.value)
        response = await self._dispatcher.handle(message)
        if isinstance(message, dict) and message.get("method") == "tools/call":
            params = message.get("params") if isinstance(message.get("params"), dict) else {}
            self._broadcast_result(params.get("name"), params.get("arguments"), response.result)
        return response

    async def _rest_tools(self, request: Request) -> JSONResponse:
        return JSONResponse({"tools": self._tool_definitions()})

    async def _rest_execute(self, request: Request) -> JSONResponse:
        tool_name = request.path_params["tool_name"]
        body = await _json_object(request)
        if body is None:
            return _rest_error("Request body must be a JSON object", tool_name, 400)
        arguments = body.get("args") or {}
        if not isinstance(arguments, dict):
            return _rest_error("args must be an object", tool_name, 400)

        try:
            outcome = await self._require_executor("execute tools").execute(tool_name, arguments)
        except ToolNotFoundError as exc:
            return _rest_error(str(exc), tool_name, 404)

        payload = outcome.to_payload()
        self._broadcast_result(tool_name, arguments, payload)
        return JSONResponse(payload)

    async def _mcp_tools(self, request: Request) -> JSONResponse:
        return JSONResponse({"jsonrpc": "2.0", "result": {"tools": self._tool_definitions()}})

    async def _mcp_execute(self, request: Request) -> JSONResponse:
        body = await _json_object(request)
        if body is None:
            return _rpc_error(PARSE_ERROR, "Request body must be a JSON object", 400)
        tool_name = body.get("toolName")
        arguments = body.get("arguments") or {}
        if not tool_name or not isinstance(tool_name, str):
            return _rpc_error(INVALID_PARAMS, "Tool name is required", 400)
        if not isinstance(arguments, dict):
            return _rpc_error(INVALID_PARAMS, "arguments must be an object", 400)

        try:
            outcome = await self._require_executor("execute tools").execute(tool_name, arguments)
        except ToolNotFoundError as exc:
            return _rpc_error(INTERNAL_ERROR, str(exc), 404)

        self._broadcast_result(tool_name, arguments, outcome.to_payload())
        result = tool_call_result(outcome.result, is_error=not outcome.success)
        return JSONResponse({"jsonrpc": "2.0", "result": result.model_dump(by_alias=True)})

    async def _mcp_config(self, request: Request) -> JSONResponse:
        return JSONResponse(self.generate_config().to_document())

    async def _root(self, request: Request) -> JSONResponse | StreamingResponse:
        if "text/event-stream" in request.headers.get("accept", ""):
            return await self._sse(request)
        return JSONResponse(
            {
                "name": SERVER_NAME,
                "version": __version__,
                "description": "MCP Sandbox Server",
                "endpoints": self.generate_config().endpoints.model_dump(),
                "activeClients": self._push.client_count,
            }
        )


async def _json_object(request: Request) -> dict[str, Any] | None:
    """Decode the body as a JSON object; an empty body counts as ``{}``."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _rpc_error(code: int, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(JsonRpcResponse.failure(None, code, message).to_wire(), status_code=status_code)


def _rest_error(message: str, tool_name: str, status_code: int) -> JSONResponse:
    return JSONResponse({"success": False, "error": message, "toolName": tool_name}, status_code=status_code)

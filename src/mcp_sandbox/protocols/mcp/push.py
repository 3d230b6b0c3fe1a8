"""Push channel — SSE client table, staged handshake, heartbeats and sweeps.

Each client owns one transport and the SSE response draining it is that
transport's only reader, so a client sees its messages in emission order.
Broadcasts write to every client independently: a failed write removes
that client and the broadcast moves on.

Client lifecycle::

    connect()  -> ": connected" ack, registered in the table
               -> +initialized_delay   notifications/initialized
               -> +tools_delay         notifications/tools_changed {tools}
    heartbeat  -> ": heartbeat" to every client, every heartbeat_interval
    sweep      -> evict clients idle longer than stale_after, every sweep_interval
    disconnect -> removed from the table, transport closed exactly once
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from mcp_sandbox.protocols.errors import TransportError
from mcp_sandbox.protocols.mcp.models import JsonRpcNotification, PushSettings, initialize_result

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

logger = logging.getLogger(__name__)

CONNECTED_LINE = ": connected\n\n"
HEARTBEAT_LINE = ": heartbeat\n\n"

INITIALIZED = "notifications/initialized"
TOOLS_CHANGED = "notifications/tools_changed"
TOOL_RESULT = "notifications/tool_result"


@runtime_checkable
class SSETransport(Protocol):
    """Write side of one client's event stream."""

    def write(self, chunk: str) -> None:
        """Queue *chunk*; raise :class:`OSError` if the client cannot take it."""
        ...

    def close(self) -> None:
        """End the stream. Must be idempotent."""
        ...


class QueueTransport:
    """Bounded in-memory transport drained by a streaming HTTP response.

    A full queue means the client stopped reading; the write fails instead
    of growing without bound.
    """

    def __init__(self, maxsize: int = 256) -> None:
        self._queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, chunk: str) -> None:
        if self._closed:
            raise ConnectionResetError("transport is closed")
        try:
            self._queue.put_nowait(chunk)
        except asyncio.QueueFull as exc:
            raise ConnectionResetError("client is not draining its stream") from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        while self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(None)

    async def __aiter__(self) -> AsyncIterator[str]:
        while True:
            chunk = await self._queue.get()
            if chunk is None:
                return
            yield chunk


@dataclass
class SSEClient:
    """One connected push client."""

    id: str
    transport: SSETransport
    last_activity: float
    connected_at: float = field(default=0.0)


class PushChannel:
    """Owns the push-client table; nothing outside this class mutates it.

    Usage::

        channel = PushChannel(PushSettings(), tools=registry.definitions)
        client = channel.connect(QueueTransport())
        channel.broadcast(TOOL_RESULT, {...})
        channel.sweep()
    """

    def __init__(
        self,
        settings: PushSettings | None = None,
        *,
        tools: Callable[[], list[dict[str, Any]]] = list,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings or PushSettings()
        self._tools = tools
        self._clock = clock
        self._clients: dict[str, SSEClient] = {}
        self._pending: set[asyncio.Task[None]] = set()
        self._maintenance: list[asyncio.Task[None]] = []

    @property
    def settings(self) -> PushSettings:
        return self._settings

    @property
    def client_count(self) -> int:
        return len(self._clients)

    def client_ids(self) -> list[str]:
        return list(self._clients)

    def get(self, client_id: str) -> SSEClient | None:
        return self._clients.get(client_id)

    # ------------------------------------------------------------------
    # Client lifecycle
    # ------------------------------------------------------------------

    def connect(self, transport: SSETransport) -> SSEClient:
        """Acknowledge *transport*, register it, and start the staged handshake."""
        now = self._clock()
        client = SSEClient(id=_new_client_id(), transport=transport, last_activity=now, connected_at=now)
        transport.write(CONNECTED_LINE)
        self._clients[client.id] = client
        logger.info("New SSE client connected: %s", client.id)

        with contextlib.suppress(RuntimeError):  # no running loop: handshake is skipped
            task = asyncio.get_running_loop().create_task(self._handshake(client.id))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        return client

    def disconnect(self, client_id: str, reason: str = "disconnected") -> bool:
        """Remove *client_id* and close its transport. Returns ``False`` if already gone."""
        client = self._clients.pop(client_id, None)
        if client is None:
            return False
        try:
            client.transport.close()
        except OSError as exc:
            logger.debug("Closing transport for %s failed: %s", client_id, exc)
        logger.info("SSE client %s: %s", reason, client_id)
        return True

    def touch(self, client_id: str) -> None:
        """Record that *client_id* just took delivery of a chunk."""
        client = self._clients.get(client_id)
        if client is not None:
            client.last_activity = self._clock()

    def close_all(self) -> None:
        for client_id in list(self._clients):
            self.disconnect(client_id, "closed by server")
        for task in list(self._pending):
            task.cancel()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def send(self, client_id: str, payload: dict[str, Any]) -> bool:
        """Send one ``data:`` event. A failed write evicts only this client."""
        return self._write(client_id, f"data: {json.dumps(payload, default=str)}\n\n")

    def notify(self, client_id: str, method: str, params: dict[str, Any]) -> bool:
        notification = JsonRpcNotification(method=method, params=params)
        return self.send(client_id, notification.model_dump(mode="json"))

    def broadcast(self, method: str, params: dict[str, Any]) -> int:
        """Fire-and-forget *method* to every open client; returns deliveries."""
        delivered = 0
        for client_id in list(self._clients):
            if self.notify(client_id, method, params):
                delivered += 1
        return delivered

    def heartbeat(self) -> int:
        delivered = 0
        for client_id in list(self._clients):
            if self._write(client_id, HEARTBEAT_LINE):
                delivered += 1
        return delivered

    def sweep(self) -> list[str]:
        """Evict clients idle for longer than ``stale_after``."""
        now = self._clock()
        stale = [
            client.id
            for client in self._clients.values()
            if now - client.last_activity > self._settings.stale_after
        ]
        for client_id in stale:
            self.disconnect(client_id, "removed stale client")
        return stale

    def _write(self, client_id: str, chunk: str) -> bool:
        client = self._clients.get(client_id)
        if client is None:
            return False
        try:
            client.transport.write(chunk)
        except OSError as exc:
            logger.warning("%s", TransportError(client_id, str(exc)))
            self.disconnect(client_id, "removed after write failure")
            return False
        return True

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    async def _handshake(self, client_id: str) -> None:
        await asyncio.sleep(self._settings.initialized_delay)
        if not self.notify(client_id, INITIALIZED, initialize_result()):
            return
        await asyncio.sleep(self._settings.tools_delay)
        self.notify(client_id, TOOLS_CHANGED, {"tools": self._tools()})

    def start_maintenance(self) -> None:
        """Start the heartbeat and sweep loops on the running loop."""
        if self._maintenance:
            return
        self._maintenance = [
            asyncio.create_task(self._every(self._settings.heartbeat_interval, self.heartbeat)),
            asyncio.create_task(self._every(self._settings.sweep_interval, self.sweep)),
        ]

    async def stop_maintenance(self) -> None:
        tasks, self._maintenance = self._maintenance, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    @property
    def maintenance_running(self) -> bool:
        return bool(self._maintenance)

    @staticmethod
    async def _every(interval: float, tick: Callable[[], object]) -> None:
        while True:
            await asyncio.sleep(interval)
            tick()


def _new_client_id() -> str:
    return f"client_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"

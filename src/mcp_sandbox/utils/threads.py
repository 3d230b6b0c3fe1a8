"""Blocking calls bridged onto the event loop through daemon threads.

Each call gets its own thread instead of a slot in the loop's default
executor.  A call that never returns therefore holds only its own thread:
it cannot queue later calls behind it, and as a daemon it neither blocks
``asyncio.run`` from shutting down nor the interpreter from exiting.
"""

from __future__ import annotations

import asyncio
import contextlib
import contextvars
import itertools
import threading
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

_counter = itertools.count(1)


async def run_in_daemon_thread(func: Callable[..., Any], /, *args: Any, name: str | None = None) -> Any:
    """Run ``func(*args)`` on a fresh daemon thread and await its outcome.

    Cancelling the awaiting coroutine stops the wait, not the thread.  The
    thread's late outcome is discarded.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[Any] = loop.create_future()
    context = contextvars.copy_context()

    def _settle(value: Any, error: BaseException | None) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(value)

    def _target() -> None:
        try:
            value, error = context.run(func, *args), None
        except StopIteration as exc:
            value, error = None, RuntimeError(f"StopIteration raised: {exc}")
        except Exception as exc:
            value, error = None, exc
        # the loop may already be closed when an abandoned call finishes
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(_settle, value, error)

    thread = threading.Thread(
        target=_target,
        name=name or f"mcp-sandbox-call-{next(_counter)}",
        daemon=True,
    )
    thread.start()
    return await future

"""
Synchronous entry point into async code.

Server operations and foreign calls are synchronous, but the MCP client and
some foreign objects are async. `run_sync` drives an awaitable to completion
on a fresh event loop, moving to a bridge thread when the caller is itself
running inside a loop.
"""

import asyncio
import atexit
from concurrent.futures import ThreadPoolExecutor
from typing import Awaitable, TypeVar

T = TypeVar("T")

_BRIDGE = ThreadPoolExecutor(max_workers=4, thread_name_prefix="agentmcp-sync-bridge")


async def _drive(awaitable: Awaitable[T]) -> T:
    return await awaitable


def run_sync(awaitable: Awaitable[T]) -> T:
    """Block until `awaitable` finishes and return its result; its exceptions propagate."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_drive(awaitable))
    # the caller's loop must keep running, so the work gets a loop of its own
    return _BRIDGE.submit(asyncio.run, _drive(awaitable)).result()


@atexit.register
def _shutdown_bridge() -> None:
    _BRIDGE.shutdown(wait=False, cancel_futures=True)

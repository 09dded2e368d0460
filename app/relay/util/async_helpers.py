"""Async helpers for blocking I/O and bounded gateway calls."""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")


async def run_sync(fn: Callable[..., T], *args: object, **kwargs: object) -> T:
    """Run a blocking *fn* in the default executor without stalling the loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(fn, *args, **kwargs))


async def bounded(aw: Awaitable[T], timeout: float | None) -> T:
    """Await *aw*, raising ``asyncio.TimeoutError`` after *timeout* seconds.

    A ``timeout`` of ``None`` or ``<= 0`` waits indefinitely.
    """
    if timeout is None or timeout <= 0:
        return await aw
    return await asyncio.wait_for(aw, timeout)

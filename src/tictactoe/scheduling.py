"""Deferred callbacks used for the AI think-delay."""

from __future__ import annotations

from typing import Callable, Optional, Protocol
import asyncio


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class AsyncioScheduler:
    """Runs callbacks on an asyncio event loop via ``call_later``.

    Without an explicit loop the running loop at scheduling time is used, so
    this must be called from inside a coroutine or loop callback.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def schedule(
        self, delay: float, callback: Callable[[], None]
    ) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(0.0, delay), callback)

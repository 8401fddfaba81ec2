from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)

DoneCallback = Callable[[Any, Optional[BaseException]], None]


class Cancellable(Protocol):
    def cancel(self) -> None:
        raise NotImplementedError


class Scheduler(Protocol):
    """Timer and dispatch primitives a polling loop runs on."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        raise NotImplementedError

    def dispatch(self, fetch: Callable[[], Any], done: DoneCallback) -> None:
        """Run ``fetch`` without blocking and report ``(result, error)`` to ``done``."""
        raise NotImplementedError


class AsyncioScheduler:
    """Scheduler bound to an asyncio event loop.

    Blocking fetches (plain functions) go to the loop's default executor;
    coroutine functions run as tasks. ``done`` always runs on the loop thread.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._loop.call_later(delay, callback)

    def dispatch(self, fetch: Callable[[], Any], done: DoneCallback) -> None:
        if inspect.iscoroutinefunction(fetch):
            future = self._loop.create_task(fetch())
        else:
            future = self._loop.run_in_executor(None, fetch)
        future.add_done_callback(lambda f: _deliver(f, done))


def _deliver(future: asyncio.Future, done: DoneCallback) -> None:
    if future.cancelled():
        return
    error = future.exception()
    done(None if error is not None else future.result(), error)

from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Optional

from .scheduler import Cancellable, Scheduler

logger = logging.getLogger(__name__)


class PollingController:
    """Fixed-interval re-fetch bound to a view's lifetime.

    ``start`` fetches immediately and arms a repeating timer, ``stop`` cancels
    it. Each dispatch takes a sequence number and only a result newer than the
    last applied one reaches ``on_result``; results that arrive after ``stop``
    (or after ``restart``) are dropped. Fetch failures are logged and the loop
    keeps going.
    """

    def __init__(
        self,
        fetch: Callable[[], Any],
        on_result: Callable[[Any], None],
        *,
        interval: float,
        scheduler: Scheduler,
        name: str = "poll",
        on_error: Optional[Callable[[BaseException], None]] = None,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.name = name
        self._fetch = fetch
        self._on_result = on_result
        self._on_error = on_error
        self._interval = float(interval)
        self._scheduler = scheduler

        self._timer: Optional[Cancellable] = None
        self._running = False
        self._refreshing = False
        # Bumped on every start/stop; completions from an older generation are no-ops.
        self._generation = 0
        self._seq = itertools.count(1)
        self._applied_seq = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._running

    @property
    def refreshing(self) -> bool:
        return self._refreshing

    def start(self) -> None:
        if self._running:
            self.stop()
        self._running = True
        self._generation += 1
        self._dispatch(manual=False)
        self._arm()

    def stop(self) -> None:
        self._running = False
        self._generation += 1
        self._refreshing = False
        self._cancel_timer()

    def restart(self) -> None:
        """Re-subscribe after a parameter the fetch depends on changed."""
        self.stop()
        self.start()

    def refresh(self) -> bool:
        """User-triggered fetch outside the timer.

        Returns ``False`` when the view is detached or a manual refresh is still
        outstanding. A timer tick may be in flight at the same time.
        """
        if not self._running or self._refreshing:
            return False
        self._refreshing = True
        self._dispatch(manual=True)
        return True

    def _arm(self) -> None:
        self._cancel_timer()
        self._timer = self._scheduler.call_later(self._interval, self._tick)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _tick(self) -> None:
        self._timer = None
        if not self._running:
            return
        # Arm first: a slow fetch must not delay the next tick.
        self._arm()
        self._dispatch(manual=False)

    def _dispatch(self, *, manual: bool) -> None:
        seq = next(self._seq)
        generation = self._generation

        def done(result: Any, error: Optional[BaseException]) -> None:
            self._complete(seq, generation, manual, result, error)

        try:
            self._scheduler.dispatch(self._fetch, done)
        except Exception as e:
            done(None, e)

    def _complete(self, seq: int, generation: int, manual: bool, result: Any, error: Optional[BaseException]) -> None:
        if generation != self._generation:
            return
        if manual:
            self._refreshing = False

        if error is not None:
            logger.warning("%s: fetch #%d failed: %s", self.name, seq, error)
            if self._on_error is not None:
                self._on_error(error)
            return

        if seq <= self._applied_seq:
            logger.debug("%s: dropping stale response #%d (have #%d)", self.name, seq, self._applied_seq)
            return
        self._applied_seq = seq

        try:
            self._on_result(result)
        except Exception:
            logger.exception("%s: result handler failed", self.name)

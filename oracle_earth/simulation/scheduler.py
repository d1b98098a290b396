"""Repeating-timer seam for the simulation components.

Every component receives a :class:`Scheduler` and owns the
:class:`CancelToken` objects it gets back. ``AsyncioScheduler`` runs timers
as tasks on the event loop; ``VirtualScheduler`` advances a virtual clock
on demand so playback and feed generation can be driven without waiting.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

TimerCallback = Callable[[], None]


class CancelToken(Protocol):
    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule_repeating(self, interval_ms: int, callback: TimerCallback) -> CancelToken: ...


# ---------------------------------------------------------------------------
# Event-loop scheduler
# ---------------------------------------------------------------------------

class _TaskToken:
    def __init__(self, task: asyncio.Task, on_cancel: Callable[["_TaskToken"], None]):
        self._task = task
        self._on_cancel = on_cancel
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        self._task.cancel()
        self._on_cancel(self)


class AsyncioScheduler:
    """Runs each repeating timer as an ``asyncio`` task.

    Must be used from code running on the event loop (or constructed with
    an explicit loop). Cancelling the token cancels the task; a tick that
    is already due never fires after ``cancel()`` returns because the
    callback runs on the same loop thread. A callback that raises is
    logged and the timer keeps its schedule.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop
        self._tokens: set[_TaskToken] = set()

    @property
    def active_timers(self) -> int:
        return len(self._tokens)

    def schedule_repeating(self, interval_ms: int, callback: TimerCallback) -> CancelToken:
        loop = self._loop or asyncio.get_running_loop()
        interval_s = interval_ms / 1000.0
        token: _TaskToken | None = None

        async def _run() -> None:
            while True:
                await asyncio.sleep(interval_s)
                if token is not None and token.cancelled:
                    return
                _fire(callback)

        task = loop.create_task(_run())
        token = _TaskToken(task, self._tokens.discard)
        task.add_done_callback(lambda _task: self._tokens.discard(token))
        self._tokens.add(token)
        return token

    def cancel_all(self) -> None:
        if self._tokens:
            logger.debug("Cancelling %d timer task(s)", len(self._tokens))
        for token in list(self._tokens):
            token.cancel()
        self._tokens.clear()


def _fire(callback: TimerCallback) -> None:
    try:
        callback()
    except Exception:
        logger.exception("Timer callback %r failed", callback)


# ---------------------------------------------------------------------------
# Virtual-time scheduler
# ---------------------------------------------------------------------------

class _VirtualTimer:
    def __init__(self, interval_ms: int, callback: TimerCallback, due_ms: int, seq: int):
        self.interval_ms = interval_ms
        self.callback = callback
        self.due_ms = due_ms
        self.seq = seq
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class VirtualScheduler:
    """Deterministic scheduler whose clock only moves on :meth:`advance`."""

    def __init__(self) -> None:
        self.now_ms = 0
        self._timers: list[_VirtualTimer] = []
        self._seq = 0

    def schedule_repeating(self, interval_ms: int, callback: TimerCallback) -> CancelToken:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self._seq += 1
        timer = _VirtualTimer(interval_ms, callback, self.now_ms + interval_ms, self._seq)
        self._timers.append(timer)
        return timer

    @property
    def active_timers(self) -> int:
        return sum(1 for t in self._timers if not t.cancelled)

    def advance(self, ms: int) -> int:
        """Move the clock forward by *ms*, firing due callbacks in time order.

        Returns the number of callbacks fired.
        """
        target = self.now_ms + ms
        fired = 0
        while True:
            self._timers = [t for t in self._timers if not t.cancelled]
            due = [t for t in self._timers if t.due_ms <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.due_ms, t.seq))
            self.now_ms = timer.due_ms
            timer.due_ms += timer.interval_ms
            _fire(timer.callback)
            fired += 1
        self.now_ms = target
        return fired

    def cancel_all(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()

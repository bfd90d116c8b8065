"""Timer abstraction used to drive simulation ticks.

The simulation never sleeps itself. It asks a scheduler to call it back
after the tick interval and re-arms once the tick has been computed, so at
most one tick is ever pending.

Classes:
    - TimerHandle: Handle to a pending callback, used to cancel it.
    - Scheduler: Interface shared by all schedulers.
    - ManualScheduler: Virtual clock advanced explicitly, for tests and
      headless runs.
    - ThreadedScheduler: Wall-clock scheduler backed by ``threading.Timer``.
"""

import heapq
import itertools
import threading
import time
from typing import Callable, List, Optional, Tuple


class TimerHandle:
    """Handle to a callback scheduled with :meth:`Scheduler.call_later`.

    Attributes:
        due (float): Scheduler time in seconds at which the callback fires.
        cancelled (bool): True once :meth:`cancel` has been called.
    """

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.cancelled = False
        self._callback = callback
        self._timer: Optional[threading.Timer] = None

    def cancel(self) -> None:
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()

    def _run(self) -> None:
        if not self.cancelled:
            self._callback()


class Scheduler:
    """Interface for schedulers that call back after a delay."""

    def now(self) -> float:
        """Current scheduler time in seconds."""
        raise NotImplementedError

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle:
        """Arrange for ``callback`` to be called once after ``delay_s`` seconds."""
        raise NotImplementedError

    def cancel(self, handle: Optional[TimerHandle]) -> None:
        """Cancel a pending callback. Cancelling None or a fired handle is a no-op."""
        if handle is not None:
            handle.cancel()


class ManualScheduler(Scheduler):
    """Deterministic scheduler driven by a virtual clock.

    Nothing fires until :meth:`advance` or :meth:`run_next` is called.
    Callbacks due at the same time fire in the order they were scheduled.
    """

    def __init__(self):
        self._now = 0.0
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle:
        if delay_s < 0:
            raise ValueError(f"delay must be non-negative, got {delay_s}")

        handle = TimerHandle(self._now + delay_s, callback)
        heapq.heappush(self._queue, (handle.due, next(self._counter), handle))
        return handle

    def pending(self) -> int:
        """Number of callbacks scheduled and not cancelled."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def next_due(self) -> Optional[float]:
        """Time of the next live callback, or None if nothing is pending."""
        self._drop_cancelled()
        return self._queue[0][0] if self._queue else None

    def run_next(self) -> bool:
        """Jump the clock to the next live callback and run it.

        Returns:
            bool: False if nothing was pending.
        """
        self._drop_cancelled()
        if not self._queue:
            return False

        due, _, handle = heapq.heappop(self._queue)
        self._now = max(self._now, due)
        handle._run()
        return True

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every callback that falls due.

        Callbacks scheduled by a callback run in the same call if they fall
        due before the new time.

        Returns:
            int: Number of callbacks that ran.
        """
        target = self._now + seconds
        ran = 0
        while True:
            due = self.next_due()
            if due is None or due > target:
                break
            self.run_next()
            ran += 1

        self._now = target
        return ran

    def _drop_cancelled(self) -> None:
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)


class ThreadedScheduler(Scheduler):
    """Wall-clock scheduler backed by daemon ``threading.Timer`` threads.

    Callbacks run on the timer thread, so the code they call must serialize
    access to any state it shares with other threads.
    """

    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle:
        if delay_s < 0:
            raise ValueError(f"delay must be non-negative, got {delay_s}")

        handle = TimerHandle(self.now() + delay_s, callback)
        timer = threading.Timer(delay_s, handle._run)
        timer.daemon = True
        handle._timer = timer
        timer.start()
        return handle

from __future__ import annotations

"""
Timer Scheduling.

Provides the clock/timer capability the change reconciler is built on.
Two implementations share one interface:

- ManualScheduler: virtual clock advanced explicitly, used by tests.
- EventLoop: cooperative dispatcher running every submitted task and every
  due timer on a single background thread, one callback at a time. State
  touched only from inside its callbacks needs no locking.
"""

import heapq
import itertools
import logging
import queue
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class TimerHandle:
    """A scheduled callback that can be cancelled before it fires."""

    __slots__ = ("deadline", "callback", "cancelled")

    def __init__(self, deadline: float, callback: Callback):
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "armed"
        return f"<TimerHandle deadline={self.deadline:.3f} {state}>"


class Scheduler(ABC):
    """
    Abstract clock and one-shot timer facility.
    """

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds on this scheduler's clock."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        """
        Arm a one-shot timer.

        Args:
            delay: Seconds from now until the callback runs.
            callback: Zero-argument callable.

        Returns:
            TimerHandle: Handle used to cancel the timer.
        """


class _TimerHeap:
    """Deadline-ordered timers; insertion order breaks ties."""

    def __init__(self) -> None:
        self._heap: List[Tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def push(self, handle: TimerHandle) -> None:
        heapq.heappush(self._heap, (handle.deadline, next(self._seq), handle))

    def pop_due(self, now: float) -> Optional[TimerHandle]:
        """Pop the earliest live timer whose deadline is <= now."""
        while self._heap and self._heap[0][0] <= now:
            handle = heapq.heappop(self._heap)[2]
            if not handle.cancelled:
                return handle
        return None

    def next_deadline(self) -> Optional[float]:
        while self._heap and self._heap[0][2].cancelled:
            heapq.heappop(self._heap)
        return self._heap[0][0] if self._heap else None

    def live_count(self) -> int:
        return sum(1 for _, _, h in self._heap if not h.cancelled)


# -----------------------------------------------------------------------------
# VIRTUAL CLOCK
# -----------------------------------------------------------------------------

class ManualScheduler(Scheduler):
    """
    Deterministic scheduler whose clock only moves through advance().

    Timers fire synchronously inside advance(), in deadline order, with the
    clock set to each timer's deadline while its callback runs.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._timers = _TimerHeap()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        handle = TimerHandle(self._now + max(0.0, delay), callback)
        self._timers.push(handle)
        return handle

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, firing every timer that becomes due.

        Returns:
            int: Number of callbacks executed.
        """
        target = self._now + seconds
        fired = 0
        while True:
            handle = self._timers.pop_due(target)
            if handle is None:
                break
            self._now = max(self._now, handle.deadline)
            handle.callback()
            fired += 1
        self._now = target
        return fired

    @property
    def pending(self) -> int:
        """Number of armed, not yet fired timers."""
        return self._timers.live_count()


# -----------------------------------------------------------------------------
# PRODUCTION EVENT LOOP
# -----------------------------------------------------------------------------

class EventLoop(Scheduler):
    """
    Single-threaded dispatcher for tasks and timers.

    Other threads hand work over with submit(); the loop thread executes
    it in arrival order, interleaved with due timers. Exceptions raised by
    callbacks are logged and swallowed so one bad turn never stops the loop.
    """

    def __init__(self, name: str = "langmanager-loop", clock: Callable[[], float] = time.monotonic):
        self.name = name
        self._clock = clock
        self._tasks: "queue.Queue[Optional[Callback]]" = queue.Queue()
        self._timers = _TimerHeap()
        self._timers_lock = threading.Lock()
        self._stopping = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def now(self) -> float:
        return self._clock()

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        handle = TimerHandle(self.now() + max(0.0, delay), callback)
        with self._timers_lock:
            self._timers.push(handle)
        # Wake the loop so it recomputes its wait timeout
        self._tasks.put(None)
        return handle

    def submit(self, callback: Callback) -> None:
        """Queue a callback to run on the loop thread."""
        self._tasks.put(callback)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the dispatcher thread. Calling start twice is a no-op."""
        if self.is_running:
            return
        self._stopping.clear()
        self._thread = threading.Thread(target=self.run_forever, name=self.name, daemon=True)
        self._thread.start()
        logger.debug(f"EventLoop: '{self.name}' started.")

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """Stop the dispatcher. Armed timers are kept for a later start()."""
        self._stopping.set()
        self._tasks.put(None)
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None
        logger.debug(f"EventLoop: '{self.name}' stopped.")

    def run_forever(self) -> None:
        """Dispatch tasks and timers until stop() is called."""
        while not self._stopping.is_set():
            self._run_due_timers()
            try:
                task = self._tasks.get(timeout=self._wait_timeout())
            except queue.Empty:
                continue
            if task is not None and not self._stopping.is_set():
                self._run(task)

    def _run_due_timers(self) -> None:
        while not self._stopping.is_set():
            with self._timers_lock:
                handle = self._timers.pop_due(self.now())
            if handle is None:
                return
            self._run(handle.callback)

    def _wait_timeout(self) -> Optional[float]:
        with self._timers_lock:
            deadline = self._timers.next_deadline()
        if deadline is None:
            return None
        return max(0.0, deadline - self.now())

    def _run(self, callback: Callback) -> None:
        try:
            callback()
        except Exception as e:
            logger.error(f"EventLoop: Callback failed: {e}", exc_info=True)

"""Single-threaded callback dispatcher.

Every piece of application state is touched from the thread running
:meth:`Dispatcher.run_forever`. Other threads (tray menu, Tk windows,
worker pool) hand work over with :meth:`Dispatcher.call_soon`.
"""

from __future__ import annotations

import functools
import heapq
import itertools
import logging
import queue
import threading
import time
from concurrent.futures import Executor, Future
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger("cliptranslator.dispatch")

DEFAULT_TICK = 0.05


class TimerHandle:
    """A callback scheduled to run once on the dispatcher."""

    def __init__(self, deadline: float, callback: Callable[[], Any]) -> None:
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class Dispatcher:
    def __init__(self, *, time_provider: Callable[[], float] = time.monotonic) -> None:
        self._time = time_provider
        self._ready: "queue.Queue[Callable[[], Any]]" = queue.Queue()
        self._timers: List[Tuple[float, int, TimerHandle]] = []
        self._timer_lock = threading.Lock()
        self._sequence = itertools.count()
        self._stop_event = threading.Event()

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        """Queue ``callback(*args)``. Safe to call from any thread."""

        self._ready.put(functools.partial(callback, *args))

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        handle = TimerHandle(self._time() + max(0.0, delay), functools.partial(callback, *args))
        with self._timer_lock:
            heapq.heappush(self._timers, (handle.deadline, next(self._sequence), handle))
        return handle

    def run_in_executor(
        self,
        executor: Executor,
        work: Callable[[], Any],
        on_done: Callable[["Future[Any]"], Any],
    ) -> "Future[Any]":
        """Run ``work`` on ``executor`` and deliver its future back here."""

        future = executor.submit(work)
        future.add_done_callback(lambda done: self.call_soon(on_done, done))
        return future

    def run_pending(self) -> int:
        """Run due timers and every queued callback. Returns the number run."""

        now = self._time()
        due: List[TimerHandle] = []
        with self._timer_lock:
            while self._timers and self._timers[0][0] <= now:
                due.append(heapq.heappop(self._timers)[2])

        ran = 0
        for handle in due:
            if handle.cancelled:
                continue
            self._invoke(handle.callback)
            ran += 1

        while True:
            try:
                callback = self._ready.get_nowait()
            except queue.Empty:
                break
            self._invoke(callback)
            ran += 1
        return ran

    def run_forever(self, tick: float = DEFAULT_TICK) -> None:
        self._stop_event.clear()
        while not self._stop_event.is_set():
            self.run_pending()
            try:
                callback = self._ready.get(timeout=self._next_timeout(tick))
            except queue.Empty:
                continue
            self._invoke(callback)

    def stop(self) -> None:
        self._stop_event.set()
        self._ready.put(lambda: None)

    @property
    def is_stopped(self) -> bool:
        return self._stop_event.is_set()

    def _next_timeout(self, tick: float) -> float:
        with self._timer_lock:
            if not self._timers:
                return tick
            remaining = self._timers[0][0] - self._time()
        return min(tick, max(0.0, remaining))

    @staticmethod
    def _invoke(callback: Callable[[], Any]) -> None:
        try:
            callback()
        except Exception as exc:
            logger.exception("Unhandled error in dispatched callback: %s", exc)


class RepeatingTimer:
    """Call ``callback`` every ``interval`` seconds until stopped."""

    def __init__(self, dispatcher: Dispatcher, interval: float, callback: Callable[[], Any]) -> None:
        self._dispatcher = dispatcher
        self.interval = interval
        self._callback = callback
        self._handle: Optional[TimerHandle] = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._schedule()

    def stop(self) -> None:
        self._running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def restart(self) -> None:
        self.stop()
        self.start()

    def _schedule(self) -> None:
        self._handle = self._dispatcher.call_later(self.interval, self._fire)

    def _fire(self) -> None:
        self._handle = None
        if not self._running:
            return
        try:
            self._callback()
        finally:
            if self._running and self._handle is None:
                self._schedule()

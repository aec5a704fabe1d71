"""A thread-pool event loop with delayed tasks and a process-wide default."""

from __future__ import annotations

import heapq
import itertools
import threading
import time
from collections import deque
from typing import Any, Callable, Deque, List, Optional, Tuple

from loopworks.futures import Future, Promise

_Task = Callable[[], None]


class EventLoop:
    """Runs submitted callables on a fixed number of worker threads."""

    def __init__(self, num_threads: int = 1) -> None:
        if num_threads <= 0:
            raise ValueError("Number of threads must be greater than 0")
        self._cond = threading.Condition()
        self._tasks: Deque[_Task] = deque()
        self._timers: List[Tuple[float, int, _Task]] = []
        self._sequence = itertools.count()
        self._running = True
        self._workers = [
            threading.Thread(target=self._worker_loop, name=f"loopworks-{i}", daemon=True)
            for i in range(num_threads)
        ]
        for worker in self._workers:
            worker.start()

    @property
    def running(self) -> bool:
        """Whether the loop still accepts work."""
        with self._cond:
            return self._running

    def stop(self) -> None:
        """Stop accepting work and let the workers exit."""
        with self._cond:
            self._running = False
            self._cond.notify_all()

    def close(self) -> None:
        """Stop the loop, join its workers and clear it as the default loop."""
        self.stop()
        current = threading.current_thread()
        for worker in self._workers:
            if worker is not current:
                worker.join()
        if default_loop() is self:
            set_default_loop(None)

    def __enter__(self) -> "EventLoop":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _bind(self, fn: Callable[..., Any], args: tuple, kwargs: dict) -> Tuple[Future, _Task]:
        promise: Promise[Any] = Promise(self)

        def task() -> None:
            try:
                result = fn(*args, **kwargs)
            except BaseException as exc:
                promise.set_exception(exc)
            else:
                promise.set_value(result)

        return promise.future(), task

    def run(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Queue ``fn(*args, **kwargs)`` and return a future for its result."""
        future, task = self._bind(fn, args, kwargs)
        with self._cond:
            if not self._running:
                raise RuntimeError("Cannot enqueue task: event loop is stopped")
            self._tasks.append(task)
            self._cond.notify()
        return future

    def run_later(self, delay_ms: float, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Run ``fn(*args, **kwargs)`` once *delay_ms* milliseconds have passed."""
        future, task = self._bind(fn, args, kwargs)
        deadline = time.monotonic() + delay_ms / 1000.0
        with self._cond:
            if not self._running:
                raise RuntimeError("Cannot schedule task: event loop is stopped")
            heapq.heappush(self._timers, (deadline, next(self._sequence), task))
            self._cond.notify()
        return future

    def _take_ready(self) -> Optional[_Task]:
        """Pop a due timer, else a queued task; the caller holds the lock."""
        if self._timers and self._timers[0][0] <= time.monotonic():
            return heapq.heappop(self._timers)[2]
        if self._tasks:
            return self._tasks.popleft()
        return None

    def _worker_loop(self) -> None:
        while True:
            with self._cond:
                if not self._running:
                    return
                task = self._take_ready()
                if task is None:
                    if self._timers:
                        self._cond.wait(max(0.0, self._timers[0][0] - time.monotonic()))
                    else:
                        self._cond.wait()
                    continue
            task()

    def process_pending(self) -> bool:
        """Run one ready task in the calling thread; return whether one ran."""
        with self._cond:
            task = self._take_ready()
        if task is None:
            return False
        task()
        return True


_default_lock = threading.Lock()
_default_loop: Optional[EventLoop] = None


def set_default_loop(loop: Optional[EventLoop]) -> None:
    """Make *loop* the loop used by the module-level :func:`run` helpers."""
    global _default_loop
    if loop is not None and not isinstance(loop, EventLoop):
        raise TypeError(f"expected an EventLoop or None, got {type(loop).__name__}")
    with _default_lock:
        _default_loop = loop


def default_loop() -> Optional[EventLoop]:
    """Return the current default loop, or None."""
    with _default_lock:
        return _default_loop


def _require_default() -> EventLoop:
    loop = default_loop()
    if loop is None:
        raise RuntimeError("no default event loop is set")
    return loop


def run(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
    """Queue a task on the default loop."""
    return _require_default().run(fn, *args, **kwargs)


def run_later(delay_ms: float, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
    """Schedule a delayed task on the default loop."""
    return _require_default().run_later(delay_ms, fn, *args, **kwargs)
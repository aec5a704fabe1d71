"""Promise/future pair with continuation chaining."""

from __future__ import annotations

import threading
import time
from concurrent.futures import InvalidStateError
from typing import Any, Callable, Generic, List, Optional, Protocol, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class _Scheduler(Protocol):
    def run(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> "Future[Any]": ...

    def process_pending(self) -> bool: ...


class Future(Generic[T]):
    """The read side of a :class:`Promise`: a value or exception that arrives later."""

    def __init__(self, loop: Optional[_Scheduler] = None) -> None:
        self._loop = loop
        self._cond = threading.Condition()
        self._done = False
        self._value: Any = None
        self._exception: Optional[BaseException] = None
        self._continuations: List[Callable[[], None]] = []

    def _resolve(self, value: Any, exception: Optional[BaseException]) -> None:
        with self._cond:
            if self._done:
                raise InvalidStateError("promise already satisfied")
            self._value = value
            self._exception = exception
            self._done = True
            continuations, self._continuations = self._continuations, []
            self._cond.notify_all()
        for continuation in continuations:
            continuation()

    def done(self) -> bool:
        """Return True once a value or an exception has been set."""
        with self._cond:
            return self._done

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the future is done or *timeout* seconds pass; return done-ness."""
        with self._cond:
            return self._cond.wait_for(lambda: self._done, timeout)

    def get(self, timeout: Optional[float] = None) -> T:
        """Block for the result; raise the stored exception if the task failed."""
        if not self.wait(timeout):
            raise TimeoutError("future is not ready")
        if self._exception is not None:
            raise self._exception
        return self._value

    def then(self, fn: Callable[[T], R]) -> "Future[R]":
        """Run *fn* with this future's value once it is ready and return its future.

        If this future is still pending, *fn* runs in the thread that completes it;
        an exception here is passed on to the returned future. If it is already
        done, *fn* is submitted to the loop, and a stored exception is raised now.
        """
        with self._cond:
            if not self._done:
                child: Promise[R] = Promise(self._loop)

                def _continue() -> None:
                    try:
                        result = fn(self.get())
                    except BaseException as exc:
                        child.set_exception(exc)
                    else:
                        child.set_value(result)

                self._continuations.append(_continue)
                return child.future()

        value = self.get()
        if self._loop is not None:
            return self._loop.run(fn, value)
        child = Promise(None)
        try:
            result = fn(value)
        except BaseException as exc:
            child.set_exception(exc)
        else:
            child.set_value(result)
        return child.future()

    def yield_until_ready(self) -> T:
        """Run the loop's pending work in this thread until the future is done."""
        if self._loop is None:
            return self.get()
        while not self.wait(0.001):
            if not self._loop.process_pending():
                time.sleep(0)
        return self.get()


class Promise(Generic[T]):
    """The write side of a :class:`Future`."""

    def __init__(self, loop: Optional[_Scheduler] = None) -> None:
        self._future: Future[T] = Future(loop)

    def set_value(self, value: Any = None) -> None:
        """Complete the future with *value* and run its continuations."""
        self._future._resolve(value, None)

    def set_exception(self, exc: BaseException) -> None:
        """Complete the future with *exc* and run its continuations."""
        if not isinstance(exc, BaseException):
            raise TypeError("set_exception() needs an exception instance")
        self._future._resolve(None, exc)

    def future(self) -> Future[T]:
        """Return the future tied to this promise."""
        return self._future
import threading
from concurrent.futures import InvalidStateError

import pytest

from loopworks.futures import Promise
from loopworks.loop import EventLoop


def _block_worker(loop):
    started = threading.Event()
    gate = threading.Event()

    def blocker():
        started.set()
        gate.wait(5)

    loop.run(blocker)
    assert started.wait(5)
    return gate


def test_set_value_then_get():
    p = Promise()
    p.set_value("payload")
    assert p.future().done() is True
    assert p.future().get() == "payload"


def test_set_value_defaults_to_none():
    p = Promise()
    p.set_value()
    assert p.future().get() is None


def test_set_exception_get_raises():
    p = Promise()
    p.set_exception(ValueError("boom"))
    with pytest.raises(ValueError, match="boom"):
        p.future().get()


def test_set_exception_requires_exception_instance():
    p = Promise()
    with pytest.raises(TypeError):
        p.set_exception("not an exception")


def test_second_completion_is_rejected():
    p = Promise()
    p.set_value(1)
    with pytest.raises(InvalidStateError):
        p.set_value(2)
    with pytest.raises(InvalidStateError):
        p.set_exception(RuntimeError("late"))
    assert p.future().get() == 1


def test_get_times_out_on_pending_future():
    p = Promise()
    with pytest.raises(TimeoutError):
        p.future().get(timeout=0.01)


def test_wait_reports_readiness():
    p = Promise()
    f = p.future()
    assert f.wait(0.01) is False
    p.set_value("v")
    assert f.wait(0) is True


def test_get_from_other_thread_unblocks():
    p = Promise()
    timer = threading.Timer(0.02, p.set_value, args=("later",))
    timer.start()
    assert p.future().get(timeout=5) == "later"
    timer.join()


def test_then_on_pending_future_chains_on_completion():
    p = Promise()
    chained = p.future().then(lambda v: ("wrapped", v))
    assert chained.done() is False
    p.set_value("hi")
    assert chained.get(timeout=1) == ("wrapped", "hi")


def test_then_runs_in_completing_thread():
    p = Promise()
    chained = p.future().then(lambda v: threading.get_ident())
    p.set_value(None)
    assert chained.get(timeout=1) == threading.get_ident()


def test_then_passes_parent_exception_on():
    p = Promise()
    chained = p.future().then(lambda v: v)
    p.set_exception(KeyError("missing"))
    with pytest.raises(KeyError):
        chained.get(timeout=1)


def test_then_captures_continuation_exception():
    p = Promise()

    def fail(_value):
        raise ZeroDivisionError("bad")

    chained = p.future().then(fail)
    p.set_value(3)
    with pytest.raises(ZeroDivisionError, match="bad"):
        chained.get(timeout=1)


def test_multiple_continuations_all_run():
    p = Promise()
    first = p.future().then(lambda v: ("a", v))
    second = p.future().then(lambda v: ("b", v))
    p.set_value("x")
    assert first.get(timeout=1) == ("a", "x")
    assert second.get(timeout=1) == ("b", "x")


def test_then_on_ready_future_runs_on_loop():
    with EventLoop(1) as loop:
        p = Promise(loop)
        p.set_value("ready")
        chained = p.future().then(lambda v: (v, threading.get_ident()))
        value, ident = chained.get(timeout=5)
    assert value == "ready"
    assert ident != threading.get_ident()


def test_then_on_ready_future_without_loop_runs_inline():
    p = Promise()
    p.set_value("now")
    assert p.future().then(lambda v: [v]).get(timeout=1) == ["now"]


def test_then_on_failed_ready_future_raises_immediately():
    with EventLoop(1) as loop:
        p = Promise(loop)
        p.set_exception(LookupError("gone"))
        with pytest.raises(LookupError, match="gone"):
            p.future().then(lambda v: v)


def test_yield_until_ready_drives_loop_from_caller():
    with EventLoop(1) as loop:
        gate = _block_worker(loop)
        try:
            future = loop.run(lambda: threading.get_ident())
            assert future.yield_until_ready() == threading.get_ident()
        finally:
            gate.set()


def test_yield_until_ready_without_loop_returns_value():
    p = Promise()
    p.set_value("plain")
    assert p.future().yield_until_ready() == "plain"


def test_yield_until_ready_raises_task_exception():
    with EventLoop(1) as loop:
        def fail():
            raise OSError("io")

        with pytest.raises(OSError, match="io"):
            loop.run(fail).yield_until_ready()
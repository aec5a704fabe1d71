# loopworks

A small event loop that runs tasks on a pool of worker threads. Each task
returns a future. You can chain another task onto that future, block on it, or
let the calling thread run the loop's pending work until the future is ready.

The package uses only the standard library.

## Install

```
pip install loopworks
```

## The loop

```python
from loopworks.loop import EventLoop

with EventLoop(4) as loop:
    answer = loop.run(lambda a, b: a + b, 2, 3)
    print(answer.get())            # 5

    later = loop.run_later(500, lambda: 5).then(lambda a: 3.5 + a)
    print(later.get())             # 8.5
```

`loopworks.loop.EventLoop(num_threads=1)` starts its worker threads as soon as it
is created. The threads are daemon threads. A count of zero or less raises
`ValueError`.

- `run(fn, *args, **kwargs)` adds `fn(*args, **kwargs)` to the task queue and
  returns a `Future` for its result.
- `run_later(delay_ms, fn, *args, **kwargs)` does the same, but the task runs
  only after `delay_ms` milliseconds have passed.
- Both raise `RuntimeError` once the loop has been stopped.
- Workers take a timer that is due before a queued task. Timers that are due
  run in deadline order, and timers with the same deadline run in the order
  they were scheduled.
- `process_pending()` runs one task that is ready, on the calling thread. It
  returns `True` if it ran one and `False` if nothing was ready.
- `running` is `True` until the loop is stopped.
- `stop()` stops the loop from accepting work and lets the workers exit. Tasks
  still queued at that point never run, so their futures never complete.
- `close()` calls `stop()` and then joins the workers. If the loop is the
  default loop, `close()` also clears the default. Leaving a `with` block calls
  `close()`.

## Futures and promises

`loopworks.futures.Future` is the object that `run` and `run_later` return.

- `get(timeout=None)` blocks until the future is done and returns its value.
  If the task raised an exception, `get` raises that same exception. If the
  timeout runs out first, it raises `TimeoutError`.
- `done()` returns whether the future has a value or an exception.
- `wait(timeout=None)` blocks until the future is done or the timeout runs out.
  It returns whether the future is done.
- `then(fn)` returns a new future for `fn(value)`.
  - If this future is still pending, `fn` runs on the thread that completes
    it. An exception raised by this future or by `fn` is stored in the new
    future.
  - If this future is already done, `fn` is queued on its loop. In this case
    an exception stored in this future is raised right away by `then`.
- `yield_until_ready()` runs the loop's pending tasks on the calling thread
  until the future is done, then returns the value as `get()` would. A task can
  therefore wait for other tasks even on a loop with a single worker.

`loopworks.futures.Promise(loop=None)` is the producing side. Pass
`promise.future()` to whoever needs the result. Complete it with
`set_value(value)` or `set_exception(exc)`. Completing a promise a second time
raises `concurrent.futures.InvalidStateError`. `set_exception` raises
`TypeError` for anything that is not an exception instance.

A future created without a loop still works. `then` on a finished future runs
`fn` at once on the calling thread. `yield_until_ready` simply blocks.

## A default loop for the process

```python
from loopworks.loop import EventLoop, set_default_loop, run, run_later

loop = EventLoop(2)
set_default_loop(loop)
run(print, "Hello World!").get()
run_later(100, print, "a little later").get()
loop.close()          # also clears the default
```

- `set_default_loop(loop)` takes an `EventLoop` or `None`. Anything else
  raises `TypeError`.
- `default_loop()` returns the current default loop, or `None`.
- The module-level `run` and `run_later` raise `RuntimeError` when no default
  loop is set.

## Demo

```
loopworks-demo [hello|cooperative|all]
```

The command runs the demonstrations in `loopworks.examples`. The default is
`all`.

- `hello` uses `hello_chain`. It runs tasks on the default loop, chains a
  follow-up onto a task delayed by one second, and prints
  `Final result: 8.5`.
- `cooperative` uses `cooperative_tasks` on a single-worker loop. From inside
  one task it starts two `slow_task` counters. It then drives them with
  `yield_until_ready`.
"""Small demonstrations of the event loop."""

from __future__ import annotations

import argparse
import os
import sys
from typing import Optional, Sequence, TextIO

from loopworks.futures import Future
from loopworks.loop import EventLoop, default_loop, run, run_later, set_default_loop


def hello_chain(loop: EventLoop, out: TextIO) -> float:
    """Run tasks on the default loop, chain one after a delay and return its result."""
    previous = default_loop()
    set_default_loop(loop)
    try:
        def first() -> int:
            print("Hello World! (1)", file=out)
            return 5

        def third() -> int:
            print("Hello World! (3)", file=out)
            return 5

        def finish(a: int) -> float:
            print("its over now :)", file=out)
            return 3.5 + a

        first_done = run(first)
        second_done = run(print, "Hello World! (2)", file=out)
        result = run_later(1000, third).then(finish).get()
        first_done.wait()
        second_done.wait()
        return result
    finally:
        set_default_loop(previous)


def slow_task(loop: EventLoop, out: TextIO) -> Future:
    """Queue a task that counts to 1000, printing every hundredth number."""

    def count() -> None:
        for i in range(1000):
            if i % 100 == 0:
                print(i, file=out)

    return loop.run(count)


def cooperative_tasks(loop: EventLoop, out: TextIO) -> None:
    """From inside a task, start two more and drive them by yielding to the loop."""

    def outer() -> None:
        task_a = slow_task(loop, out)
        task_b = slow_task(loop, out)
        task_a.yield_until_ready()
        task_b.yield_until_ready()

    loop.run(outer).get()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run the event loop demonstrations.")
    parser.add_argument(
        "example",
        nargs="?",
        default="all",
        choices=["hello", "cooperative", "all"],
        help="which demonstration to run",
    )
    args = parser.parse_args(argv)
    out = sys.stdout

    if args.example in ("hello", "all"):
        with EventLoop(os.cpu_count() or 1) as loop:
            result = hello_chain(loop, out)
        print(f"Final result: {result:g}", file=out)

    if args.example in ("cooperative", "all"):
        with EventLoop(1) as loop:
            cooperative_tasks(loop, out)

    return 0


if __name__ == "__main__":
    sys.exit(main())
"""Deadline enforcement for in-process fragment execution.

The fragment runs on a daemon thread and the caller stops waiting once the
deadline passes.  Python cannot kill a thread: an overrunning fragment keeps
running in the background until it returns, though it no longer holds the
interpreter open at exit.  The subprocess strategy is the one that really
stops a runaway fragment.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any


class TimeoutExpired(TimeoutError):
    """A call did not return before its deadline.

    Attributes:
        timeout: The deadline in seconds
        elapsed: How long the caller waited
        operation: What was being run (a fragment filename)
    """

    def __init__(self, timeout: float, elapsed: float | None = None, operation: str = "operation"):
        self.timeout = timeout
        self.elapsed = elapsed
        self.operation = operation
        msg = f"Operation '{operation}' timed out after {timeout}s"
        if elapsed is not None:
            msg += f" (ran for {elapsed:.2f}s)"
        super().__init__(msg)


def run_with_timeout[T](
    func: Callable[..., T],
    timeout_seconds: float,
    operation: str | None = None,
    args: tuple[Any, ...] = (),
    kwargs: dict[str, Any] | None = None,
) -> T:
    """Call ``func(*args, **kwargs)`` and return its result, or raise
    :class:`TimeoutExpired` after ``timeout_seconds``.

    Exceptions raised by ``func`` propagate to the caller unchanged.
    """
    if timeout_seconds <= 0:
        raise ValueError(f"Timeout must be positive, got {timeout_seconds}")

    outcome: dict[str, Any] = {}

    def target() -> None:
        try:
            outcome["value"] = func(*args, **(kwargs or {}))
        except BaseException as exc:  # re-raised on the caller's thread
            outcome["error"] = exc

    name = operation or getattr(func, "__name__", "operation")
    started = time.monotonic()
    worker = threading.Thread(target=target, name=f"slotrun-fragment:{name}", daemon=True)
    worker.start()
    worker.join(timeout_seconds)

    if worker.is_alive():
        raise TimeoutExpired(timeout_seconds, elapsed=time.monotonic() - started, operation=name)
    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]

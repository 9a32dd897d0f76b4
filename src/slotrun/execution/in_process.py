"""
In-process fragment execution.

A fragment is compiled as the body of a function, so a top-level
``return`` hands a value back::

    total = int(params.get("n", "3")) * 2
    print("doubling")
    return total                     # output: "doubling\\n6"

Names injected into the fragment's globals:

- ``params``: read-only mapping of the batch's named parameters
- ``print``: the builtin, but writing into this call's output buffer
- ``echo(*parts)``: writes the parts with no separator and no newline

Everything else is plain Python with full builtins; there is no sandbox.
Writes to ``sys.stdout`` (``sys.stdout.write``, ``csv.writer(sys.stdout)``)
are captured too: ``sys.stdout`` is replaced by a router that sends each
write to the buffer of the call running on the current thread, and to the
original stream when no fragment is running.  Threads started by a fragment
do not inherit its buffer.

Guardrails:
    - Python warnings are captured with ``warnings.catch_warnings``, which
      mutates process-wide warning state.  Concurrent in-process runs may
      see each other's warnings.
    - ``from __future__`` imports and ``import *`` are not valid inside a
      function body and fail as a ``SyntaxError`` fault.
    - ``KeyboardInterrupt`` is not contained.

Tags:
    execution, exec, in-process, slotrun
"""

from __future__ import annotations

import ast
import builtins
import io
import sys
import threading
import warnings
from collections.abc import Iterable, Mapping
from contextvars import ContextVar
from types import CodeType, MappingProxyType
from typing import Any

from slotrun.core.logging import get_logger
from slotrun.execution.models import TIMEOUT, Diagnostic, FragmentFault, FragmentOutcome
from slotrun.execution.rendering import render_return_value
from slotrun.execution.timeout import TimeoutExpired, run_with_timeout

logger = get_logger(__name__)

FRAGMENT_FUNCTION = "__fragment__"

_call_output: ContextVar[io.StringIO | None] = ContextVar("slotrun_call_output", default=None)
_install_lock = threading.Lock()


class StdoutRouter:
    """Stand-in for ``sys.stdout`` that writes into the running fragment's buffer."""

    def __init__(self, fallback: Any):
        self.fallback = fallback

    def _target(self) -> Any:
        buffer = _call_output.get()
        return self.fallback if buffer is None else buffer

    def write(self, text: str) -> int:
        return self._target().write(text)

    def writelines(self, lines: Iterable[str]) -> None:
        self._target().writelines(lines)

    def flush(self) -> None:
        self._target().flush()

    def __getattr__(self, name: str) -> Any:
        return getattr(self.fallback, name)


def route_stdout() -> None:
    """Wrap the current ``sys.stdout`` in a :class:`StdoutRouter` unless it already is one."""
    with _install_lock:
        if sys.stdout is not None and not isinstance(sys.stdout, StdoutRouter):
            sys.stdout = StdoutRouter(sys.stdout)


def compile_fragment(source: str, filename: str = "<slot>") -> CodeType:
    """Compile fragment source into a module defining :data:`FRAGMENT_FUNCTION`.

    Line numbers of the fragment are preserved, so tracebacks point at the
    fragment's own lines.

    Raises:
        SyntaxError: If the source does not parse or is invalid in a function body
    """
    body = ast.parse(source, filename=filename, mode="exec").body
    wrapper = ast.parse(f"def {FRAGMENT_FUNCTION}():\n    pass\n", filename=filename)
    func = wrapper.body[0]
    if body:
        func.body = body
    ast.fix_missing_locations(wrapper)
    return compile(wrapper, filename, "exec")


def _fragment_globals(params: Mapping[str, str], buffer: io.StringIO) -> dict[str, Any]:
    def _print(*args: Any, sep: str | None = " ", end: str | None = "\n", file: Any = None, flush: bool = False) -> None:
        if file is None or file is sys.stdout:
            file = buffer
        builtins.print(*args, sep=sep, end=end, file=file, flush=flush)

    def echo(*parts: Any) -> None:
        buffer.write("".join(str(p) for p in parts))

    return {
        "__name__": "__slot__",
        "__builtins__": builtins,
        "params": MappingProxyType(dict(params)),
        "print": _print,
        "echo": echo,
    }


class InProcessStrategy:
    """Executes fragments inside the host interpreter.

    Args:
        timeout: Seconds to wait for a fragment, ``None`` for no limit
    """

    name = "in_process"

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout

    def execute(
        self,
        source: str,
        params: Mapping[str, str],
        *,
        filename: str = "<slot>",
    ) -> FragmentOutcome:
        if self.timeout is None:
            return self._run(source, params, filename)
        try:
            return run_with_timeout(
                self._run,
                self.timeout,
                operation=filename,
                args=(source, params, filename),
            )
        except TimeoutExpired as exc:
            logger.warning("fragment_timeout", fragment=filename, timeout=self.timeout)
            fault = FragmentFault(
                code=TIMEOUT,
                exception_type=type(exc).__name__,
                message=f"Fragment exceeded its {self.timeout}s time limit",
                file=filename,
            )
            return FragmentOutcome(diagnostics=(fault.as_diagnostic(),), fault=fault)

    def _run(self, source: str, params: Mapping[str, str], filename: str) -> FragmentOutcome:
        buffer = io.StringIO()
        fault: FragmentFault | None = None
        value: Any = None
        rendered = ""

        route_stdout()
        token = _call_output.set(buffer)
        try:
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always")
                try:
                    namespace = _fragment_globals(params, buffer)
                    exec(compile_fragment(source, filename), namespace)
                    value = namespace[FRAGMENT_FUNCTION]()
                    rendered = render_return_value(value)
                except (Exception, SystemExit) as exc:
                    fault = FragmentFault.from_exception(exc, filename=filename)
        finally:
            _call_output.reset(token)

        diagnostics = [Diagnostic.from_warning(w) for w in caught]
        if fault is not None:
            diagnostics.append(fault.as_diagnostic())
            return FragmentOutcome(output=buffer.getvalue(), diagnostics=tuple(diagnostics), fault=fault)

        return FragmentOutcome(
            output=buffer.getvalue(),
            return_text=rendered,
            has_return=value is not None,
            return_value=value,
            diagnostics=tuple(diagnostics),
        )

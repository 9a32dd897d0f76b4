"""
Execution strategy interface.

The engine never evaluates fragment source itself; it hands the source and
the batch's named parameters to an :class:`ExecutionStrategy` and gets a
:class:`FragmentOutcome` back.  Parameters are passed explicitly per call
and are never written into shared state.

Isolation boundary, declared per implementation:

- ``in_process``: the fragment runs in the host interpreter with full
  builtins.  No isolation from the host.
- ``subprocess``: the fragment runs in a fresh interpreter.  Crashes and
  timeouts cannot take the host down, but the child still has the host
  user's filesystem and network access.

Tags:
    execution, strategy, protocol, slotrun
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from slotrun.core.errors import ConfigError
from slotrun.execution.models import FragmentOutcome

STRATEGIES = ("in_process", "subprocess")


@runtime_checkable
class ExecutionStrategy(Protocol):
    """Runs one fragment and reports what happened.

    Implementations must not raise for faults inside the fragment; those
    come back as ``FragmentOutcome.fault``.
    """

    name: str

    def execute(
        self,
        source: str,
        params: Mapping[str, str],
        *,
        filename: str = "<slot>",
    ) -> FragmentOutcome: ...


def build_strategy(name: str = "in_process", *, timeout: float | None = None) -> ExecutionStrategy:
    """Create the strategy registered under ``name``.

    Raises:
        ConfigError: For an unknown strategy name
    """
    if name == "in_process":
        from slotrun.execution.in_process import InProcessStrategy

        return InProcessStrategy(timeout=timeout)
    if name == "subprocess":
        from slotrun.execution.subprocess import SubprocessStrategy

        return SubprocessStrategy(timeout=timeout)
    raise ConfigError(f"Unknown execution strategy {name!r}; expected one of {', '.join(STRATEGIES)}")

"""
Fragment execution: strategies, result models and the batch engine.
"""

from slotrun.execution.engine import BatchEngine, archive_slug
from slotrun.execution.in_process import InProcessStrategy, compile_fragment
from slotrun.execution.models import (
    ArchiveInfo,
    BatchReport,
    Diagnostic,
    FragmentFault,
    FragmentOutcome,
    SlotFailure,
    SlotResult,
)
from slotrun.execution.rendering import render_return_value
from slotrun.execution.strategy import ExecutionStrategy, build_strategy
from slotrun.execution.subprocess import SubprocessStrategy
from slotrun.execution.timeout import TimeoutExpired, run_with_timeout

__all__ = [
    "ArchiveInfo",
    "BatchEngine",
    "BatchReport",
    "Diagnostic",
    "ExecutionStrategy",
    "FragmentFault",
    "FragmentOutcome",
    "InProcessStrategy",
    "SlotFailure",
    "SlotResult",
    "SubprocessStrategy",
    "TimeoutExpired",
    "archive_slug",
    "build_strategy",
    "compile_fragment",
    "render_return_value",
    "run_with_timeout",
]

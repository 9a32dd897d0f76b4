"""
Transport-agnostic operations.

Every function takes an :class:`OperationContext` and a typed request and
returns an :class:`OperationResult`.  The CLI and the HTTP API are thin
wrappers over this layer.
"""

from slotrun.ops.context import OperationContext
from slotrun.ops.result import OperationError, OperationResult, start_timer

__all__ = [
    "OperationContext",
    "OperationError",
    "OperationResult",
    "start_timer",
]

"""
Outcome envelope shared by every operation.

Operations never raise for expected conditions: they return an
:class:`OperationResult` that the CLI and the HTTP API render alike.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from slotrun.core.errors import ErrorCategory, SlotrunError


@dataclass(frozen=True, slots=True)
class OperationError:
    """Why an operation failed: ``code`` is what transports map to statuses."""

    code: str
    message: str
    category: ErrorCategory | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class OperationResult[T]:
    """Payload or error, plus warnings and timing.

    Build instances with :meth:`ok`, :meth:`fail` or :meth:`from_error`.
    """

    success: bool
    data: T | None = None
    error: OperationError | None = None
    warnings: list[str] = field(default_factory=list)
    elapsed_ms: float = 0.0

    @classmethod
    def ok(cls, data: T, *, warnings: list[str] | None = None, elapsed_ms: float = 0.0) -> OperationResult[T]:
        return cls(True, data=data, warnings=list(warnings or ()), elapsed_ms=elapsed_ms)

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        *,
        category: ErrorCategory | None = None,
        details: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
        elapsed_ms: float = 0.0,
    ) -> OperationResult[T]:
        error = OperationError(code, message, category, dict(details or {}))
        return cls(False, error=error, warnings=list(warnings or ()), elapsed_ms=elapsed_ms)

    @classmethod
    def from_error(cls, exc: SlotrunError, *, elapsed_ms: float = 0.0) -> OperationResult[T]:
        """Failed result carrying the code, category and context of ``exc``."""
        return cls.fail(
            exc.code,
            exc.message,
            category=exc.category,
            details=exc.context.to_dict(),
            elapsed_ms=elapsed_ms,
        )


@dataclass(slots=True)
class Stopwatch:
    started: float = field(default_factory=time.perf_counter)

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started) * 1000


def start_timer() -> Stopwatch:
    return Stopwatch()

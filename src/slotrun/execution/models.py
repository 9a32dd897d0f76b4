"""
Result models of fragment and batch execution.

Two layers:

- :class:`FragmentOutcome` is what an execution strategy hands back for one
  fragment run: captured output, rendered return value, diagnostics and an
  optional :class:`FragmentFault`.
- :class:`SlotResult` / :class:`BatchReport` are what the engine hands to
  transports.  Every ``SlotResult`` serializes with the same keys whether it
  succeeded or not.

All models are frozen dataclasses with ``to_dict()`` for JSON transports.

Tags:
    execution, results, diagnostics, slotrun
"""

from __future__ import annotations

import traceback
import warnings
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from slotrun.core.errors import ErrorCategory
from slotrun.core.timestamps import to_iso8601

EXECUTION_FAULT = "EXECUTION_FAULT"
TIMEOUT = "TIMEOUT"
SLOT_NOT_FOUND = "SLOT_NOT_FOUND"
INTERNAL = "INTERNAL"


# =============================================================================
# STRATEGY LEVEL
# =============================================================================


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A warning, notice or fault record produced while running one fragment.

    Attributes:
        kind: ``warning``, ``notice`` or ``exception``
        message: Human-readable text
        category: Warning class or exception type name
        file: Source file the record points at (``<set:slot>`` for fragments)
        line: Line number within ``file``
        trace: Formatted traceback, exceptions only
    """

    kind: str
    message: str
    category: str | None = None
    file: str | None = None
    line: int | None = None
    trace: str | None = None

    @classmethod
    def from_warning(cls, record: warnings.WarningMessage) -> Diagnostic:
        return cls(
            kind="warning",
            message=str(record.message),
            category=record.category.__name__,
            file=record.filename,
            line=record.lineno,
        )

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Diagnostic:
        return cls(**data)


@dataclass(frozen=True, slots=True)
class FragmentFault:
    """A fault raised by a fragment (or a deadline it overran)."""

    code: str
    exception_type: str
    message: str
    file: str | None = None
    line: int | None = None
    trace: str | None = None

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        *,
        code: str = EXECUTION_FAULT,
        filename: str | None = None,
    ) -> FragmentFault:
        """Describe ``exc``, locating it in ``filename`` when the traceback passes through it."""
        if isinstance(exc, SyntaxError):
            file, line = exc.filename, exc.lineno
        else:
            frames = traceback.extract_tb(exc.__traceback__)
            own = [f for f in frames if f.filename == filename]
            last = (own or frames or [None])[-1]
            file = last.filename if last else None
            line = last.lineno if last else None
        return cls(
            code=code,
            exception_type=type(exc).__name__,
            message=str(exc),
            file=file,
            line=line,
            trace="".join(traceback.format_exception(exc)),
        )

    def as_diagnostic(self) -> Diagnostic:
        return Diagnostic(
            kind="exception",
            message=f"{self.exception_type}: {self.message}",
            category=self.exception_type,
            file=self.file,
            line=self.line,
            trace=self.trace,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FragmentFault:
        return cls(**data)


@dataclass(frozen=True, slots=True)
class FragmentOutcome:
    """What an execution strategy returns for a single fragment run.

    ``output`` is the text the fragment printed; ``return_text`` is the
    rendered return value.  ``return_value`` is only populated by the
    in-process strategy; values do not cross process boundaries.
    """

    output: str = ""
    return_text: str = ""
    has_return: bool = False
    return_value: Any = None
    diagnostics: tuple[Diagnostic, ...] = ()
    fault: FragmentFault | None = None

    @property
    def ok(self) -> bool:
        return self.fault is None

    @property
    def text(self) -> str:
        """Captured output followed by the rendered return value."""
        return self.output + self.return_text

    def to_dict(self) -> dict[str, Any]:
        return {
            "output": self.output,
            "return_text": self.return_text,
            "has_return": self.has_return,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "fault": self.fault.to_dict() if self.fault else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FragmentOutcome:
        fault = data.get("fault")
        return cls(
            output=data.get("output", ""),
            return_text=data.get("return_text", ""),
            has_return=data.get("has_return", False),
            diagnostics=tuple(Diagnostic.from_dict(d) for d in data.get("diagnostics", [])),
            fault=FragmentFault.from_dict(fault) if fault else None,
        )


# =============================================================================
# BATCH LEVEL
# =============================================================================


@dataclass(frozen=True, slots=True)
class SlotFailure:
    """Error description attached to a failed slot result."""

    code: str
    category: str
    message: str
    exception_type: str | None = None

    @classmethod
    def from_fault(cls, fault: FragmentFault) -> SlotFailure:
        return cls(
            code=fault.code,
            category=ErrorCategory.EXECUTION.value,
            message=fault.message,
            exception_type=fault.exception_type,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class ArchiveInfo:
    """Where a slot's tabular output was archived."""

    slug: str
    path: str
    bytes: int
    stored: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"stored": self.stored, "bytes": self.bytes, "slug": self.slug, "path": self.path}


@dataclass(frozen=True, slots=True)
class SlotResult:
    """Outcome of one requested slot id.

    On failure ``output`` is ``None`` and ``error`` is set; ``diagnostics``
    is populated either way.
    """

    id: int
    output: str | None = None
    error: SlotFailure | None = None
    archive: ArchiveInfo | None = None
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "output": self.output,
            "error": self.error.to_dict() if self.error else None,
            "archive": self.archive.to_dict() if self.archive else None,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


@dataclass(frozen=True, slots=True)
class BatchReport:
    """All results of one batch, in ascending id order."""

    set: str
    ran_at: datetime
    results: tuple[SlotResult, ...] = field(default_factory=tuple)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)

    def to_dict(self) -> dict[str, Any]:
        return {
            "set": self.set,
            "ran_at": to_iso8601(self.ran_at),
            "results": [r.to_dict() for r in self.results],
        }

"""
Typed response objects for operations.

Each dataclass is the *output* payload of one or more operation functions.
Batch execution returns :class:`slotrun.execution.models.BatchReport`
directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ------------------------------------------------------------------ #
# Instruction sets and slots
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class SetSummary:
    """A set and the slot ids it holds."""

    name: str
    slot_ids: list[int] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SetChanged:
    """Outcome of creating or deleting a set."""

    name: str
    action: str
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class SlotCode:
    """The trimmed code of one slot."""

    set_name: str
    slot_id: int
    code: str


@dataclass(frozen=True, slots=True)
class SlotChanged:
    """Outcome of a single-slot edit.

    ``action`` is ``created``, ``updated`` or ``deleted``.
    """

    set_name: str
    slot_id: int
    action: str
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class BulkCreateResult:
    set_name: str
    created: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class BulkDeleteResult:
    set_name: str
    deleted: list[int] = field(default_factory=list)
    missing: list[int] = field(default_factory=list)
    dry_run: bool = False


# ------------------------------------------------------------------ #
# Content store
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class ArtifactLocation:
    """Where a slug lives (or would live) in the store."""

    slug: str
    path: str | None = None
    url: str | None = None
    exists: bool = False


@dataclass(frozen=True, slots=True)
class ArtifactMetadata:
    """Sidecar contents of a stored artifact."""

    slug: str
    path: str
    sidecar: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class StoreInitResult:
    root: str
    levels: int
    created: int
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class IngestOutcome:
    """One file of an ingestion run; ``error`` is set when it was skipped."""

    source: str
    slug: str | None = None
    path: str | None = None
    bytes: int | None = None
    error: str | None = None

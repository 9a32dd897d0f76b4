"""
Typed request objects for operations.

Each dataclass represents the *input* contract for a single operation
function.  Requests carry only transport-agnostic data: no raw HTTP
bodies, no Typer params.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

# ------------------------------------------------------------------ #
# Batch execution
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class RunBatchRequest:
    """Request for :func:`slotrun.ops.execute.run_batch`.

    Attributes:
        set_name: Instruction set, with or without ``.txt``.
        ids: Identifier expression such as ``"0,2-4"``.
        slot: Single id, used only when ``ids`` is empty.
        params: Named parameters, a mapping or ``key=value`` text.
    """

    set_name: str | None = None
    ids: str | None = None
    slot: str | int | None = None
    params: Mapping[str, str] | str | None = None


# ------------------------------------------------------------------ #
# Instruction sets and slots
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class CreateSetRequest:
    """Request for :func:`slotrun.ops.sets.create_set`."""

    name: str = ""


@dataclass(frozen=True, slots=True)
class SetRequest:
    """Addresses a whole set (delete, list slots)."""

    set_name: str = ""


@dataclass(frozen=True, slots=True)
class SlotRequest:
    """Addresses one slot (load, create, delete)."""

    set_name: str = ""
    slot_id: int | None = None


@dataclass(frozen=True, slots=True)
class SaveSlotRequest:
    """Request for :func:`slotrun.ops.sets.save_slot`."""

    set_name: str = ""
    slot_id: int | None = None
    code: str | None = None


@dataclass(frozen=True, slots=True)
class BulkSlotsRequest:
    """Bulk create/delete by identifier expression."""

    set_name: str = ""
    ids: str = ""


# ------------------------------------------------------------------ #
# Content store
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class SlugRequest:
    """Addresses one artifact by slug (path, url, meta)."""

    slug: str = ""
    base_url: str | None = None


@dataclass(frozen=True, slots=True)
class IngestRequest:
    """Request for :func:`slotrun.ops.store.ingest_files`."""

    paths: list[str] = field(default_factory=list)

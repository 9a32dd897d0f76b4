"""
Instruction-set administration operations.

Create, delete and list sets; load, save, create and delete slots, singly
or in bulk by identifier expression.  Every edit parses the set file into a
:class:`~slotrun.slots.document.SlotDocument`, edits the blocks and writes
the rendered text back, so untouched slots keep their exact text.

All mutating operations honour ``ctx.dry_run``: validation and lookups run
as usual, nothing is written.
"""

from __future__ import annotations

from collections.abc import Callable

from slotrun.core.errors import (
    ConflictError,
    InvalidIdentifiersError,
    MissingParameterError,
    SlotNotFoundError,
    SlotrunError,
)
from slotrun.core.logging import get_logger
from slotrun.ops.context import OperationContext
from slotrun.ops.requests import (
    BulkSlotsRequest,
    CreateSetRequest,
    SaveSlotRequest,
    SetRequest,
    SlotRequest,
)
from slotrun.ops.responses import (
    BulkCreateResult,
    BulkDeleteResult,
    SetChanged,
    SetSummary,
    SlotChanged,
    SlotCode,
)
from slotrun.ops.result import OperationResult, start_timer
from slotrun.slots.ids import resolve_ids
from slotrun.slots.repository import normalize_set_name, sanitize_set_name

logger = get_logger(__name__)


def _guarded[T](name: str, fn: Callable[[], T], timer) -> OperationResult[T]:
    """Run ``fn`` and wrap its outcome in an :class:`OperationResult`."""
    try:
        return OperationResult.ok(fn(), elapsed_ms=timer.elapsed_ms)
    except SlotrunError as exc:
        logger.info("op_rejected", op=name, code=exc.code, error=exc.message)
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", op=name, error=str(exc))
        return OperationResult.fail("INTERNAL", f"Failed to {name}: {exc}", elapsed_ms=timer.elapsed_ms)


def _require_slot_id(slot_id: int | None) -> int:
    if slot_id is None or slot_id < 0:
        raise MissingParameterError("A non-negative slot id is required")
    return slot_id


# ------------------------------------------------------------------ #
# Sets
# ------------------------------------------------------------------ #


def list_sets(ctx: OperationContext) -> OperationResult[list[str]]:
    """Sorted names of all instruction sets."""
    timer = start_timer()
    return _guarded("list sets", ctx.repository.list_sets, timer)


def create_set(ctx: OperationContext, request: CreateSetRequest) -> OperationResult[SetChanged]:
    """Create a set holding an empty slot 0.

    The name is sanitized to ``[A-Za-z0-9._-]`` and ``.txt`` is appended.
    """
    timer = start_timer()

    def _create() -> SetChanged:
        if not request.name or not request.name.strip():
            raise MissingParameterError("Set name is required")
        if ctx.dry_run:
            final = sanitize_set_name(request.name)
            if ctx.repository.exists(final):
                raise ConflictError(f"Set already exists: {final}").with_context(set_name=final)
            return SetChanged(name=final, action="created", dry_run=True)
        return SetChanged(name=ctx.repository.create(request.name), action="created")

    return _guarded("create set", _create, timer)


def delete_set(ctx: OperationContext, request: SetRequest) -> OperationResult[SetChanged]:
    timer = start_timer()

    def _delete() -> SetChanged:
        name = normalize_set_name(request.set_name)
        if ctx.dry_run:
            ctx.repository.read(name)
            return SetChanged(name=name, action="deleted", dry_run=True)
        ctx.repository.delete(name)
        return SetChanged(name=name, action="deleted")

    return _guarded("delete set", _delete, timer)


def list_slots(ctx: OperationContext, request: SetRequest) -> OperationResult[SetSummary]:
    """Sorted unique slot ids of one set."""
    timer = start_timer()

    def _list() -> SetSummary:
        name = normalize_set_name(request.set_name)
        return SetSummary(name=name, slot_ids=ctx.repository.load_document(name).ids())

    return _guarded("list slots", _list, timer)


# ------------------------------------------------------------------ #
# Single slots
# ------------------------------------------------------------------ #


def load_slot(ctx: OperationContext, request: SlotRequest) -> OperationResult[SlotCode]:
    timer = start_timer()

    def _load() -> SlotCode:
        slot_id = _require_slot_id(request.slot_id)
        name = normalize_set_name(request.set_name)
        code = ctx.repository.get_slot_code(name, slot_id)
        if code is None:
            raise SlotNotFoundError(f"Slot {slot_id} not found in set '{name}'").with_context(
                set_name=name, slot_id=slot_id
            )
        return SlotCode(set_name=name, slot_id=slot_id, code=code)

    return _guarded("load slot", _load, timer)


def save_slot(ctx: OperationContext, request: SaveSlotRequest) -> OperationResult[SlotChanged]:
    """Replace a slot's code, or append the slot if the set lacks it."""
    timer = start_timer()

    def _save() -> SlotChanged:
        slot_id = _require_slot_id(request.slot_id)
        if request.code is None:
            raise MissingParameterError("Slot code is required")
        name = normalize_set_name(request.set_name)
        doc = ctx.repository.load_document(name)
        replaced = doc.save(slot_id, request.code)
        if not ctx.dry_run:
            ctx.repository.save_document(name, doc)
            logger.info("slot_saved", set=name, slot=slot_id, replaced=replaced)
        return SlotChanged(
            set_name=name,
            slot_id=slot_id,
            action="updated" if replaced else "created",
            dry_run=ctx.dry_run,
        )

    return _guarded("save slot", _save, timer)


def create_slot(ctx: OperationContext, request: SlotRequest) -> OperationResult[SlotChanged]:
    """Append an empty slot; ``CONFLICT`` if the id is already present."""
    timer = start_timer()

    def _create() -> SlotChanged:
        slot_id = _require_slot_id(request.slot_id)
        name = normalize_set_name(request.set_name)
        doc = ctx.repository.load_document(name)
        if slot_id in doc:
            raise ConflictError(f"Slot {slot_id} already exists in '{name}'").with_context(
                set_name=name, slot_id=slot_id
            )
        doc.append(slot_id)
        if not ctx.dry_run:
            ctx.repository.save_document(name, doc)
            logger.info("slot_created", set=name, slot=slot_id)
        return SlotChanged(set_name=name, slot_id=slot_id, action="created", dry_run=ctx.dry_run)

    return _guarded("create slot", _create, timer)


def delete_slot(ctx: OperationContext, request: SlotRequest) -> OperationResult[SlotChanged]:
    """Remove the first block carrying the id; the file is re-trimmed."""
    timer = start_timer()

    def _delete() -> SlotChanged:
        slot_id = _require_slot_id(request.slot_id)
        name = normalize_set_name(request.set_name)
        doc = ctx.repository.load_document(name)
        if not doc.remove([slot_id], first_only=True):
            raise SlotNotFoundError(f"Slot {slot_id} not found in set '{name}'").with_context(
                set_name=name, slot_id=slot_id
            )
        if not ctx.dry_run:
            ctx.repository.save_document(name, doc, trimmed=True)
            logger.info("slot_deleted", set=name, slot=slot_id)
        return SlotChanged(set_name=name, slot_id=slot_id, action="deleted", dry_run=ctx.dry_run)

    return _guarded("delete slot", _delete, timer)


# ------------------------------------------------------------------ #
# Bulk
# ------------------------------------------------------------------ #


def _bulk_ids(request: BulkSlotsRequest) -> list[int]:
    ids = resolve_ids(request.ids)
    if not ids:
        raise InvalidIdentifiersError("No valid slot numbers provided.").with_context(expression=request.ids)
    return ids


def bulk_create_slots(ctx: OperationContext, request: BulkSlotsRequest) -> OperationResult[BulkCreateResult]:
    """Append an empty slot for every listed id the set does not have yet."""
    timer = start_timer()

    def _create() -> BulkCreateResult:
        name = normalize_set_name(request.set_name)
        ids = _bulk_ids(request)
        doc = ctx.repository.load_document(name)
        created: list[int] = []
        skipped: list[int] = []
        for slot_id in ids:
            if slot_id in doc:
                skipped.append(slot_id)
            else:
                doc.append(slot_id)
                created.append(slot_id)
        if created and not ctx.dry_run:
            ctx.repository.save_document(name, doc)
            logger.info("slots_created", set=name, created=len(created), skipped=len(skipped))
        return BulkCreateResult(set_name=name, created=created, skipped=skipped, dry_run=ctx.dry_run)

    return _guarded("bulk create slots", _create, timer)


def bulk_delete_slots(ctx: OperationContext, request: BulkSlotsRequest) -> OperationResult[BulkDeleteResult]:
    """Remove every block whose id is listed; ids not present are reported as missing."""
    timer = start_timer()

    def _delete() -> BulkDeleteResult:
        name = normalize_set_name(request.set_name)
        ids = _bulk_ids(request)
        doc = ctx.repository.load_document(name)
        deleted = doc.remove(ids)
        missing = [slot_id for slot_id in ids if slot_id not in deleted]
        if deleted and not ctx.dry_run:
            ctx.repository.save_document(name, doc, trimmed=True)
            logger.info("slots_deleted", set=name, deleted=len(deleted), missing=len(missing))
        return BulkDeleteResult(set_name=name, deleted=deleted, missing=missing, dry_run=ctx.dry_run)

    return _guarded("bulk delete slots", _delete, timer)

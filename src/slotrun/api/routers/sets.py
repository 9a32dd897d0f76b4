"""
Sets router: administer instruction sets and their slots.

Endpoints:
    GET    /sets                                  List set names
    POST   /sets                                  Create a set
    DELETE /sets/{set_name}                       Delete a set
    GET    /sets/{set_name}/slots                 List slot ids
    POST   /sets/{set_name}/slots/bulk-create     Create slots by expression
    POST   /sets/{set_name}/slots/bulk-delete     Delete slots by expression
    GET    /sets/{set_name}/slots/{slot_id}       Load slot code
    PUT    /sets/{set_name}/slots/{slot_id}       Save slot code
    POST   /sets/{set_name}/slots/{slot_id}       Create an empty slot
    DELETE /sets/{set_name}/slots/{slot_id}       Delete a slot

Every mutating endpoint accepts ``?dry_run=true``.

Tags:
    slotrun, api, sets, slots, admin
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Path, Request
from pydantic import BaseModel, Field

from slotrun.api.deps import OpContext
from slotrun.api.schemas.common import SuccessResponse
from slotrun.api.schemas.domains import (
    BulkCreateSchema,
    BulkDeleteSchema,
    SetChangedSchema,
    SetSummarySchema,
    SlotChangedSchema,
    SlotCodeSchema,
)
from slotrun.api.utils import _dc, _envelope, _handle_error
from slotrun.ops import sets as ops
from slotrun.ops.requests import BulkSlotsRequest, CreateSetRequest, SaveSlotRequest, SetRequest, SlotRequest

router = APIRouter(prefix="/sets")

SlotId = Annotated[int, Path(ge=0, description="Non-negative slot id")]


class CreateSetBody(BaseModel):
    name: str = Field(description="Set name; unsafe characters become '_' and '.txt' is appended")


class SaveSlotBody(BaseModel):
    code: str = Field(description="Slot code; trailing whitespace is dropped")


class BulkBody(BaseModel):
    ids: str = Field(description="Identifier expression, e.g. '10-15,20'")


# ── Sets ─────────────────────────────────────────────────────────────────


@router.get("", response_model=SuccessResponse[list[str]])
def list_sets(ctx: OpContext, request: Request):
    result = ops.list_sets(ctx)
    if not result.success:
        return _handle_error(result, request)
    return _envelope(result, result.data)


@router.post("", response_model=SuccessResponse[SetChangedSchema], status_code=201)
def create_set(ctx: OpContext, request: Request, body: CreateSetBody):
    """Create a set holding an empty slot 0.  409 if it exists."""
    result = ops.create_set(ctx, CreateSetRequest(name=body.name))
    if not result.success:
        return _handle_error(result, request)
    return _envelope(result, SetChangedSchema(**_dc(result.data)))


@router.delete("/{set_name}", response_model=SuccessResponse[SetChangedSchema])
def delete_set(ctx: OpContext, request: Request, set_name: str):
    result = ops.delete_set(ctx, SetRequest(set_name=set_name))
    if not result.success:
        return _handle_error(result, request)
    return _envelope(result, SetChangedSchema(**_dc(result.data)))


@router.get("/{set_name}/slots", response_model=SuccessResponse[SetSummarySchema])
def list_slots(ctx: OpContext, request: Request, set_name: str):
    result = ops.list_slots(ctx, SetRequest(set_name=set_name))
    if not result.success:
        return _handle_error(result, request)
    return _envelope(result, SetSummarySchema(**_dc(result.data)))


# ── Bulk (declared before /{slot_id} so the literal paths win) ───────────


@router.post("/{set_name}/slots/bulk-create", response_model=SuccessResponse[BulkCreateSchema])
def bulk_create_slots(ctx: OpContext, request: Request, set_name: str, body: BulkBody):
    """Create an empty slot for each listed id; existing ids are skipped."""
    result = ops.bulk_create_slots(ctx, BulkSlotsRequest(set_name=set_name, ids=body.ids))
    if not result.success:
        return _handle_error(result, request)
    return _envelope(result, BulkCreateSchema(**_dc(result.data)))


@router.post("/{set_name}/slots/bulk-delete", response_model=SuccessResponse[BulkDeleteSchema])
def bulk_delete_slots(ctx: OpContext, request: Request, set_name: str, body: BulkBody):
    """Delete every listed slot; ids not present are reported as missing."""
    result = ops.bulk_delete_slots(ctx, BulkSlotsRequest(set_name=set_name, ids=body.ids))
    if not result.success:
        return _handle_error(result, request)
    return _envelope(result, BulkDeleteSchema(**_dc(result.data)))


# ── Single slots ─────────────────────────────────────────────────────────


@router.get("/{set_name}/slots/{slot_id}", response_model=SuccessResponse[SlotCodeSchema])
def load_slot(ctx: OpContext, request: Request, set_name: str, slot_id: SlotId):
    result = ops.load_slot(ctx, SlotRequest(set_name=set_name, slot_id=slot_id))
    if not result.success:
        return _handle_error(result, request)
    return _envelope(result, SlotCodeSchema(**_dc(result.data)))


@router.put("/{set_name}/slots/{slot_id}", response_model=SuccessResponse[SlotChangedSchema])
def save_slot(ctx: OpContext, request: Request, set_name: str, body: SaveSlotBody, slot_id: SlotId):
    """Replace the slot's code, appending the slot if it does not exist."""
    result = ops.save_slot(ctx, SaveSlotRequest(set_name=set_name, slot_id=slot_id, code=body.code))
    if not result.success:
        return _handle_error(result, request)
    return _envelope(result, SlotChangedSchema(**_dc(result.data)))


@router.post("/{set_name}/slots/{slot_id}", response_model=SuccessResponse[SlotChangedSchema], status_code=201)
def create_slot(ctx: OpContext, request: Request, set_name: str, slot_id: SlotId):
    result = ops.create_slot(ctx, SlotRequest(set_name=set_name, slot_id=slot_id))
    if not result.success:
        return _handle_error(result, request)
    return _envelope(result, SlotChangedSchema(**_dc(result.data)))


@router.delete("/{set_name}/slots/{slot_id}", response_model=SuccessResponse[SlotChangedSchema])
def delete_slot(ctx: OpContext, request: Request, set_name: str, slot_id: SlotId):
    result = ops.delete_slot(ctx, SlotRequest(set_name=set_name, slot_id=slot_id))
    if not result.success:
        return _handle_error(result, request)
    return _envelope(result, SlotChangedSchema(**_dc(result.data)))

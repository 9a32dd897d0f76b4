"""
Execute router: run slots of an instruction set.

Endpoints:
    GET    /execute     Query-string form (``set``, ``cmds``, ``cmd``, ``params``)
    POST   /execute     JSON body form, ``params`` as object or ``key=value`` text

Batch-level failures (missing set, unknown set, no usable ids) are a
single Problem Details document.  Anything that goes wrong inside one slot
is reported in that slot's result and the response is still 200.

Tags:
    slotrun, api, execute, batch
"""

from __future__ import annotations

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel, Field

from slotrun.api.deps import OpContext
from slotrun.api.schemas.common import SuccessResponse
from slotrun.api.schemas.domains import BatchReportSchema
from slotrun.api.utils import _dc, _envelope, _handle_error
from slotrun.ops.execute import run_batch
from slotrun.ops.requests import RunBatchRequest

router = APIRouter(prefix="/execute")


class ExecuteBody(BaseModel):
    """Request body for ``POST /execute``.

    Example:
        {"set": "reports", "cmds": "0,2-4", "params": {"region": "emea"}}
    """

    set: str | None = Field(default=None, description="Instruction set name")
    cmds: str | None = Field(default=None, description="Identifier expression, e.g. '0,2-4'")
    cmd: int | str | None = Field(default=None, description="Single slot id, used when cmds is empty")
    params: dict[str, str] | str | None = Field(
        default=None,
        description="Named parameters as an object or 'key=value' lines",
    )


def _respond(ctx: OpContext, request: Request, batch: RunBatchRequest):
    result = run_batch(ctx, batch)
    if not result.success:
        return _handle_error(result, request)
    return _envelope(result, BatchReportSchema(**_dc(result.data)))


@router.get("", response_model=SuccessResponse[BatchReportSchema])
def execute_get(
    ctx: OpContext,
    request: Request,
    set: str | None = Query(None, description="Instruction set name"),
    cmds: str | None = Query(None, description="Identifier expression, e.g. '0,2-4'"),
    cmd: str | None = Query(None, description="Single slot id"),
    params: str | None = Query(None, description="Named parameters, 'key=value' per line or '&'-separated"),
):
    """Run the selected slots and return one result per id."""
    return _respond(ctx, request, RunBatchRequest(set_name=set, ids=cmds, slot=cmd, params=params))


@router.post("", response_model=SuccessResponse[BatchReportSchema])
def execute_post(ctx: OpContext, request: Request, body: ExecuteBody):
    """Run the selected slots; same semantics as ``GET /execute``."""
    return _respond(
        ctx,
        request,
        RunBatchRequest(set_name=body.set, ids=body.cmds, slot=body.cmd, params=body.params),
    )

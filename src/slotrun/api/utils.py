"""
Shared API router utilities.

- ``_dc()``: convert a dataclass or dict to a plain dict
- ``_handle_error()``: convert a failed OperationResult to a ``problem_response``
- ``_envelope()``: wrap a successful OperationResult in ``SuccessResponse``

Tags:
    slotrun, api, utils
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from slotrun.api.middleware.errors import problem_response, status_for_error_code
from slotrun.api.schemas.common import SuccessResponse
from slotrun.ops.result import OperationResult


def _dc(obj: Any) -> dict[str, Any]:
    """Convert a dataclass (or dict) to a plain dict.

    Objects with their own ``to_dict`` (batch reports) are serialized
    through it so their wire shape stays in one place.
    """
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    return obj if isinstance(obj, dict) else {}


def _handle_error(result: OperationResult, request: Request | None = None) -> JSONResponse:
    """Convert a failed ``OperationResult`` into a Problem Details response.

    The error code picks the HTTP status and travels in the body as
    ``code``; the message becomes the title.
    """
    code = result.error.code if result.error else "INTERNAL"
    return problem_response(
        status=status_for_error_code(code),
        title=result.error.message if result.error else "Operation failed",
        code=code,
        instance=request.url.path if request is not None else "",
    )


def _envelope(result: OperationResult, data: Any) -> SuccessResponse:
    return SuccessResponse(data=data, elapsed_ms=result.elapsed_ms, warnings=result.warnings)

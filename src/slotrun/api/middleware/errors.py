"""
Problem Details (RFC 7807) rendering for failed operations.

HTTP statuses follow the error category of each ``SlotrunError`` subclass,
so a new error class is mapped as soon as it declares its category.
"""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from slotrun.api.schemas.common import ProblemDetail
from slotrun.core.errors import ErrorCategory, SlotrunError
from slotrun.core.logging import get_logger

logger = get_logger(__name__)

CATEGORY_STATUS: dict[ErrorCategory, int] = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.CONFLICT: 409,
    ErrorCategory.RESOURCE: 507,
}


def _error_classes(root: type[SlotrunError] = SlotrunError):
    yield root
    for sub in root.__subclasses__():
        yield from _error_classes(sub)


ERROR_CODE_TO_STATUS: dict[str, int] = {
    cls.code: CATEGORY_STATUS.get(cls.default_category, 500) for cls in _error_classes()
}


def status_for_error_code(code: str) -> int:
    """HTTP status for an ops error code; unknown codes are server errors."""
    return ERROR_CODE_TO_STATUS.get(code, 500)


def problem_response(*, status: int, title: str, code: str = "INTERNAL", detail: str = "", instance: str = "") -> JSONResponse:
    body = ProblemDetail(title=title, status=status, code=code, detail=detail, instance=instance)
    return JSONResponse(status_code=status, content=body.model_dump())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: anything the ops layer did not contain becomes a 500 document."""
    logger.error("unhandled_exception", path=request.url.path, error=str(exc), exc_info=exc)
    debug = request.app.state.settings.debug
    return problem_response(
        status=500,
        title="Internal Server Error",
        detail=str(exc) if debug else "An unexpected error occurred.",
        instance=str(request.url),
    )

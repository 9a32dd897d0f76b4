"""Request tracing: one id per request, bound into logs and echoed back, plus timing.

``X-Request-ID`` is honoured when the client sends one.  Engine and store
events logged while the request is served carry the same ``request_id``.
"""

from __future__ import annotations

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from slotrun.core.logging import LogContext, get_logger

REQUEST_ID_HEADER = "X-Request-ID"
ELAPSED_HEADER = "X-Process-Time-Ms"

logger = get_logger(__name__)


class RequestTracingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()
        with LogContext(request_id=request_id):
            response = await call_next(request)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                elapsed_ms=elapsed_ms,
            )
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[ELAPSED_HEADER] = str(elapsed_ms)
        return response

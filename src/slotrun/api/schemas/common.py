"""
Response envelopes shared by every endpoint.

2xx bodies are :class:`SuccessResponse`; 4xx/5xx bodies are
:class:`ProblemDetail` (RFC 7807) extended with the ops error ``code``.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ProblemDetail(BaseModel):
    """RFC 7807 error body, used for batch-level ``/execute`` failures too.

    ``code`` is what clients branch on: ``SET_NOT_FOUND`` and ``INVALID_IDS``
    are both batch-level failures of ``/execute`` but need different handling.

    Example::

        {
            "type": "about:blank",
            "title": "Instruction set 'nope.txt' not found or not readable.",
            "status": 404,
            "code": "SET_NOT_FOUND",
            "detail": "",
            "instance": "/api/v1/execute"
        }
    """

    type: str = Field(default="about:blank", description="Error type URI")
    title: str = Field(description="Short summary, the ops error message")
    status: int = Field(description="HTTP status code")
    code: str = Field(default="INTERNAL", description="Machine-readable error code")
    detail: str = Field(default="", description="Longer explanation, if any")
    instance: str = Field(default="", description="Path of the failing request")


class SuccessResponse(BaseModel, Generic[T]):
    data: T = Field(description="Endpoint payload")
    elapsed_ms: float = Field(default=0.0, description="Time spent in the operation")
    warnings: list[str] = Field(default_factory=list, description="Non-fatal problems, e.g. files skipped during seeding")

"""
FastAPI dependency injection: shared singletons and per-request factories.

Usage in routers::

    from slotrun.api.deps import OpContext

    @router.get("/sets")
    def list_sets(ctx: OpContext):
        ...

Tags:
    slotrun, api, dependency-injection, OpContext
"""

from __future__ import annotations

import uuid
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Query, Request

from slotrun.api.settings import APISettings
from slotrun.ops.context import OperationContext

# ── Settings (singleton) ─────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_settings() -> APISettings:
    """Cached settings, loaded once per process."""
    return APISettings()


# ── Operation context (per-request) ──────────────────────────────────────


def get_operation_context(
    request: Request,
    settings: Annotated[APISettings, Depends(get_settings)],
    dry_run: bool = Query(False, description="Validate and report without writing anything"),
) -> OperationContext:
    """Build an :class:`OperationContext` from the current request.

    Instruction sets are re-read on every request; nothing is cached here.
    """
    request_id = getattr(request.state, "request_id", str(uuid.uuid4()))
    return OperationContext.from_settings(
        settings,
        caller="api",
        dry_run=dry_run,
        request_id=request_id,
    )


# ── Convenience type aliases ─────────────────────────────────────────────

Settings = Annotated[APISettings, Depends(get_settings)]
OpContext = Annotated[OperationContext, Depends(get_operation_context)]

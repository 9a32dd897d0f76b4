"""
Health router, mounted at the root (no prefix) for container probes.

Endpoints:
    GET    /health        Service status plus whether the data directories exist
    GET    /health/live   Liveness probe, always 200
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from slotrun.api.deps import Settings

router = APIRouter(prefix="/health")


@router.get("")
def health(settings: Settings) -> dict[str, Any]:
    sets_ok = settings.sets_dir.is_dir()
    store_ok = settings.store_root.is_dir()
    return {
        "status": "healthy" if sets_ok else "degraded",
        "service": "slotrun",
        "version": settings.api_version,
        "checks": {
            "sets_dir": {"path": str(settings.sets_dir), "exists": sets_ok},
            "store_root": {"path": str(settings.store_root), "exists": store_ok},
        },
    }


@router.get("/live")
def live() -> dict[str, str]:
    return {"status": "alive"}

"""
FastAPI application factory.

``create_app()`` is the only place that touches ``FastAPI`` directly: it
wires tracing and CORS middleware, the catch-all error handler, the health
router at the root and the execute, sets and store routers under
``api_prefix``.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from slotrun.api.deps import get_settings
from slotrun.api.middleware.errors import unhandled_exception_handler
from slotrun.api.middleware.tracing import RequestTracingMiddleware
from slotrun.api.settings import APISettings
from slotrun.core.errors import StorageError
from slotrun.core.logging import configure_logging, get_logger
from slotrun.slots.repository import InstructionSetRepository


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup / shutdown hooks."""
    settings: APISettings = app.state.settings
    configure_logging(level=settings.log_level, json_format=settings.json_logs)
    log = get_logger("slotrun.api")
    log.info(
        "api_starting",
        version=app.version,
        sets_dir=str(settings.sets_dir),
        store_root=str(settings.store_root),
        strategy=settings.execution_strategy,
    )

    try:
        InstructionSetRepository(settings.sets_dir).ensure_directory()
    except StorageError as exc:
        log.warning("sets_dir_unavailable", error=exc.message, path=str(settings.sets_dir))

    yield

    log.info("api_shutting_down")


def create_app(
    *,
    settings: APISettings | None = None,
) -> FastAPI:
    """Build the application; ``settings`` defaults to the cached :func:`get_settings`."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )

    # read by the error handler
    app.state.settings = settings

    # routers resolve settings through get_settings
    app.dependency_overrides[get_settings] = lambda: settings

    # ── Middleware ───────────────────────────────────────────────────
    app.add_middleware(RequestTracingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Errors ───────────────────────────────────────────────────────
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Routers ──────────────────────────────────────────────────────
    from slotrun.api.routers import execute, health, sets, store

    prefix = settings.api_prefix

    # health stays unprefixed
    app.include_router(health.router, tags=["health"])
    app.include_router(execute.router, prefix=prefix, tags=["execute"])
    app.include_router(sets.router, prefix=prefix, tags=["sets"])
    app.include_router(store.router, prefix=prefix, tags=["store"])

    return app

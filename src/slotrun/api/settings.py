"""
API-specific settings.

Extends :class:`~slotrun.core.settings.RuntimeSettings` with parameters
that govern the REST transport (bind address, prefix, CORS).  All values
can be overridden via ``SLOTRUN_``-prefixed environment variables.
"""

from __future__ import annotations

from pydantic import Field

from slotrun.core.settings import RuntimeSettings


class APISettings(RuntimeSettings):
    """Settings for the slotrun REST API.

    Order of precedence (highest → lowest):
        1. Environment variables (``SLOTRUN_API_PREFIX``, etc.)
        2. ``.env`` file
        3. Defaults below
    """

    # ── Server ───────────────────────────────────────────────────────────
    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=8000, description="Bind port")

    # ── API ──────────────────────────────────────────────────────────────
    api_prefix: str = Field(default="/api/v1", description="URL prefix for all endpoints")
    api_title: str = Field(default="slotrun API", description="OpenAPI title")
    api_version: str = Field(default="0.1.0", description="OpenAPI version string")

    # ── CORS ─────────────────────────────────────────────────────────────
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins",
    )

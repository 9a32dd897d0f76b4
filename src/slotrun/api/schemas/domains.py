"""
Domain response schemas: the JSON shapes of batch reports, sets, slots
and stored artifacts.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# ── Batch execution ──────────────────────────────────────────────────────


class DiagnosticSchema(BaseModel):
    kind: str = Field(description="'warning' | 'notice' | 'exception'")
    message: str
    category: str | None = None
    file: str | None = None
    line: int | None = None
    trace: str | None = None


class SlotErrorSchema(BaseModel):
    code: str = Field(description="SLOT_NOT_FOUND | EXECUTION_FAULT | TIMEOUT | INTERNAL")
    category: str
    message: str
    exception_type: str | None = None


class ArchiveSchema(BaseModel):
    stored: bool = True
    bytes: int
    slug: str
    path: str


class SlotResultSchema(BaseModel):
    """One requested id.  Every result has all keys, failed or not."""

    id: int
    output: str | None = None
    error: SlotErrorSchema | None = None
    archive: ArchiveSchema | None = None
    diagnostics: list[DiagnosticSchema] = Field(default_factory=list)


class BatchReportSchema(BaseModel):
    set: str
    ran_at: str = Field(description="ISO-8601 UTC timestamp")
    results: list[SlotResultSchema]


# ── Sets and slots ───────────────────────────────────────────────────────


class SetSummarySchema(BaseModel):
    name: str
    slot_ids: list[int] = Field(default_factory=list)


class SetChangedSchema(BaseModel):
    name: str
    action: str
    dry_run: bool = False


class SlotCodeSchema(BaseModel):
    set_name: str
    slot_id: int
    code: str


class SlotChangedSchema(BaseModel):
    set_name: str
    slot_id: int
    action: str = Field(description="'created' | 'updated' | 'deleted'")
    dry_run: bool = False


class BulkCreateSchema(BaseModel):
    set_name: str
    created: list[int]
    skipped: list[int]
    dry_run: bool = False


class BulkDeleteSchema(BaseModel):
    set_name: str
    deleted: list[int]
    missing: list[int]
    dry_run: bool = False


# ── Content store ────────────────────────────────────────────────────────


class ArtifactLocationSchema(BaseModel):
    slug: str
    path: str | None = None
    url: str | None = None
    exists: bool = False


class ArtifactMetadataSchema(BaseModel):
    slug: str
    path: str
    sidecar: dict[str, Any] = Field(default_factory=dict)

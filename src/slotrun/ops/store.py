"""
Content store operations: path and URL lookups, sidecar metadata,
first-level initialization and ingestion of existing files.
"""

from __future__ import annotations

from pathlib import Path

from slotrun.core.errors import MissingParameterError, SlotrunError
from slotrun.core.logging import get_logger
from slotrun.ops.context import OperationContext
from slotrun.ops.requests import IngestRequest, SlugRequest
from slotrun.ops.responses import ArtifactLocation, ArtifactMetadata, IngestOutcome, StoreInitResult
from slotrun.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def _require_slug(request: SlugRequest) -> str:
    if not request.slug:
        raise MissingParameterError("Slug is required")
    return request.slug


def locate_artifact(ctx: OperationContext, request: SlugRequest) -> OperationResult[ArtifactLocation]:
    """Canonical path and URL of a slug.  Never creates directories."""
    timer = start_timer()
    try:
        slug = _require_slug(request)
        path = ctx.store.locate(slug, create_dirs=False)
        return OperationResult.ok(
            ArtifactLocation(
                slug=path.stem,
                path=str(path),
                url=ctx.store.url_for(slug, request.base_url),
                exists=path.is_file(),
            ),
            elapsed_ms=timer.elapsed_ms,
        )
    except SlotrunError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)


def artifact_metadata(ctx: OperationContext, request: SlugRequest) -> OperationResult[ArtifactMetadata]:
    """Sidecar contents of a stored artifact."""
    timer = start_timer()
    try:
        slug = _require_slug(request)
        sidecar = ctx.store.metadata(slug)
        path = ctx.store.locate(slug, create_dirs=False)
        return OperationResult.ok(
            ArtifactMetadata(slug=path.stem, path=str(path), sidecar=sidecar),
            elapsed_ms=timer.elapsed_ms,
        )
    except SlotrunError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    except ValueError as exc:
        logger.warning("sidecar_unreadable", slug=request.slug, error=str(exc))
        return OperationResult.fail("STORAGE_ERROR", f"Sidecar for {request.slug!r} is not valid JSON: {exc}")


def init_store(ctx: OperationContext) -> OperationResult[StoreInitResult]:
    """Create the 256 first-level shard directories."""
    timer = start_timer()
    root = str(ctx.store.root)
    if ctx.dry_run:
        missing = sum(1 for i in range(256) if not (ctx.store.root / f"{i:02x}").is_dir())
        return OperationResult.ok(
            StoreInitResult(root=root, levels=ctx.store.levels, created=missing, dry_run=True),
            elapsed_ms=timer.elapsed_ms,
        )
    try:
        created = ctx.store.init()
    except SlotrunError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)
    return OperationResult.ok(
        StoreInitResult(root=root, levels=ctx.store.levels, created=created),
        elapsed_ms=timer.elapsed_ms,
    )


def ingest_files(ctx: OperationContext, request: IngestRequest) -> OperationResult[list[IngestOutcome]]:
    """Move each listed file into the store.

    One file failing does not stop the others; its outcome carries the
    error and the envelope collects a warning for it.
    """
    timer = start_timer()
    if not request.paths:
        return OperationResult.fail("MISSING_PARAMETER", "At least one file is required", elapsed_ms=timer.elapsed_ms)

    outcomes: list[IngestOutcome] = []
    warnings: list[str] = []
    for raw in request.paths:
        source = Path(raw).expanduser()
        if ctx.dry_run:
            outcomes.append(IngestOutcome(source=raw, slug=source.stem))
            continue
        try:
            artifact = ctx.store.ingest(source.resolve())
        except SlotrunError as exc:
            outcomes.append(IngestOutcome(source=raw, error=exc.message))
            warnings.append(f"{raw}: {exc.message}")
            continue
        outcomes.append(
            IngestOutcome(source=raw, slug=artifact.slug, path=str(artifact.path), bytes=artifact.bytes)
        )

    return OperationResult.ok(outcomes, warnings=warnings, elapsed_ms=timer.elapsed_ms)

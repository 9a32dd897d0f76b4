"""
Store router: read-only lookups into the sharded content store.

Endpoints:
    GET    /store/path/{slug}   Canonical path (no directories created)
    GET    /store/url/{slug}    Public URL, ``?base=`` overrides the prefix
    GET    /store/meta/{slug}   Sidecar metadata of a stored artifact

Tags:
    slotrun, api, store
"""

from __future__ import annotations

from fastapi import APIRouter, Query, Request

from slotrun.api.deps import OpContext
from slotrun.api.schemas.common import SuccessResponse
from slotrun.api.schemas.domains import ArtifactLocationSchema, ArtifactMetadataSchema
from slotrun.api.utils import _dc, _envelope, _handle_error
from slotrun.ops.requests import SlugRequest
from slotrun.ops.store import artifact_metadata, locate_artifact

router = APIRouter(prefix="/store")


@router.get("/path/{slug}", response_model=SuccessResponse[ArtifactLocationSchema])
def artifact_path(ctx: OpContext, request: Request, slug: str):
    result = locate_artifact(ctx, SlugRequest(slug=slug))
    if not result.success:
        return _handle_error(result, request)
    return _envelope(result, ArtifactLocationSchema(**_dc(result.data)))


@router.get("/url/{slug}", response_model=SuccessResponse[ArtifactLocationSchema])
def artifact_url(
    ctx: OpContext,
    request: Request,
    slug: str,
    base: str | None = Query(None, description="URL prefix, defaults to the configured store base URL"),
):
    result = locate_artifact(ctx, SlugRequest(slug=slug, base_url=base))
    if not result.success:
        return _handle_error(result, request)
    return _envelope(result, ArtifactLocationSchema(**_dc(result.data)))


@router.get("/meta/{slug}", response_model=SuccessResponse[ArtifactMetadataSchema])
def artifact_meta(ctx: OpContext, request: Request, slug: str):
    result = artifact_metadata(ctx, SlugRequest(slug=slug))
    if not result.success:
        return _handle_error(result, request)
    return _envelope(result, ArtifactMetadataSchema(**_dc(result.data)))

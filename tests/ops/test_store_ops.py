"""Tests for slotrun.ops.store."""

import dataclasses
import json

from slotrun.ops import store as ops
from slotrun.ops.requests import IngestRequest, SlugRequest


class TestLocate:
    def test_locate_does_not_create(self, ctx):
        result = ops.locate_artifact(ctx, SlugRequest(slug="my report"))
        assert result.data.slug == "my_report"
        assert result.data.path.endswith("my_report.csv")
        assert result.data.url.startswith("/csv/")
        assert result.data.exists is False
        assert not ctx.store.root.exists()

    def test_custom_base(self, ctx):
        result = ops.locate_artifact(ctx, SlugRequest(slug="r", base_url="https://x.test/data"))
        assert result.data.url.startswith("https://x.test/data/")

    def test_invalid_slug(self, ctx):
        assert ops.locate_artifact(ctx, SlugRequest(slug="..")).error.code == "INVALID_SLUG"

    def test_missing_slug(self, ctx):
        assert ops.locate_artifact(ctx, SlugRequest()).error.code == "MISSING_PARAMETER"


class TestMetadata:
    def test_metadata(self, ctx):
        ctx.store.store("a,b", "r")
        result = ops.artifact_metadata(ctx, SlugRequest(slug="r"))
        assert result.data.sidecar["bytes"] == 3

    def test_not_found(self, ctx):
        assert ops.artifact_metadata(ctx, SlugRequest(slug="r")).error.code == "NOT_FOUND"

    def test_corrupt_sidecar(self, ctx):
        artifact = ctx.store.store("a,b", "r")
        artifact.path.with_suffix(".json").write_text("{not json")
        assert ops.artifact_metadata(ctx, SlugRequest(slug="r")).error.code == "STORAGE_ERROR"


class TestInit:
    def test_init(self, ctx):
        assert ops.init_store(ctx).data.created == 256

    def test_dry_run_counts_missing(self, ctx):
        (ctx.store.root / "00").mkdir(parents=True)
        result = ops.init_store(dataclasses.replace(ctx, dry_run=True))
        assert result.data.created == 255
        assert not (ctx.store.root / "01").exists()


class TestIngest:
    def test_ingest_files(self, ctx, tmp_path):
        good = tmp_path / "sales.csv"
        good.write_text("a,b\n")
        result = ops.ingest_files(ctx, IngestRequest(paths=[str(good), str(tmp_path / "missing.csv")]))
        assert result.success
        ok, bad = result.data
        assert ok.slug == "sales"
        assert ok.bytes == 4
        assert bad.error is not None
        assert len(result.warnings) == 1
        assert json.loads(ctx.store.sidecar_path(ctx.store.locate("sales")).read_text())["slug"] == "sales"

    def test_requires_paths(self, ctx):
        assert ops.ingest_files(ctx, IngestRequest()).error.code == "MISSING_PARAMETER"

    def test_dry_run_leaves_files(self, ctx, tmp_path):
        source = tmp_path / "sales.csv"
        source.write_text("x")
        result = ops.ingest_files(dataclasses.replace(ctx, dry_run=True), IngestRequest(paths=[str(source)]))
        assert result.data[0].slug == "sales"
        assert source.exists()

"""
CLI: ``slotrun store``: sharded CSV store commands.
"""

from __future__ import annotations

from typing import Annotated

import typer

from slotrun.cli.utils import make_context, output_result
from slotrun.ops import store as ops
from slotrun.ops.requests import IngestRequest, SlugRequest

app = typer.Typer(no_args_is_help=True)

JsonOut = Annotated[bool, typer.Option("--json")]


@app.command()
def init(
    ctx: typer.Context,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Count missing directories only.")] = False,
    json_out: JsonOut = False,
) -> None:
    """Create the 256 first-level shard directories (00..ff)."""
    output_result(ops.init_store(make_context(ctx, dry_run=dry_run)), as_json=json_out, title="Store init")


@app.command()
def seed(
    ctx: typer.Context,
    files: list[str] = typer.Argument(..., help="Files to move into the store."),
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Show slugs without moving files.")] = False,
    json_out: JsonOut = False,
) -> None:
    """Move existing files into the store under their stem as slug."""
    result = ops.ingest_files(make_context(ctx, dry_run=dry_run), IngestRequest(paths=files))
    output_result(result, as_json=json_out, title="Seeded")
    if result.warnings:
        raise typer.Exit(code=1)


@app.command()
def path(
    ctx: typer.Context,
    slug: str = typer.Argument(..., help="Artifact slug."),
    json_out: JsonOut = False,
) -> None:
    """Print the canonical file path of a slug."""
    result = ops.locate_artifact(make_context(ctx), SlugRequest(slug=slug))
    if json_out or not result.success:
        output_result(result, as_json=json_out)
        return
    typer.echo(result.data.path)


@app.command()
def url(
    ctx: typer.Context,
    slug: str = typer.Argument(..., help="Artifact slug."),
    base: str | None = typer.Argument(None, help="URL prefix; defaults to the configured base URL."),
    json_out: JsonOut = False,
) -> None:
    """Print the public URL of a slug."""
    result = ops.locate_artifact(make_context(ctx), SlugRequest(slug=slug, base_url=base))
    if json_out or not result.success:
        output_result(result, as_json=json_out)
        return
    typer.echo(result.data.url)


@app.command()
def meta(
    ctx: typer.Context,
    slug: str = typer.Argument(..., help="Artifact slug."),
    json_out: JsonOut = False,
) -> None:
    """Show the sidecar metadata of a stored artifact."""
    output_result(ops.artifact_metadata(make_context(ctx), SlugRequest(slug=slug)), as_json=json_out, title=slug)

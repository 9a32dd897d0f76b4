"""
CLI: ``slotrun sets``: instruction set and slot administration.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

from slotrun.cli.utils import fail, make_context, output_result
from slotrun.ops import sets as ops
from slotrun.ops.requests import BulkSlotsRequest, CreateSetRequest, SaveSlotRequest, SetRequest, SlotRequest

app = typer.Typer(no_args_is_help=True)

DryRun = Annotated[bool, typer.Option("--dry-run", help="Report what would change without writing.")]
JsonOut = Annotated[bool, typer.Option("--json")]


@app.command("list")
def list_sets(ctx: typer.Context, json_out: JsonOut = False) -> None:
    """List instruction set files."""
    output_result(ops.list_sets(make_context(ctx)), as_json=json_out, title="Sets")


@app.command()
def create(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="New set name."),
    dry_run: DryRun = False,
    json_out: JsonOut = False,
) -> None:
    """Create a set holding an empty slot 0."""
    result = ops.create_set(make_context(ctx, dry_run=dry_run), CreateSetRequest(name=name))
    output_result(result, as_json=json_out, title="Created")


@app.command()
def delete(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Set name."),
    dry_run: DryRun = False,
    json_out: JsonOut = False,
) -> None:
    """Delete a set file."""
    result = ops.delete_set(make_context(ctx, dry_run=dry_run), SetRequest(set_name=name))
    output_result(result, as_json=json_out, title="Deleted")


@app.command()
def slots(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Set name."),
    json_out: JsonOut = False,
) -> None:
    """List the slot ids of a set."""
    result = ops.list_slots(make_context(ctx), SetRequest(set_name=name))
    output_result(result, as_json=json_out, title=f"Slots: {name}")


@app.command()
def show(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Set name."),
    slot_id: int = typer.Argument(..., min=0, help="Slot id."),
    json_out: JsonOut = False,
) -> None:
    """Print the code of one slot."""
    result = ops.load_slot(make_context(ctx), SlotRequest(set_name=name, slot_id=slot_id))
    if json_out or not result.success:
        output_result(result, as_json=json_out)
        return
    typer.echo(result.data.code)


@app.command()
def save(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Set name."),
    slot_id: int = typer.Argument(..., min=0, help="Slot id."),
    code: str | None = typer.Option(None, "--code", "-c", help="Slot code."),
    file: Path | None = typer.Option(None, "--file", "-f", exists=True, dir_okay=False, help="Read code from a file."),
    dry_run: DryRun = False,
    json_out: JsonOut = False,
) -> None:
    """Replace a slot's code (from --code, --file or stdin), appending the slot if missing."""
    if code is not None and file is not None:
        fail("VALIDATION_FAILED", "Use either --code or --file, not both")
    if file is not None:
        code = file.read_text(encoding="utf-8")
    elif code is None:
        code = sys.stdin.read()

    request = SaveSlotRequest(set_name=name, slot_id=slot_id, code=code)
    result = ops.save_slot(make_context(ctx, dry_run=dry_run), request)
    output_result(result, as_json=json_out, title="Saved")


@app.command()
def add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Set name."),
    slot_id: int = typer.Argument(..., min=0, help="Slot id."),
    dry_run: DryRun = False,
    json_out: JsonOut = False,
) -> None:
    """Append an empty slot."""
    result = ops.create_slot(make_context(ctx, dry_run=dry_run), SlotRequest(set_name=name, slot_id=slot_id))
    output_result(result, as_json=json_out, title="Added")


@app.command()
def remove(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Set name."),
    slot_id: int = typer.Argument(..., min=0, help="Slot id."),
    dry_run: DryRun = False,
    json_out: JsonOut = False,
) -> None:
    """Remove the first slot with the given id."""
    result = ops.delete_slot(make_context(ctx, dry_run=dry_run), SlotRequest(set_name=name, slot_id=slot_id))
    output_result(result, as_json=json_out, title="Removed")


@app.command("bulk-add")
def bulk_add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Set name."),
    ids: str = typer.Argument(..., help="Identifier expression, e.g. '10-15,20'."),
    dry_run: DryRun = False,
    json_out: JsonOut = False,
) -> None:
    """Append an empty slot for every listed id not already present."""
    result = ops.bulk_create_slots(make_context(ctx, dry_run=dry_run), BulkSlotsRequest(set_name=name, ids=ids))
    output_result(result, as_json=json_out, title="Bulk add")


@app.command("bulk-remove")
def bulk_remove(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Set name."),
    ids: str = typer.Argument(..., help="Identifier expression, e.g. '10-15,20'."),
    dry_run: DryRun = False,
    json_out: JsonOut = False,
) -> None:
    """Remove every listed slot."""
    result = ops.bulk_delete_slots(make_context(ctx, dry_run=dry_run), BulkSlotsRequest(set_name=name, ids=ids))
    output_result(result, as_json=json_out, title="Bulk remove")

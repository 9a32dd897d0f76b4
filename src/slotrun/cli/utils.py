"""
CLI utility helpers: settings lookup, context construction and output.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from slotrun.core.errors import SlotrunError
from slotrun.core.settings import RuntimeSettings
from slotrun.ops.context import OperationContext
from slotrun.ops.result import OperationResult

console = Console()
err_console = Console(stderr=True)


# ── Context helpers ──────────────────────────────────────────────────────


def current_settings(ctx: typer.Context | None = None) -> RuntimeSettings:
    """Settings built by the root callback, or fresh ones from the environment."""
    root = ctx.find_root() if ctx is not None else None
    if root is not None and isinstance(root.obj, RuntimeSettings):
        return root.obj
    return RuntimeSettings()


def make_context(
    ctx: typer.Context | None = None,
    *,
    dry_run: bool = False,
) -> OperationContext:
    """Create an ``OperationContext`` for a CLI command."""
    settings = current_settings(ctx)
    try:
        return OperationContext.from_settings(settings, caller="cli", dry_run=dry_run)
    except SlotrunError as exc:
        fail(exc.code, exc.message)


def fail(code: str, message: str) -> NoReturn:
    err_console.print(f"[bold red]Error[/bold red] ({code}): {escape(message)}")
    raise typer.Exit(code=1)


# ── Output helpers ───────────────────────────────────────────────────────


def _to_dict(obj: Any) -> dict[str, Any]:
    """Convert a result object / dataclass / dict to a plain dict."""
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    return {"value": str(obj)}


def print_json(payload: Any) -> None:
    console.print_json(json.dumps(payload, default=str))


def output_result(
    result: OperationResult,
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render an ``OperationResult``; failures go to stderr with exit code 1."""
    if not result.success:
        err = result.error
        fail(err.code if err else "ERROR", err.message if err else "Unknown error")

    data = result.data

    if as_json:
        if isinstance(data, list | tuple):
            print_json([d if isinstance(d, str | int) else _to_dict(d) for d in data])
        else:
            print_json(_to_dict(data))
        return

    if isinstance(data, list):
        if not data:
            console.print("[dim]No items.[/dim]")
        elif isinstance(data[0], str | int):
            for item in data:
                console.print(str(item))
        else:
            _print_table(data, title=title)
    else:
        _print_dict(_to_dict(data), title=title)

    for warning in result.warnings:
        err_console.print(f"[yellow]Warning[/yellow]: {escape(warning)}")


# ── Private helpers ──────────────────────────────────────────────────────


def _print_table(items: list, *, title: str = "") -> None:
    first = _to_dict(items[0])
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in first:
        table.add_column(col, overflow="fold")
    for item in items:
        table.add_row(*("" if v is None else escape(str(v)) for v in _to_dict(item).values()))
    console.print(table)


def _print_dict(data: dict[str, Any], *, title: str = "") -> None:
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {escape(str(v))}")

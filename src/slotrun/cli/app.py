"""
Root Typer application for the slotrun CLI.

``slotrun run`` executes a batch; the ``sets``, ``store`` and ``serve``
sub-applications administer instruction sets, the content store and the
HTTP server.
"""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError as SettingsValidationError
from rich.markup import escape
from rich.table import Table

from slotrun.cli.utils import console, current_settings, err_console, fail, make_context, print_json
from slotrun.core.logging import configure_logging
from slotrun.core.settings import RuntimeSettings
from slotrun.execution.models import BatchReport

app = typer.Typer(
    name="slotrun",
    help="slotrun: run numbered code fragments from instruction sets.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("slotrun")
        except PackageNotFoundError:
            from slotrun import __version__ as v
        typer.echo(f"slotrun {v}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    data_dir: Path | None = typer.Option(None, "--data-dir", "-d", help="Base data directory."),
    strategy: str | None = typer.Option(None, "--strategy", help="in_process or subprocess."),
    timeout: float | None = typer.Option(None, "--timeout", help="Per-slot timeout in seconds."),
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR."),
    json_logs: bool | None = typer.Option(None, "--json-logs/--console-logs", help="Log format."),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """slotrun CLI: run slots, manage instruction sets and the CSV store."""
    overrides = {
        "data_dir": data_dir,
        "execution_strategy": strategy,
        "slot_timeout": timeout,
        "log_level": log_level,
        "json_logs": json_logs,
    }
    try:
        settings = RuntimeSettings(**{k: v for k, v in overrides.items() if v is not None})
    except SettingsValidationError as exc:
        fail("CONFIG_ERROR", str(exc))
    configure_logging(level=settings.log_level, json_format=settings.json_logs)
    ctx.obj = settings


# ── run ──────────────────────────────────────────────────────────────────


def _print_report(report: BatchReport) -> None:
    table = Table(title=f"{report.set} @ {report.ran_at:%Y-%m-%d %H:%M:%S}", pad_edge=False)
    table.add_column("id", justify="right")
    table.add_column("status", no_wrap=True)
    table.add_column("output", overflow="fold")
    table.add_column("archive", overflow="fold")
    for r in report.results:
        if r.error is not None:
            status = f"[red]{r.error.code}[/red]"
            body = r.error.message
        else:
            status = "[green]ok[/green]"
            body = r.output or ""
        archive = r.archive.slug if r.archive is not None else ""
        table.add_row(str(r.id), status, escape(body), archive)
    console.print(table)
    for r in report.results:
        for diag in r.diagnostics:
            err_console.print(f"[yellow]{diag.kind}[/yellow] slot {r.id}: {escape(diag.message)}")


@app.command("run")
def run(
    ctx: typer.Context,
    set_name: str = typer.Argument(..., metavar="SET", help="Instruction set name."),
    ids: str = typer.Argument(..., metavar="IDS", help="Slot ids, e.g. '1,3,10-12'."),
    params: list[str] | None = typer.Argument(None, metavar="[KEY=VALUE]...", help="Named parameters."),
    json_out: bool = typer.Option(False, "--json", help="Print the batch report as JSON."),
) -> None:
    """Run the selected slots of an instruction set."""
    from slotrun.ops.execute import parse_cli_params
    from slotrun.ops.execute import run_batch as _run
    from slotrun.ops.requests import RunBatchRequest

    try:
        op_ctx = make_context(ctx)
        request = RunBatchRequest(set_name=set_name, ids=ids, params=parse_cli_params(params or []))
        result = _run(op_ctx, request)
    except typer.Exit:
        raise
    except Exception as exc:
        print_json({"set": set_name, "error": {"code": "INTERNAL", "message": str(exc)}})
        raise typer.Exit(code=1) from exc

    if not result.success:
        err = result.error
        if json_out:
            print_json({"set": set_name, "error": {"code": err.code, "message": err.message}})
            raise typer.Exit(code=1)
        fail(err.code, err.message)

    if json_out:
        print_json(result.data.to_dict())
    else:
        _print_report(result.data)


@app.command("settings")
def show_settings(ctx: typer.Context) -> None:
    """Show the effective runtime settings."""
    print_json(current_settings(ctx).model_dump(mode="json"))


# ── Sub-command registration ─────────────────────────────────────────────

from slotrun.cli.serve import serve  # noqa: E402
from slotrun.cli.sets import app as sets_app  # noqa: E402
from slotrun.cli.store import app as store_app  # noqa: E402

app.add_typer(sets_app, name="sets", help="Instruction set and slot administration.")
app.add_typer(store_app, name="store", help="Sharded CSV store.")
app.command("serve")(serve)

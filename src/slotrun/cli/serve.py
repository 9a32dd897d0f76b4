"""
CLI: ``slotrun serve``: start the API server.
"""

from __future__ import annotations

import typer
import uvicorn

from slotrun.cli.utils import console


def serve(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
    workers: int = typer.Option(1, "--workers", "-w", help="Number of workers"),
    log_level: str = typer.Option("info", "--log-level"),
) -> None:
    """Start the slotrun REST API server.

    Settings reach the app through ``SLOTRUN_*`` environment variables.
    """
    console.print(f"[bold green]Starting slotrun API[/bold green] on {host}:{port}")
    uvicorn.run(
        "slotrun.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

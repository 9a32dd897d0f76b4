"""Command-line interface (Typer)."""

from slotrun.cli.app import app

__all__ = ["app"]

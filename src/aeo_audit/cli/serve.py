"""CLI command for the audit API server."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from aeo_audit.cli._audit_helpers import setup_logging
from aeo_audit.core.config import load_config
from aeo_audit.core.serve.api import run_api

console = Console()


def register(app: typer.Typer) -> None:
    """Register the ``serve`` command on the given Typer app."""

    @app.command()
    def serve(
        port: int = typer.Option(
            8080, "--port", "-p", help="Port to listen on",
        ),
        host: str = typer.Option(
            "0.0.0.0", "--host", "-H", help="Host/interface to bind",
        ),
        config_path: Path = typer.Option(
            None, "--config", "-c", help="Path to a .aeo-audit.toml config file",
        ),
        debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    ) -> None:
        """Start the JSON audit API (POST /api/audit, GET /api/audit/{id})."""
        setup_logging(debug)
        cfg = load_config(config_path)
        console.print(
            f"[bold green]AEO audit API[/bold green] listening on "
            f"[cyan]{host}:{port}[/cyan]"
        )
        run_api(port=port, host=host, config=cfg)

"""Typer entry point for the ``aeo-audit`` command."""

from __future__ import annotations

import typer

from aeo_audit import __version__
from aeo_audit.cli import audit as audit_cmd
from aeo_audit.cli import serve as serve_cmd

app = typer.Typer(
    name="aeo-audit",
    help="Audit how well AI crawlers and answer engines can read a website.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"aeo-audit {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """AEO audit CLI."""


audit_cmd.register(app)
serve_cmd.register(app)

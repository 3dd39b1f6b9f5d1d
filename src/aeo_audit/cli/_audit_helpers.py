"""Extracted helper functions for the audit command."""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from aeo_audit.core.models import AEOImprovement, AuditResult, OutputFormat
from aeo_audit.formatters.csv import format_audit_csv
from aeo_audit.formatters.rich_output import (
    render_audit,
    render_improvements,
    render_recommendations,
)


def setup_logging(debug: bool = False) -> None:
    """Route library logs through Rich; WARNING by default, DEBUG with --debug."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _resolve_format(
    json_output: bool, format: OutputFormat | None, config_format: str | None
) -> OutputFormat | None:
    """--format wins, then --json, then the config file's ``format``."""
    if json_output and format is None:
        return OutputFormat.json
    if format is None and config_format is not None:
        try:
            return OutputFormat(config_format)
        except ValueError:
            return None
    return format


def _render_output(
    result: AuditResult,
    format: OutputFormat | None,
    *,
    verbose: bool,
    improvements: list[AEOImprovement] | None,
    console: Console,
) -> None:
    """Render the audit report in the requested format.

    JSON and CSV go straight to stdout so Rich never re-wraps them.
    """
    if format == OutputFormat.json:
        typer.echo(result.model_dump_json(indent=2))
        return
    if format == OutputFormat.csv:
        typer.echo(format_audit_csv(result), nl=False)
        return

    render_audit(result, console)
    if not verbose:
        return
    if improvements is not None:
        render_improvements(improvements, console)
    else:
        render_recommendations(result, console)

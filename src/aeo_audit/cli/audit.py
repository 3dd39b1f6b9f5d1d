"""Audit command: run a single-domain AEO audit."""

from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
import typer
from rich.console import Console

from aeo_audit.cli._audit_helpers import _render_output, _resolve_format, setup_logging
from aeo_audit.core.auditor import run_audit
from aeo_audit.core.config import load_config
from aeo_audit.core.entitlements import apply_limits, create_entitlement_context
from aeo_audit.core.errors import AuditError, user_message
from aeo_audit.core.models import AuditRequest, OutputFormat, Plan
from aeo_audit.core.redact import redact_audit
from aeo_audit.core.scoring import build_improvements

console = Console()


def register(app: typer.Typer) -> None:
    """Register the audit command onto the Typer app."""

    @app.command()
    def audit(
        domain: str = typer.Argument(help="Domain or URL to audit, e.g. example.com"),
        json_output: bool = typer.Option(
            False, "--json", help="Output raw JSON instead of Rich table"
        ),
        format: OutputFormat = typer.Option(
            None, "--format", "-f", help="Output format: json or csv"
        ),
        plan: Plan = typer.Option(
            Plan.free, "--plan", help="Render the report as seen on this plan"
        ),
        share: bool = typer.Option(
            False, "--share", help="Render the share-link view of the report"
        ),
        verbose: bool = typer.Option(
            False, "--verbose", "-v",
            help="Show recommendations (and the prioritized fix list on pro)",
        ),
        timeout: float = typer.Option(
            None, "--timeout", "-t", help="Overall audit deadline in seconds (default: 30)"
        ),
        config_path: Path = typer.Option(
            None, "--config", "-c", help="Path to a .aeo-audit.toml config file"
        ),
        debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    ) -> None:
        """Audit a domain for AI answer-engine readiness and display the results."""
        setup_logging(debug)
        cfg = load_config(config_path)
        if timeout is not None:
            cfg = cfg.model_copy(update={"audit_timeout": timeout})

        fmt = _resolve_format(json_output, format, cfg.format)
        effective_verbose = verbose or cfg.verbose

        try:
            with console.status(f"Auditing {domain}..."):
                result, checks = asyncio.run(run_audit(AuditRequest(domain=domain), config=cfg))
        except (AuditError, httpx.InvalidURL) as exc:
            console.print(f"[red]Error:[/red] {user_message(exc)}")
            raise SystemExit(1)

        context = create_entitlement_context(plan, is_share_link=share, is_owner=not share)
        result = redact_audit(apply_limits(result, plan), context)

        show_fixes = context.plan == Plan.pro and not context.is_share_link
        _render_output(
            result,
            fmt,
            verbose=effective_verbose,
            improvements=build_improvements(checks) if show_fixes else None,
            console=console,
        )

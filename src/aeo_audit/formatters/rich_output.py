"""Rich terminal rendering of audit reports."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from aeo_audit.core.models import AEOImprovement, AuditResult, CheckStatus
from aeo_audit.core.scoring import get_grade, score_message

_STATUS_STYLES = {
    CheckStatus.passed: ("PASS", "green"),
    CheckStatus.warning: ("WARN", "yellow"),
    CheckStatus.fail: ("FAIL", "red"),
}

_PRIORITY_STYLES = {
    "critical": "bold red",
    "high": "yellow",
    "medium": "cyan",
    "low": "dim",
}


def score_color(score: int) -> Text:
    """Return a Rich Text with a 0-100 score colored by threshold."""
    if score >= 80:
        style = "green"
    elif score >= 60:
        style = "yellow"
    else:
        style = "red"
    return Text(str(score), style=style)


def render_audit(result: AuditResult, console: Console) -> None:
    """Print the check table, overall score, grade and notes."""
    table = Table(title=f"AEO Audit: {result.audited_url}")
    table.add_column("Check", style="bold")
    table.add_column("Status")
    table.add_column("Score", justify="right")
    table.add_column("Summary")

    for check in result.checks:
        label, style = _STATUS_STYLES[check.status]
        table.add_row(check.label, Text(label, style=style), score_color(check.score),
                      check.summary)

    console.print(table)

    grade = get_grade(result.overall_score)
    console.print(
        f"\n[bold]Overall AEO Score:[/bold] [cyan]{result.overall_score}/100[/cyan]"
        f"  [bold]Grade:[/bold] {grade}"
    )
    console.print(f"[dim]{score_message(result.overall_score)}[/dim]")

    for note in result.notes:
        console.print(f"[blue]Note:[/blue] {note.message}")


def render_recommendations(result: AuditResult, console: Console) -> None:
    """Print the per-check recommendation the viewer is entitled to."""
    console.print("\n[bold]Recommendations[/bold]")
    for check in result.checks:
        console.print(f"  [bold]{check.label}:[/bold] {check.details.recommendation}")


def render_improvements(improvements: list[AEOImprovement], console: Console) -> None:
    """Print the prioritized improvement list."""
    if not improvements:
        console.print("\n[green]No improvements needed.[/green]")
        return

    table = Table(title="Improvements")
    table.add_column("Priority")
    table.add_column("Check")
    table.add_column("Fix")
    table.add_column("Gain", justify="right")
    table.add_column("Effort")
    for imp in improvements:
        table.add_row(
            Text(imp.priority, style=_PRIORITY_STYLES[imp.priority]),
            imp.check,
            imp.fix,
            f"+{imp.points_gain}",
            imp.effort,
        )
    console.print(table)

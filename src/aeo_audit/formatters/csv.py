"""CSV formatter for AEO audit reports."""

from __future__ import annotations

import csv
import io

from aeo_audit.core.models import AuditResult


def format_audit_csv(result: AuditResult) -> str:
    """Format an AuditResult as CSV: one row per check, then a summary block."""
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(["check_id", "label", "category", "status", "score", "summary",
                     "recommendation"])
    for check in result.checks:
        writer.writerow([
            check.id,
            check.label,
            check.metadata.category,
            check.status.value,
            check.score,
            check.summary,
            check.details.recommendation,
        ])

    # Summary row
    writer.writerow([])
    writer.writerow(["SUMMARY", "audited_url", "overall_score", "plan", "audited_at"])
    writer.writerow([
        result.audit_id,
        result.audited_url,
        result.overall_score,
        result.limits.plan.value,
        result.audited_at,
    ])

    return output.getvalue()

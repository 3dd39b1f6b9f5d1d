"""Entitlement-based redaction of audit reports.

``redact_audit`` never mutates its input; it builds a new ``AuditResult``.
"""

from __future__ import annotations

from aeo_audit.core.models import (
    AuditCheck,
    AuditCheckDetails,
    AuditNote,
    AuditResult,
    EntitlementContext,
    Plan,
)

SHARE_EXPLANATION = "Details are hidden in the share view."
SHARE_RECOMMENDATION = "Upgrade to unlock detailed recommendations."
FREE_RECOMMENDATION_FALLBACK = "Upgrade to unlock recommendations."
FREE_RECOMMENDATION_SUFFIX = "Upgrade to unlock the full recommendation."
PREVIEW_WORDS = 10


def tease_recommendation(text: str) -> str:
    """Shorten *text* to a preview of its first words plus an upgrade prompt."""
    words = text.split()
    if not words:
        return FREE_RECOMMENDATION_FALLBACK
    preview = " ".join(words[:PREVIEW_WORDS])
    ellipsis = "..." if len(words) > PREVIEW_WORDS else ""
    return f"Preview: {preview}{ellipsis} {FREE_RECOMMENDATION_SUFFIX}"


def _share_view(check: AuditCheck) -> AuditCheck:
    return check.model_copy(
        update={
            "details": AuditCheckDetails(
                explanation=SHARE_EXPLANATION,
                evidence=[],
                recommendation=SHARE_RECOMMENDATION,
            )
        }
    )


def _free_view(check: AuditCheck) -> AuditCheck:
    recommendation = check.details.recommendation
    if check.metadata.is_pro_only:
        recommendation = tease_recommendation(recommendation)
    return check.model_copy(
        update={
            "details": check.details.model_copy(
                update={"evidence": [], "recommendation": recommendation}
            )
        }
    )


def redact_audit(result: AuditResult, context: EntitlementContext) -> AuditResult:
    """Filter *result* down to what *context* is entitled to see.

    Share links drop checks that are not share-safe, mask the rest, and
    replace the notes with a single count note (or none). Free viewers lose
    evidence, and pro-only recommendations become previews. Pro owners see
    everything. Check order is preserved in every mode.
    """
    if context.is_share_link:
        checks = [_share_view(c) for c in result.checks if c.metadata.is_share_safe]
        hidden = len(result.checks) - len(checks)
        notes = (
            [AuditNote(type="info", message=f"{hidden} checks are hidden in the share view.")]
            if hidden
            else []
        )
        return result.model_copy(update={"checks": checks, "notes": notes})

    if context.plan != Plan.pro:
        checks = [_free_view(c) for c in result.checks]
        return result.model_copy(update={"checks": checks, "notes": list(result.notes)})

    return result.model_copy(
        update={"checks": list(result.checks), "notes": list(result.notes)}
    )

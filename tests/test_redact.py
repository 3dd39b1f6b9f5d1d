"""Tests for entitlement-based report redaction."""

from __future__ import annotations

from aeo_audit.core.models import (
    AuditCheck,
    AuditCheckDetails,
    AuditCheckMetadata,
    AuditNote,
    AuditResult,
    CheckStatus,
    EntitlementContext,
    Plan,
    VisibilitySummary,
)
from aeo_audit.core.redact import (
    FREE_RECOMMENDATION_FALLBACK,
    SHARE_EXPLANATION,
    SHARE_RECOMMENDATION,
    redact_audit,
    tease_recommendation,
)


def _check(
    check_id: str,
    *,
    pro_only: bool = False,
    share_safe: bool = True,
    recommendation: str = "Add canonical URL meta tag",
) -> AuditCheck:
    return AuditCheck(
        id=check_id,
        label=check_id.title(),
        status=CheckStatus.warning,
        score=50,
        summary=f"{check_id} summary",
        details=AuditCheckDetails(
            explanation="✓ one ✗ two",
            evidence=["✓ one", "✗ two"],
            recommendation=recommendation,
        ),
        metadata=AuditCheckMetadata(is_pro_only=pro_only, is_share_safe=share_safe),
    )


def _result(*checks: AuditCheck) -> AuditResult:
    return AuditResult(
        audit_id="a1",
        audited_url="https://example.com",
        audited_at="2026-01-01T00:00:00+00:00",
        overall_score=50,
        visibility_summary=VisibilitySummary(ai_visible_percentage=50, ai_invisible_percentage=50),
        checks=list(checks),
        notes=[AuditNote(message="original note")],
    )


# ── Share view ───────────────────────────────────────────────────────────────


def test_share_view_masks_details():
    result = _result(_check("ai_metadata"), _check("answer_format", pro_only=True))
    shared = redact_audit(result, EntitlementContext(is_share_link=True))

    assert [c.id for c in shared.checks] == ["ai_metadata", "answer_format"]
    for check in shared.checks:
        assert check.details.explanation == SHARE_EXPLANATION
        assert check.details.evidence == []
        assert check.details.recommendation == SHARE_RECOMMENDATION
        assert check.score == 50
        assert check.summary.endswith("summary")
    assert shared.notes == []


def test_share_view_drops_unsafe_checks_with_note():
    result = _result(
        _check("a"), _check("b", share_safe=False), _check("c", share_safe=False), _check("d")
    )
    shared = redact_audit(result, EntitlementContext(plan=Plan.pro, is_share_link=True))

    assert [c.id for c in shared.checks] == ["a", "d"]
    assert [n.message for n in shared.notes] == ["2 checks are hidden in the share view."]
    assert shared.overall_score == result.overall_score


# ── Free view ────────────────────────────────────────────────────────────────


def test_free_view_clears_evidence_and_teases_pro_only():
    long_rec = "Use <article>, <section>, <nav> semantic HTML tags for every single page section"
    result = _result(
        _check("ai_metadata"),
        _check("extractability", pro_only=True, recommendation=long_rec),
    )
    free = redact_audit(result, EntitlementContext(plan=Plan.free))

    metadata, extract = free.checks
    assert metadata.details.evidence == []
    assert metadata.details.explanation == "✓ one ✗ two"
    assert metadata.details.recommendation == "Add canonical URL meta tag"
    assert extract.details.recommendation.startswith(
        "Preview: Use <article>, <section>, <nav> semantic HTML tags for every single..."
    )
    assert extract.details.recommendation.endswith("Upgrade to unlock the full recommendation.")
    assert [n.message for n in free.notes] == ["original note"]


def test_tease_short_recommendation_has_no_ellipsis():
    assert tease_recommendation("Add HowTo schema") == (
        "Preview: Add HowTo schema Upgrade to unlock the full recommendation."
    )


def test_tease_empty_recommendation_falls_back():
    assert tease_recommendation("   ") == FREE_RECOMMENDATION_FALLBACK


# ── Pro view ─────────────────────────────────────────────────────────────────


def test_pro_owner_sees_everything():
    result = _result(_check("a", pro_only=True), _check("b", share_safe=False))
    pro = redact_audit(result, EntitlementContext(plan=Plan.pro, is_owner=True))

    assert pro == result
    assert pro is not result


def test_redaction_never_mutates_input():
    result = _result(_check("a", pro_only=True), _check("b", share_safe=False))
    before = result.model_dump()

    redact_audit(result, EntitlementContext(is_share_link=True))
    redact_audit(result, EntitlementContext(plan=Plan.free))

    assert result.model_dump() == before
    assert result.checks[0].details.evidence == ["✓ one", "✗ two"]

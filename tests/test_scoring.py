"""Tests for check mapping, overall score, grades and improvements."""

from __future__ import annotations

import pytest

from aeo_audit.core.models import (
    AIMetadataCheckResult,
    AnswerFormatCheckResult,
    CheckStatus,
    LlmsTxtCheckResult,
    RobotsCheckResult,
    StructuredDataCheckResult,
)
from aeo_audit.core.scoring import (
    CHECK_MAP,
    CHECK_WEIGHTS,
    NO_CHANGES_NEEDED,
    build_improvements,
    compute_overall_score,
    get_grade,
    map_check,
    round_half_up,
    score_message,
    status_for,
)


def _robots(score: int = 20, status: CheckStatus = CheckStatus.passed, **kw) -> RobotsCheckResult:
    return RobotsCheckResult(
        status=status,
        score=score,
        max_score=20,
        message=f"{score // 4}/5 AI crawlers allowed",
        robots_url="https://example.com/robots.txt",
        robots_accessible=True,
        **kw,
    )


def _llms(score: int = 0) -> LlmsTxtCheckResult:
    return LlmsTxtCheckResult(
        status=CheckStatus.fail if score == 0 else CheckStatus.passed,
        score=score,
        max_score=15,
        message="llms.txt not found" if score == 0 else "llms.txt found and valid",
        details=["✗ llms.txt missing"],
        recommendations=["Create /llms.txt with content policy, sitemap, and RSS references"],
        llms_url="https://example.com/llms.txt",
        llms_exists=score > 0,
    )


def test_weights_sum_to_one_hundred():
    assert sum(CHECK_WEIGHTS.values()) == 100
    assert set(CHECK_WEIGHTS) == set(CHECK_MAP)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(2.5, 3), (3.5, 4), (2.4999, 2), (0.0, 0), (66.66, 67)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_status_for_inclusive_boundaries():
    assert status_for(20, 20, 10) == CheckStatus.passed
    assert status_for(10, 20, 10) == CheckStatus.warning
    assert status_for(9, 20, 10) == CheckStatus.fail


# ── map_check ────────────────────────────────────────────────────────────────


def test_map_check_converts_to_percentage_and_copies_metadata():
    check = StructuredDataCheckResult(
        status=CheckStatus.warning,
        score=12,
        max_score=25,
        message="3/5 schema types found",
        details=["✓ BlogPosting", "✗ FAQPage"],
        recommendations=["", "Add FAQPage schema for FAQ content"],
    )
    public = map_check(check)

    assert public.id == "structured_data"
    assert public.label == "Structured Data"
    assert public.score == 48
    assert public.status == CheckStatus.warning
    assert public.summary == "3/5 schema types found"
    assert public.details.explanation == "✓ BlogPosting ✗ FAQPage"
    assert public.details.evidence == ["✓ BlogPosting", "✗ FAQPage"]
    assert public.details.recommendation == "Add FAQPage schema for FAQ content"
    assert public.metadata.is_pro_only is True
    assert public.metadata.category == "metadata"


def test_map_check_without_recommendations():
    check = AIMetadataCheckResult(
        status=CheckStatus.passed, score=10, max_score=10, message="10/10 metadata checks passed"
    )
    public = map_check(check)
    assert public.score == 100
    assert public.details.recommendation == NO_CHANGES_NEEDED
    assert public.metadata.is_pro_only is False


def test_map_check_rounds_half_up():
    check = AnswerFormatCheckResult(
        status=CheckStatus.fail, score=1, max_score=8, message="m"
    )
    # 12.5% -> 13
    assert map_check(check).score == 13


# ── Overall score ────────────────────────────────────────────────────────────


def test_overall_score_is_weighted_sum():
    checks = [_robots(20), _llms(0)]
    assert compute_overall_score(checks) == 20


def test_overall_score_partial_fractions():
    checks = [_robots(16, CheckStatus.warning), _llms(10)]
    # 16/20*20 + 10/15*15 = 16 + 10
    assert compute_overall_score(checks) == 26


def test_overall_score_empty():
    assert compute_overall_score([]) == 0


# ── Grades ───────────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    ("score", "grade"),
    [(100, "A"), (90, "A"), (89, "B"), (80, "B"), (70, "C"), (60, "D"), (59, "F"), (0, "F")],
)
def test_get_grade(score, grade):
    assert get_grade(score) == grade


def test_score_message_matches_grade():
    assert score_message(95).startswith("Excellent AI Search Readiness")
    assert score_message(10).startswith("Critical Issues")


# ── Improvements ─────────────────────────────────────────────────────────────


def test_improvements_skip_perfect_checks():
    assert build_improvements([_robots(20)]) == []


def test_improvements_are_prioritized():
    robots = _robots(
        16,
        CheckStatus.warning,
        recommendations=["Add explicit Allow rules for GPTBot, ClaudeBot, PerplexityBot"],
    )
    metadata = AIMetadataCheckResult(
        status=CheckStatus.passed,
        score=8,
        max_score=10,
        message="8/10 metadata checks passed",
        recommendations=["Add article:published_time meta tag"],
    )
    improvements = build_improvements([metadata, robots, _llms(0)])

    assert [imp.priority for imp in improvements] == ["critical", "high", "medium"]
    first = improvements[0]
    assert first.check == "llms-txt-validation"
    assert first.points_gain == 15
    assert first.effort == "complex"
    assert improvements[1].effort == "medium"
    assert improvements[2].effort == "quick"
    assert improvements[2].fix == "Add article:published_time meta tag"


def test_improvements_same_priority_sorted_by_gain():
    small = AnswerFormatCheckResult(
        status=CheckStatus.fail, score=8, max_score=10, message="m", recommendations=["a"]
    )
    big = _llms(0)
    improvements = build_improvements([small, big])
    assert [imp.points_gain for imp in improvements] == [15, 2]


def test_improvements_ignore_blank_recommendations():
    check = AnswerFormatCheckResult(
        status=CheckStatus.fail, score=0, max_score=10, message="m", recommendations=["", "fix"]
    )
    assert [imp.fix for imp in build_improvements([check])] == ["fix"]

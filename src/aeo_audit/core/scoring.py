"""Scoring constants, public check mapping, grades, and improvements."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple

from aeo_audit.core.models import (
    AEOCheckResult,
    AEOImprovement,
    AuditCheck,
    AuditCheckDetails,
    AuditCheckMetadata,
    CheckCategory,
    CheckStatus,
)

# ── Scoring Constants ────────────────────────────────────────────────────────
# Exported so verbose output can display the actual thresholds used.

CHECK_WEIGHTS: dict[str, int] = {
    "ai-crawler-accessibility": 20,
    "llms-txt-validation": 15,
    "structured-data-quality": 25,
    "content-extractability": 20,
    "ai-metadata": 10,
    "answer-format": 10,
}
"""Share of the 100-point overall score contributed by each check."""


class AICrawler(NamedTuple):
    user_agent: str
    name: str


AI_CRAWLERS: list[AICrawler] = [
    AICrawler("GPTBot", "OpenAI GPT"),
    AICrawler("ClaudeBot", "Anthropic Claude"),
    AICrawler("PerplexityBot", "Perplexity"),
    AICrawler("Googlebot-Extended", "Google AI"),
    AICrawler("CCBot", "CommonCrawl"),
]

ROBOTS_MAX: int = 20
ROBOTS_WARN_MIN_ALLOWED: int = 3

LLMS_TXT_MAX: int = 15
LLMS_TXT_PARTIAL: int = 10

SCHEMA_TYPES: list[str] = ["BlogPosting", "WebSite", "Person", "FAQPage", "HowTo"]
SCHEMA_VALID_POINTS: int = 5
SCHEMA_PRESENT_POINTS: int = 2
SCHEMA_MAX: int = 25
SCHEMA_PASS: int = 20
SCHEMA_WARN: int = 10

EXTRACTABILITY_SIGNAL_POINTS: int = 5
EXTRACTABILITY_PARTIAL_ALT_POINTS: int = 2
EXTRACTABILITY_MIN_TEXT_RATIO: float = 0.3
EXTRACTABILITY_MAX: int = 20
EXTRACTABILITY_PASS: int = 15
EXTRACTABILITY_WARN: int = 10

METADATA_CANONICAL_POINTS: int = 3
METADATA_OG_POINTS: int = 3
METADATA_DESCRIPTION_POINTS: int = 2
METADATA_LONG_DESCRIPTION_POINTS: int = 1
METADATA_DATE_POINTS: int = 2
METADATA_DESCRIPTION_MAX_CHARS: int = 160
METADATA_MAX: int = 10
METADATA_PASS: int = 8
METADATA_WARN: int = 5

ANSWER_FAQ_POINTS: int = 3
ANSWER_HOWTO_POINTS: int = 2
ANSWER_LIST_POINTS: int = 2
ANSWER_TABLE_POINTS: int = 2
ANSWER_DEFINITION_LIST_POINTS: int = 1
ANSWER_MIN_HEADERS: int = 8
ANSWER_MAX: int = 10
ANSWER_PASS: int = 7
ANSWER_WARN: int = 4


def round_half_up(value: float) -> int:
    """Round .5 upward, so 2.5 -> 3 (Python's ``round`` would give 2)."""
    return math.floor(value + 0.5)


def status_for(score: int, pass_at: int, warn_at: int) -> CheckStatus:
    """Map *score* to a status given inclusive pass/warning cut points."""
    if score >= pass_at:
        return CheckStatus.passed
    if score >= warn_at:
        return CheckStatus.warning
    return CheckStatus.fail


def mark(ok: bool) -> str:
    return "✓" if ok else "✗"


# ── Public check mapping ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class CheckMapping:
    id: str
    label: str
    category: CheckCategory
    pro_only: bool
    share_safe: bool


CHECK_MAP: dict[str, CheckMapping] = {
    "ai-crawler-accessibility": CheckMapping(
        "ai_crawler_access", "AI Crawler Access", "access", pro_only=False, share_safe=True
    ),
    "llms-txt-validation": CheckMapping(
        "llms_txt", "llms.txt", "access", pro_only=False, share_safe=True
    ),
    "structured-data-quality": CheckMapping(
        "structured_data", "Structured Data", "metadata", pro_only=True, share_safe=True
    ),
    "content-extractability": CheckMapping(
        "extractability", "Extractability", "structure", pro_only=True, share_safe=True
    ),
    "ai-metadata": CheckMapping(
        "ai_metadata", "AI Metadata", "metadata", pro_only=False, share_safe=True
    ),
    "answer-format": CheckMapping(
        "answer_format", "Answer Format", "content", pro_only=True, share_safe=True
    ),
}

NO_CHANGES_NEEDED = "No changes needed."


def map_check(check: AEOCheckResult) -> AuditCheck:
    """Convert an internal check result into its public report form."""
    mapping = CHECK_MAP.get(check.name)
    recommendation = next(
        (rec for rec in check.recommendations if rec.strip()), NO_CHANGES_NEEDED
    )
    return AuditCheck(
        id=mapping.id if mapping else check.name,
        label=mapping.label if mapping else check.name,
        status=check.status,
        score=round_half_up(check.score / check.max_score * 100),
        summary=check.message,
        details=AuditCheckDetails(
            explanation=" ".join(check.details),
            evidence=list(check.details),
            recommendation=recommendation,
        ),
        metadata=AuditCheckMetadata(
            is_share_safe=mapping.share_safe if mapping else True,
            is_pro_only=mapping.pro_only if mapping else False,
            category=mapping.category if mapping else "content",
        ),
    )


def compute_overall_score(checks: list[AEOCheckResult]) -> int:
    """Weighted sum of per-check fractions, rounded and clamped to 0-100.

    Checks without a weight contribute nothing.
    """
    total = sum(
        check.score / check.max_score * CHECK_WEIGHTS.get(check.name, 0) for check in checks
    )
    return max(0, min(100, round_half_up(total)))


# ── Grades ───────────────────────────────────────────────────────────────────

GRADING_SCALE: list[tuple[str, int]] = [
    ("A", 90),
    ("B", 80),
    ("C", 70),
    ("D", 60),
    ("F", 0),
]
"""(grade, min_score), evaluated top-down; first match wins."""

GRADE_MESSAGES: dict[str, str] = {
    "A": (
        "Excellent AI Search Readiness - "
        "Your content is optimized for Perplexity, Claude, ChatGPT"
    ),
    "B": "Good AI Search Readiness - Minor improvements recommended",
    "C": "Moderate AI Search Readiness - Several areas need optimization",
    "D": "Poor AI Search Readiness - Significant improvements needed",
    "F": "Critical Issues - Your site is largely invisible to AI search engines",
}


def get_grade(score: int) -> str:
    for grade, minimum in GRADING_SCALE:
        if score >= minimum:
            return grade
    return "F"


def score_message(score: int) -> str:
    return GRADE_MESSAGES[get_grade(score)]


# ── Improvements ─────────────────────────────────────────────────────────────

_PRIORITY_ORDER = {"critical": 0, "high": 1, "medium": 2, "low": 3}


def build_improvements(checks: list[AEOCheckResult]) -> list[AEOImprovement]:
    """List fixes for every check below its max, most urgent first."""
    improvements: list[AEOImprovement] = []
    for check in checks:
        if check.score >= check.max_score:
            continue
        gain = check.max_score - check.score
        if check.status == CheckStatus.fail:
            priority = "critical"
        elif check.status == CheckStatus.warning:
            priority = "high"
        else:
            priority = "medium"
        effort = "complex" if gain > 5 else "medium" if gain > 2 else "quick"

        for rec in check.recommendations:
            if not rec:
                continue
            improvements.append(
                AEOImprovement(
                    priority=priority,
                    check=check.name,
                    issue=check.message,
                    fix=rec,
                    points_gain=gain,
                    effort=effort,
                )
            )

    improvements.sort(key=lambda imp: (_PRIORITY_ORDER[imp.priority], -imp.points_gain))
    return improvements

"""Content extractability: how easily the homepage text can be lifted out."""

from __future__ import annotations

import httpx

from aeo_audit.core.config import AuditConfig
from aeo_audit.core.fetch import fetch_resource
from aeo_audit.core.models import CheckStatus, ExtractabilityCheckResult
from aeo_audit.core.parsing import (
    count_images,
    extract_headings,
    has_semantic_tags,
    text_to_html_ratio,
    validate_heading_hierarchy,
)
from aeo_audit.core.scoring import (
    EXTRACTABILITY_MAX,
    EXTRACTABILITY_MIN_TEXT_RATIO,
    EXTRACTABILITY_PARTIAL_ALT_POINTS,
    EXTRACTABILITY_PASS,
    EXTRACTABILITY_SIGNAL_POINTS,
    EXTRACTABILITY_WARN,
    round_half_up,
    status_for,
)


def score_extractability(html: str) -> ExtractabilityCheckResult:
    """Score four structural signals of *html*, five points each.

    Images earn partial credit when only some carry alt text.
    """
    semantic = has_semantic_tags(html)
    hierarchy_valid = validate_heading_hierarchy(extract_headings(html))
    ratio = text_to_html_ratio(html)
    good_ratio = ratio > EXTRACTABILITY_MIN_TEXT_RATIO
    with_alt, total = count_images(html)

    score = 0
    score += EXTRACTABILITY_SIGNAL_POINTS if semantic else 0
    score += EXTRACTABILITY_SIGNAL_POINTS if hierarchy_valid else 0
    score += EXTRACTABILITY_SIGNAL_POINTS if good_ratio else 0
    if total > 0 and with_alt == total:
        score += EXTRACTABILITY_SIGNAL_POINTS
    elif with_alt > 0:
        score += EXTRACTABILITY_PARTIAL_ALT_POINTS

    status = status_for(score, EXTRACTABILITY_PASS, EXTRACTABILITY_WARN)
    level = "highly" if status == CheckStatus.passed else "moderately"

    details = [
        "✓ Semantic HTML tags present" if semantic else "✗ Missing semantic tags",
        "✓ Heading hierarchy valid" if hierarchy_valid else "✗ Heading hierarchy issues",
        f"✓ Text-to-HTML ratio good ({ratio * 100:.1f}%)" if good_ratio else "✗ Low text ratio",
        f"✓ All {total} images have alt text"
        if with_alt == total
        else f"{with_alt}/{total} images have alt text",
    ]

    recommendations = []
    if not semantic:
        recommendations.append("Use <article>, <section>, <nav> semantic HTML tags")
    if not hierarchy_valid:
        recommendations.append("Fix heading hierarchy (should be h1 → h2 → h3)")
    if ratio < EXTRACTABILITY_MIN_TEXT_RATIO:
        recommendations.append("Increase text content ratio (reduce HTML overhead)")
    if with_alt < total:
        recommendations.append(f"Add alt text to {total - with_alt} images")

    return ExtractabilityCheckResult(
        status=status,
        score=score,
        max_score=EXTRACTABILITY_MAX,
        message=f"Content is {level} extractable for AI",
        details=details,
        recommendations=recommendations,
        html_valid=True,
        has_semantic_tags=semantic,
        heading_hierarchy_valid=hierarchy_valid,
        text_to_html_ratio=round_half_up(ratio * 100) / 100,
        images_with_alt=with_alt,
        images_total=total,
    )


async def check_extractability(
    domain: str, client: httpx.AsyncClient, config: AuditConfig | None = None
) -> ExtractabilityCheckResult:
    cfg = config or AuditConfig()
    html = await fetch_resource(domain, "/", client, timeout=cfg.html_fetch_timeout, config=cfg)
    return score_extractability(html or "")

"""AI metadata: canonical URL, OpenGraph, description, and publication date."""

from __future__ import annotations

import httpx

from aeo_audit.core.config import AuditConfig
from aeo_audit.core.fetch import fetch_resource
from aeo_audit.core.models import AIMetadataCheckResult
from aeo_audit.core.parsing import extract_meta
from aeo_audit.core.scoring import (
    METADATA_CANONICAL_POINTS,
    METADATA_DATE_POINTS,
    METADATA_DESCRIPTION_MAX_CHARS,
    METADATA_DESCRIPTION_POINTS,
    METADATA_LONG_DESCRIPTION_POINTS,
    METADATA_MAX,
    METADATA_OG_POINTS,
    METADATA_PASS,
    METADATA_WARN,
    status_for,
)


def score_ai_metadata(html: str) -> AIMetadataCheckResult:
    canonical = extract_meta(html, "canonical")
    description = extract_meta(html, "description")
    og_title = extract_meta(html, "og_title")
    date_published = extract_meta(html, "date_published")

    has_canonical = bool(canonical)
    canonical_valid = has_canonical and canonical.startswith("http")
    has_og = bool(og_title)
    has_description = bool(description)
    has_date = bool(date_published)
    desc_len = len(description)
    short_description = desc_len <= METADATA_DESCRIPTION_MAX_CHARS

    score = 0
    score += METADATA_CANONICAL_POINTS if canonical_valid else 0
    score += METADATA_OG_POINTS if has_og else 0
    if has_description:
        score += (
            METADATA_DESCRIPTION_POINTS if short_description else METADATA_LONG_DESCRIPTION_POINTS
        )
    score += METADATA_DATE_POINTS if has_date else 0

    if canonical_valid:
        canonical_line = "✓ Valid canonical URL"
    elif has_canonical:
        canonical_line = "⚠ Canonical found but not absolute"
    else:
        canonical_line = "✗ No canonical"

    if not has_description:
        description_line = "✗ No meta description"
    elif short_description:
        description_line = f"✓ Meta description ({desc_len} chars)"
    else:
        description_line = f"⚠ Meta description too long ({desc_len} chars)"

    recommendations = []
    if not has_canonical:
        recommendations.append("Add canonical URL meta tag")
    if not has_og:
        recommendations.append("Add OpenGraph tags for social sharing")
    if not has_description:
        recommendations.append("Add meta description (under 160 chars)")
    if not has_date:
        recommendations.append("Add article:published_time meta tag")

    return AIMetadataCheckResult(
        status=status_for(score, METADATA_PASS, METADATA_WARN),
        score=score,
        max_score=METADATA_MAX,
        message=f"{score}/{METADATA_MAX} metadata checks passed",
        details=[
            canonical_line,
            "✓ OpenGraph tags present" if has_og else "✗ No OpenGraph tags",
            description_line,
            "✓ Publication date present" if has_date else "✗ No publication date",
        ],
        recommendations=recommendations,
        has_canonical=has_canonical,
        canonical_valid=canonical_valid,
        has_og_tags=has_og,
        has_meta_description=has_description,
        has_date_published=has_date,
        meta_description_length=desc_len,
    )


async def check_ai_metadata(
    domain: str, client: httpx.AsyncClient, config: AuditConfig | None = None
) -> AIMetadataCheckResult:
    cfg = config or AuditConfig()
    html = await fetch_resource(domain, "/", client, timeout=cfg.html_fetch_timeout, config=cfg)
    return score_ai_metadata(html or "")

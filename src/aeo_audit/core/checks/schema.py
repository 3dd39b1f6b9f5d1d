"""Structured data quality: JSON-LD coverage of the types answer engines use."""

from __future__ import annotations

import httpx

from aeo_audit.core.config import AuditConfig
from aeo_audit.core.fetch import fetch_resource
from aeo_audit.core.models import SchemaPresence, StructuredDataCheckResult
from aeo_audit.core.parsing import parse_schemas, schema_has_type, validate_schema
from aeo_audit.core.scoring import (
    SCHEMA_MAX,
    SCHEMA_PASS,
    SCHEMA_PRESENT_POINTS,
    SCHEMA_TYPES,
    SCHEMA_VALID_POINTS,
    SCHEMA_WARN,
    status_for,
)

_MISSING_TYPE_RECOMMENDATIONS = {
    "BlogPosting": "Add BlogPosting schema to articles",
    "FAQPage": "Add FAQPage schema for FAQ content",
    "HowTo": "Add HowTo schema for tutorial content",
}


def score_structured_data(html: str) -> StructuredDataCheckResult:
    """Score the JSON-LD blocks embedded in *html*."""
    schemas = parse_schemas(html)

    results = []
    for schema_type in SCHEMA_TYPES:
        matching = [s for s in schemas if schema_has_type(s, schema_type)]
        results.append(
            SchemaPresence(
                type=schema_type,
                present=bool(matching),
                valid=any(validate_schema(s) for s in matching),
            )
        )

    raw_score = sum(
        (SCHEMA_VALID_POINTS if r.valid else SCHEMA_PRESENT_POINTS) for r in results if r.present
    )
    score = min(raw_score, SCHEMA_MAX)
    present_count = sum(1 for r in results if r.present)

    details = []
    for r in results:
        symbol = ("✓" if r.valid else "⚠") if r.present else "✗"
        details.append(f"{symbol} {r.type}")

    present_types = {r.type for r in results if r.present}
    recommendations = [
        rec for t, rec in _MISSING_TYPE_RECOMMENDATIONS.items() if t not in present_types
    ]

    return StructuredDataCheckResult(
        status=status_for(raw_score, SCHEMA_PASS, SCHEMA_WARN),
        score=score,
        max_score=SCHEMA_MAX,
        message=f"{present_count}/{len(SCHEMA_TYPES)} schema types found",
        details=details,
        recommendations=recommendations,
        schemas=results,
        total_schemas=len(schemas),
    )


async def check_structured_data(
    domain: str, client: httpx.AsyncClient, config: AuditConfig | None = None
) -> StructuredDataCheckResult:
    cfg = config or AuditConfig()
    html = await fetch_resource(domain, "/", client, timeout=cfg.html_fetch_timeout, config=cfg)
    return score_structured_data(html or "")

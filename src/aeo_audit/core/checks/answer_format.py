"""Answer-ready format: FAQ/HowTo markup, lists, tables, headers, questions."""

from __future__ import annotations

import httpx

from aeo_audit.core.config import AuditConfig
from aeo_audit.core.fetch import fetch_resource
from aeo_audit.core.models import AnswerFormatCheckResult
from aeo_audit.core.parsing import (
    DEFINITION_LIST_RE,
    FAQ_SCHEMA_RE,
    HEADER_TAG_RE,
    HOWTO_SCHEMA_RE,
    LIST_RE,
    QUESTION_RE,
    TABLE_RE,
)
from aeo_audit.core.scoring import (
    ANSWER_DEFINITION_LIST_POINTS,
    ANSWER_FAQ_POINTS,
    ANSWER_HOWTO_POINTS,
    ANSWER_LIST_POINTS,
    ANSWER_MAX,
    ANSWER_MIN_HEADERS,
    ANSWER_PASS,
    ANSWER_TABLE_POINTS,
    ANSWER_WARN,
    status_for,
)


def score_answer_format(html: str) -> AnswerFormatCheckResult:
    has_faq = bool(FAQ_SCHEMA_RE.search(html))
    has_howto = bool(HOWTO_SCHEMA_RE.search(html))
    has_lists = bool(LIST_RE.search(html))
    has_tables = bool(TABLE_RE.search(html))
    has_dl = bool(DEFINITION_LIST_RE.search(html))
    headers = len(HEADER_TAG_RE.findall(html))
    questions = len(QUESTION_RE.findall(html))

    raw_score = (
        (ANSWER_FAQ_POINTS if has_faq else 0)
        + (ANSWER_HOWTO_POINTS if has_howto else 0)
        + (ANSWER_LIST_POINTS if has_lists else 0)
        + (ANSWER_TABLE_POINTS if has_tables else 0)
        + (ANSWER_DEFINITION_LIST_POINTS if has_dl else 0)
    )
    score = min(raw_score, ANSWER_MAX)
    few_headers = headers < ANSWER_MIN_HEADERS

    details = [
        "✓ FAQ schema present" if has_faq else "✗ No FAQ schema",
        "✓ HowTo schema present" if has_howto else "✗ No HowTo schema",
        "✓ Lists present" if has_lists else "✗ No lists",
        "✓ Tables present" if has_tables else "✗ No tables",
    ]
    if has_dl:
        details.append("✓ Definition lists present")
    details.append(f"Headers: {headers} (aim for 10+)")
    details.append(f"Questions detected: {questions}")

    recommendations = []
    if not has_faq and questions > 0:
        recommendations.append("Add FAQPage schema for Q&A content")
    if not has_howto:
        recommendations.append("Add HowTo schema for step-by-step content")
    if not has_lists:
        recommendations.append("Use lists for dense information")
    if not has_tables and few_headers:
        recommendations.append("Use tables for structured data comparison")
    if few_headers:
        recommendations.append(f"Increase headers (currently {headers}, aim for 10-15)")

    level = "well" if raw_score >= ANSWER_PASS else "moderately"
    return AnswerFormatCheckResult(
        status=status_for(raw_score, ANSWER_PASS, ANSWER_WARN),
        score=score,
        max_score=ANSWER_MAX,
        message=f"Content is {level} formatted for AI extraction",
        details=details,
        recommendations=recommendations,
        has_faq_schema=has_faq,
        has_howto_schema=has_howto,
        has_lists=has_lists,
        has_tables=has_tables,
        has_definition_list=has_dl,
        header_count=headers,
        questions_detected=questions,
    )


async def check_answer_format(
    domain: str, client: httpx.AsyncClient, config: AuditConfig | None = None
) -> AnswerFormatCheckResult:
    cfg = config or AuditConfig()
    html = await fetch_resource(domain, "/", client, timeout=cfg.html_fetch_timeout, config=cfg)
    return score_answer_format(html or "")

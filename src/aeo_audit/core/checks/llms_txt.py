"""llms.txt validation."""

from __future__ import annotations

import httpx

from aeo_audit.core.config import AuditConfig
from aeo_audit.core.fetch import fetch_resource
from aeo_audit.core.models import CheckStatus, LlmsTxtCheckResult
from aeo_audit.core.scoring import LLMS_TXT_MAX, LLMS_TXT_PARTIAL, mark


async def check_llms_txt(
    domain: str, client: httpx.AsyncClient, config: AuditConfig | None = None
) -> LlmsTxtCheckResult:
    """Probe /llms.txt; full marks only when it references a sitemap."""
    cfg = config or AuditConfig()
    content = await fetch_resource(
        domain, "/llms.txt", client, timeout=cfg.text_fetch_timeout, config=cfg
    )

    exists = content is not None
    # Case-sensitive substring match.
    has_sitemap = exists and "sitemap" in content
    has_rss = exists and "rss" in content
    is_valid = exists and has_sitemap

    if not exists:
        score = 0
    elif is_valid:
        score = LLMS_TXT_MAX
    else:
        score = LLMS_TXT_PARTIAL

    return LlmsTxtCheckResult(
        status=CheckStatus.passed if exists else CheckStatus.fail,
        score=score,
        max_score=LLMS_TXT_MAX,
        message="llms.txt found and valid" if exists else "llms.txt not found",
        details=[
            f"{mark(exists)} llms.txt {'exists' if exists else 'missing'}",
            "✓ Sitemap referenced" if has_sitemap else "✗ No sitemap reference",
            "✓ RSS feed referenced" if has_rss else "✗ No RSS reference",
        ],
        recommendations=[
            "Your content policy is declared"
            if exists
            else "Create /llms.txt with content policy, sitemap, and RSS references"
        ],
        llms_url=f"https://{domain}/llms.txt",
        llms_exists=exists,
        llms_content=content,
        has_sitemap=has_sitemap,
        has_rss=has_rss,
        is_valid=is_valid,
    )

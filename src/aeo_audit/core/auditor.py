"""Core audit orchestration: runs the six checks and computes the AEO score."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from datetime import datetime, timezone

import httpx

from aeo_audit.core.checks import (
    check_ai_crawler_access,
    check_ai_metadata,
    check_answer_format,
    check_extractability,
    check_llms_txt,
    check_structured_data,
)
from aeo_audit.core.config import AuditConfig
from aeo_audit.core.errors import AuditError, NetworkError
from aeo_audit.core.errors import TimeoutError as AuditTimeoutError
from aeo_audit.core.models import (
    AEOCheckResult,
    AuditLimits,
    AuditRequest,
    AuditResult,
    VisibilitySummary,
)
from aeo_audit.core.normalize import validate_domain_input
from aeo_audit.core.scoring import compute_overall_score, map_check

logger = logging.getLogger(__name__)


# ── Orchestrator ──────────────────────────────────────────────────────────────


async def run_checks(
    domain: str, client: httpx.AsyncClient, config: AuditConfig | None = None
) -> list[AEOCheckResult]:
    """Run all six checks concurrently and return them in a fixed order.

    The first check to raise aborts the batch; the remaining checks are
    cancelled and the error propagates.
    """
    cfg = config or AuditConfig()
    tasks = [
        asyncio.ensure_future(check(domain, client, cfg))
        for check in (
            check_ai_crawler_access,
            check_llms_txt,
            check_structured_data,
            check_extractability,
            check_ai_metadata,
            check_answer_format,
        )
    ]
    try:
        return list(await asyncio.gather(*tasks))
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()


async def _run_checks_with_deadline(
    domain: str, client: httpx.AsyncClient, config: AuditConfig
) -> list[AEOCheckResult]:
    try:
        return await asyncio.wait_for(
            run_checks(domain, client, config), timeout=config.audit_timeout
        )
    except asyncio.TimeoutError:
        logger.warning("Audit of %s exceeded %ss", domain, config.audit_timeout)
        raise AuditTimeoutError(domain, config.audit_timeout) from None
    except AuditError as exc:
        logger.warning("Audit of %s failed: %s", domain, exc.message)
        raise
    except Exception as exc:
        logger.warning("Audit of %s failed unexpectedly: %s", domain, exc)
        raise NetworkError(domain, str(exc) or "Unknown error") from exc


def build_result(audited_url: str, checks: list[AEOCheckResult]) -> AuditResult:
    """Assemble a fresh report (new id and timestamp) from completed checks."""
    score = compute_overall_score(checks)
    return AuditResult(
        audit_id=str(uuid.uuid4()),
        audited_url=audited_url,
        audited_at=datetime.now(timezone.utc).isoformat(),
        overall_score=score,
        visibility_summary=VisibilitySummary(
            ai_visible_percentage=score,
            ai_invisible_percentage=100 - score,
        ),
        checks=[map_check(c) for c in checks],
        notes=[],
        limits=AuditLimits(),
    )


async def run_audit(
    request: AuditRequest,
    *,
    config: AuditConfig | None = None,
    client: httpx.AsyncClient | None = None,
) -> tuple[AuditResult, list[AEOCheckResult]]:
    """Like :func:`audit_domain` but also returns the raw check results."""
    cfg = config or AuditConfig()
    target = validate_domain_input(request.domain)
    logger.info("Auditing %s", target.domain)
    started = time.perf_counter()

    if client is not None:
        checks = await _run_checks_with_deadline(target.domain, client, cfg)
    else:
        async with httpx.AsyncClient(follow_redirects=True) as own_client:
            checks = await _run_checks_with_deadline(target.domain, own_client, cfg)

    result = build_result(target.audited_url, checks)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "Audited %s: score %d in %.0f ms", target.domain, result.overall_score, elapsed_ms
    )
    return result, checks


async def audit_domain(
    request: AuditRequest,
    *,
    config: AuditConfig | None = None,
    client: httpx.AsyncClient | None = None,
) -> AuditResult:
    """Run a full AEO audit of ``request.domain``.

    Raises ``ValidationError`` before any network call for bad input,
    ``TimeoutError`` when the checks miss the deadline, and ``NetworkError``
    when any fetch fails. There is no partial report.
    """
    result, _ = await run_audit(request, config=config, client=client)
    return result

"""AI crawler accessibility: which answer-engine bots robots.txt lets in."""

from __future__ import annotations

import httpx

from aeo_audit.core.config import AuditConfig
from aeo_audit.core.fetch import fetch_resource
from aeo_audit.core.models import BotAccess, CheckStatus, RobotsCheckResult
from aeo_audit.core.parsing import robots_content_allows
from aeo_audit.core.scoring import (
    AI_CRAWLERS,
    ROBOTS_MAX,
    ROBOTS_WARN_MIN_ALLOWED,
    mark,
    round_half_up,
)


async def check_ai_crawler_access(
    domain: str, client: httpx.AsyncClient, config: AuditConfig | None = None
) -> RobotsCheckResult:
    """Fetch /robots.txt and score how many of the tracked AI bots it allows."""
    cfg = config or AuditConfig()
    robots_url = f"https://{domain}/robots.txt"
    content = await fetch_resource(
        domain, "/robots.txt", client, timeout=cfg.text_fetch_timeout, config=cfg
    )

    bots = [
        BotAccess(
            bot_name=crawler.name,
            user_agent=crawler.user_agent,
            allowed=robots_content_allows(content, crawler.user_agent),
        )
        for crawler in AI_CRAWLERS
    ]
    allowed = sum(1 for b in bots if b.allowed)
    total = len(AI_CRAWLERS)
    score = round_half_up(allowed / total * ROBOTS_MAX)

    if allowed == total:
        status = CheckStatus.passed
    elif allowed >= ROBOTS_WARN_MIN_ALLOWED:
        status = CheckStatus.warning
    else:
        status = CheckStatus.fail

    accessible = content is not None
    return RobotsCheckResult(
        status=status,
        score=score,
        max_score=ROBOTS_MAX,
        message=f"{allowed}/{total} AI crawlers allowed",
        details=[
            "robots.txt is accessible"
            if accessible
            else "robots.txt not found (default: allow all)",
            f"AI crawlers allowed: {allowed}/{total}",
            "\n".join(f"  {mark(b.allowed)} {b.bot_name}" for b in bots),
        ],
        recommendations=[
            "Add explicit Allow rules for GPTBot, ClaudeBot, PerplexityBot"
            if allowed < total
            else "No changes needed - all AI crawlers allowed"
        ],
        robots_url=robots_url,
        robots_accessible=accessible,
        robots_content=content,
        ai_bots_allowed=bots,
    )

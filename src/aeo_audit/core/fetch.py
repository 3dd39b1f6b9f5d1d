"""Bounded fetches against the audited domain.

Each fetch yields one of three outcomes: the resource was found, it is
missing (non-2xx), or the transport failed. Checks decide what a missing
resource means; a transport failure always aborts the audit.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

import httpx

from aeo_audit.core.config import AuditConfig
from aeo_audit.core.errors import NetworkError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    content: str
    status_code: int = 200
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Missing:
    status_code: int


@dataclass(frozen=True)
class TransportFailure:
    cause: Exception


FetchOutcome = Found | Missing | TransportFailure


async def _read_capped(resp: httpx.Response, limit: int, url: str) -> str:
    """Decode the streamed body, stopping once *limit* chars have arrived."""
    chunks: list[str] = []
    size = 0
    async for chunk in resp.aiter_text():
        chunks.append(chunk)
        size += len(chunk)
        if size > limit:
            logger.debug("Truncating %s at %d chars", url, limit)
            break
    return "".join(chunks)[:limit]


async def fetch_text(
    url: str,
    client: httpx.AsyncClient,
    *,
    timeout: float,
    config: AuditConfig | None = None,
) -> FetchOutcome:
    """GET *url* within *timeout* seconds and classify the response.

    The body is streamed and reading stops at ``config.max_content_size``
    characters.
    """
    cfg = config or AuditConfig()
    try:
        async with client.stream(
            "GET",
            url,
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": cfg.user_agent},
        ) as resp:
            status = resp.status_code
            logger.debug("GET %s -> %s", url, status)
            if not 200 <= status < 300:
                return Missing(status)
            text = await _read_capped(resp, cfg.max_content_size, url)
    except httpx.HTTPError as exc:
        logger.debug("GET %s failed: %s", url, exc)
        return TransportFailure(exc)

    return Found(content=text, status_code=status, headers=resp.headers)


def describe_failure(failure: TransportFailure) -> str:
    """Short human description of a transport failure."""
    message = str(failure.cause)
    return message or type(failure.cause).__name__


async def fetch_resource(
    domain: str,
    path: str,
    client: httpx.AsyncClient,
    *,
    timeout: float,
    config: AuditConfig | None = None,
) -> str | None:
    """Fetch ``https://{domain}{path}``; None if missing, NetworkError on failure."""
    outcome = await fetch_text(f"https://{domain}{path}", client, timeout=timeout, config=config)
    if isinstance(outcome, TransportFailure):
        raise NetworkError(domain, describe_failure(outcome))
    if isinstance(outcome, Missing):
        return None
    return outcome.content

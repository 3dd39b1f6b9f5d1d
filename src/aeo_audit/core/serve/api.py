"""JSON API server around the auditing engine.

Routes:

* ``POST /api/audit`` runs an audit for ``{"domain": ..., "fullUrl": ...}``
  and returns it redacted for the caller, who owns it.
* ``GET /api/audit/{audit_id}`` returns a stored audit; ``?share=1`` renders
  the share-link view.

Callers identify themselves with the ``X-Entitlement-Key`` header.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx
import pydantic
from aiohttp import web

from aeo_audit.core.auditor import audit_domain
from aeo_audit.core.config import AuditConfig
from aeo_audit.core.entitlements import apply_limits, resolve_entitlements_for_request
from aeo_audit.core.errors import INTERNAL_ERROR, AuditError
from aeo_audit.core.models import AuditRequest, AuditResult
from aeo_audit.core.redact import redact_audit
from aeo_audit.core.store import (
    AuditStore,
    EntitlementStore,
    InMemoryAuditStore,
    InMemoryEntitlementStore,
    RateLimiter,
    can_create_audit,
    client_ip,
)

logger = logging.getLogger(__name__)

ENTITLEMENT_HEADER = "X-Entitlement-Key"
PRUNE_INTERVAL_SECONDS = 5 * 60

CONFIG_KEY = web.AppKey("config", AuditConfig)
AUDIT_STORE_KEY = web.AppKey("audit_store", AuditStore)
ENTITLEMENT_STORE_KEY = web.AppKey("entitlement_store", EntitlementStore)
RATE_LIMITER_KEY = web.AppKey("rate_limiter", RateLimiter)


def _error(code: str, message: str, status: int) -> web.Response:
    return web.json_response({"success": False, "error": message, "code": code}, status=status)


def _success(result: AuditResult) -> web.Response:
    return web.json_response({"success": True, "data": result.model_dump(mode="json")})


def _rate_limited(request: web.Request, limit_type: str) -> web.Response | None:
    ip = client_ip(request.headers)
    verdict = request.app[RATE_LIMITER_KEY].check(ip, limit_type)
    if verdict.allowed:
        return None
    logger.info("Rate limited %s request from %s", limit_type, ip)
    return web.json_response(
        {"success": False, "error": "Too many requests", "code": "RATE_LIMITED"},
        status=429,
        headers={"Retry-After": str(max(1, round(verdict.reset_in)))},
    )


def _entitlement_key(request: web.Request) -> str | None:
    key = request.headers.get(ENTITLEMENT_HEADER, "").strip()
    return key or None


async def _create_audit(request: web.Request) -> web.Response:
    if (limited := _rate_limited(request, "audit")) is not None:
        return limited

    try:
        body: Any = await request.json()
    except ValueError:
        return _error("INVALID_REQUEST", "Request body must be JSON", 400)
    if not isinstance(body, dict):
        return _error("INVALID_REQUEST", "Request body must be a JSON object", 400)
    try:
        audit_request = AuditRequest.model_validate(body)
    except pydantic.ValidationError:
        return _error("INVALID_REQUEST", "Invalid audit request", 400)

    app = request.app
    key = _entitlement_key(request)
    context = await resolve_entitlements_for_request(
        app[ENTITLEMENT_STORE_KEY], entitlement_key=key, is_share_link=False, is_owner=True
    )
    store = app[AUDIT_STORE_KEY]
    quota = await can_create_audit(store, key, context.plan)
    if not quota.allowed:
        logger.info("Audit quota exhausted for %s", key)
        return _error("QUOTA_EXCEEDED", "Free audit limit reached. Upgrade for more audits.", 402)

    try:
        result = await audit_domain(audit_request, config=app[CONFIG_KEY])
    except AuditError as exc:
        return web.json_response(exc.to_dict(), status=exc.status_code)
    except httpx.InvalidURL as exc:
        return _error("INVALID_REQUEST", str(exc), 400)
    except Exception:
        logger.exception("Unexpected error while auditing %r", audit_request.domain)
        return web.json_response(INTERNAL_ERROR, status=500)

    remaining = None if quota.remaining is None else max(0, quota.remaining - 1)
    result = apply_limits(result, context.plan, remaining)
    await store.save(result, key, plan=context.plan)
    return _success(redact_audit(result, context))


async def _get_audit(request: web.Request) -> web.Response:
    if (limited := _rate_limited(request, "read")) is not None:
        return limited

    audit_id = request.match_info.get("audit_id", "")
    store = request.app[AUDIT_STORE_KEY]
    audit = await store.get(audit_id)
    if audit is None:
        return _error("NOT_FOUND", "Audit not found", 404)

    key = _entitlement_key(request)
    is_owner = key is not None and key == await store.owner_of(audit_id)
    is_share = request.query.get("share", "").lower() in ("1", "true", "yes")
    context = await resolve_entitlements_for_request(
        request.app[ENTITLEMENT_STORE_KEY],
        entitlement_key=key,
        audit=audit,
        is_share_link=is_share,
        is_owner=is_owner,
    )
    return _success(redact_audit(audit, context))


async def _prune_periodically(app: web.Application) -> AsyncIterator[None]:
    async def prune() -> None:
        while True:
            await asyncio.sleep(PRUNE_INTERVAL_SECONDS)
            removed = await app[AUDIT_STORE_KEY].prune()
            app[RATE_LIMITER_KEY].prune()
            logger.debug("Periodic prune removed %d audits", removed)

    task = asyncio.create_task(prune())
    yield
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


def create_api_app(
    config: AuditConfig | None = None,
    *,
    audit_store: AuditStore | None = None,
    entitlement_store: EntitlementStore | None = None,
    rate_limiter: RateLimiter | None = None,
) -> web.Application:
    """Create the aiohttp application.

    Stores default to in-memory implementations; pass your own to share
    state between apps or to back them with a database.
    """
    app = web.Application()
    app[CONFIG_KEY] = config or AuditConfig()
    app[AUDIT_STORE_KEY] = audit_store or InMemoryAuditStore()
    app[ENTITLEMENT_STORE_KEY] = entitlement_store or InMemoryEntitlementStore()
    app[RATE_LIMITER_KEY] = rate_limiter or RateLimiter()
    app.router.add_post("/api/audit", _create_audit)
    app.router.add_get("/api/audit/{audit_id}", _get_audit)
    app.cleanup_ctx.append(_prune_periodically)
    return app


def run_api(
    port: int = 8080,
    host: str = "0.0.0.0",
    config: AuditConfig | None = None,
) -> None:
    """Start the API server.

    Args:
        port: Port to listen on (default 8080).
        host: Host/interface to bind (default ``0.0.0.0``).
        config: Audit settings; defaults apply when omitted.
    """
    app = create_api_app(config)
    web.run_app(app, host=host, port=port, print=None)

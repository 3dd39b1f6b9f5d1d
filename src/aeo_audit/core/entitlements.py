"""Entitlement resolution and plan-based report limits."""

from __future__ import annotations

import logging

from aeo_audit.core.models import AuditLimits, AuditResult, EntitlementContext, Plan
from aeo_audit.core.store import FREE_AUDIT_LIMIT, EntitlementStore

logger = logging.getLogger(__name__)

PRO_HISTORY_DAYS = 30


def create_entitlement_context(
    plan: Plan | None = None, *, is_share_link: bool = False, is_owner: bool = False
) -> EntitlementContext:
    """Build a context. Owners never see their own report as a share link."""
    return EntitlementContext(
        plan=plan or Plan.free,
        is_share_link=is_share_link and not is_owner,
        is_owner=is_owner,
    )


def resolve_entitlements(
    *,
    is_share_link: bool,
    is_owner: bool,
    audit: AuditResult | None = None,
    plan_override: Plan | None = None,
) -> EntitlementContext:
    """Pick the effective plan: override, else the audit's plan, else free."""
    plan = plan_override or (audit.limits.plan if audit is not None else None) or Plan.free
    return create_entitlement_context(plan, is_share_link=is_share_link, is_owner=is_owner)


async def resolve_entitlements_for_request(
    store: EntitlementStore,
    *,
    is_share_link: bool,
    is_owner: bool,
    entitlement_key: str | None = None,
    audit: AuditResult | None = None,
) -> EntitlementContext:
    """Like :func:`resolve_entitlements`, consulting *store* for the key's plan.

    A key seen for the first time gets a free record created for it.
    """
    plan_override: Plan | None = None
    if entitlement_key:
        await store.ensure_entitlement(entitlement_key)
        record = await store.get_entitlement_by_key(entitlement_key)
        plan_override = record.plan if record else None
        logger.debug("Entitlement %s resolved to plan %s", entitlement_key, plan_override)

    return resolve_entitlements(
        is_share_link=is_share_link,
        is_owner=is_owner,
        audit=audit,
        plan_override=plan_override,
    )


def apply_limits(
    result: AuditResult, plan: Plan, audits_remaining: int | None = FREE_AUDIT_LIMIT
) -> AuditResult:
    """Return a copy of *result* whose ``limits`` reflect *plan*."""
    if plan == Plan.pro:
        limits = AuditLimits(
            plan=Plan.pro, audits_remaining=None, export_available=True,
            history_days=PRO_HISTORY_DAYS,
        )
    else:
        limits = AuditLimits(
            plan=Plan.free, audits_remaining=audits_remaining, export_available=False,
            history_days=0,
        )
    return result.model_copy(update={"limits": limits})

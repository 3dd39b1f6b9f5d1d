"""Storage collaborators used around the engine.

The auditing core is stateless; these stores hold persisted audits,
entitlement records and rate-limit windows for the API server. Each store
is an explicit object so callers can swap the in-memory versions for a
database-backed implementation.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

from aeo_audit.core.models import AuditResult, Plan

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

DAY_SECONDS = 24 * 60 * 60
DEFAULT_TTL_DAYS = 7
PRO_TTL_DAYS = 30

FREE_AUDIT_LIMIT = 3
ANONYMOUS_AUDIT_LIMIT = 1
QUOTA_WINDOW_SECONDS = 7 * DAY_SECONDS


# ── Audits ───────────────────────────────────────────────────────────────────


class AuditStore(Protocol):
    async def save(
        self, result: AuditResult, entitlement_key: str | None = None, *, plan: Plan = Plan.free
    ) -> None: ...

    async def get(self, audit_id: str) -> AuditResult | None: ...

    async def owner_of(self, audit_id: str) -> str | None: ...

    async def prune(self) -> int: ...

    async def count_recent(
        self, entitlement_key: str, window: float = QUOTA_WINDOW_SECONDS
    ) -> int: ...


@dataclass
class _StoredAudit:
    result: AuditResult
    created_at: float
    expires_at: float
    entitlement_key: str | None


class InMemoryAuditStore:
    """Dict-backed audit store with per-plan expiry."""

    def __init__(self, clock: Clock = time.time) -> None:
        self._clock = clock
        self._entries: dict[str, _StoredAudit] = {}

    async def save(
        self, result: AuditResult, entitlement_key: str | None = None, *, plan: Plan = Plan.free
    ) -> None:
        """Persist *result* unless its id is already stored."""
        if result.audit_id in self._entries:
            return
        now = self._clock()
        ttl_days = PRO_TTL_DAYS if plan == Plan.pro else DEFAULT_TTL_DAYS
        self._entries[result.audit_id] = _StoredAudit(
            result=result,
            created_at=now,
            expires_at=now + ttl_days * DAY_SECONDS,
            entitlement_key=entitlement_key,
        )

    def _live(self, audit_id: str) -> _StoredAudit | None:
        entry = self._entries.get(audit_id)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._entries[audit_id]
            return None
        return entry

    async def get(self, audit_id: str) -> AuditResult | None:
        entry = self._live(audit_id)
        return entry.result if entry else None

    async def owner_of(self, audit_id: str) -> str | None:
        entry = self._live(audit_id)
        return entry.entitlement_key if entry else None

    async def prune(self) -> int:
        """Drop expired audits and return how many were removed."""
        now = self._clock()
        expired = [k for k, e in self._entries.items() if e.expires_at <= now]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Pruned %d expired audits", len(expired))
        return len(expired)

    async def count_recent(
        self, entitlement_key: str, window: float = QUOTA_WINDOW_SECONDS
    ) -> int:
        cutoff = self._clock() - window
        return sum(
            1
            for e in self._entries.values()
            if e.entitlement_key == entitlement_key and e.created_at > cutoff
        )


@dataclass(frozen=True)
class QuotaStatus:
    allowed: bool
    remaining: int | None
    limit: int | None


async def can_create_audit(
    store: AuditStore, entitlement_key: str | None, plan: Plan
) -> QuotaStatus:
    """Decide whether *entitlement_key* may start another audit.

    ``None`` for remaining/limit means unlimited.
    """
    if plan == Plan.pro:
        return QuotaStatus(allowed=True, remaining=None, limit=None)
    if not entitlement_key:
        return QuotaStatus(
            allowed=True, remaining=ANONYMOUS_AUDIT_LIMIT, limit=ANONYMOUS_AUDIT_LIMIT
        )

    used = await store.count_recent(entitlement_key)
    remaining = max(0, FREE_AUDIT_LIMIT - used)
    return QuotaStatus(allowed=remaining > 0, remaining=remaining, limit=FREE_AUDIT_LIMIT)


# ── Entitlements ─────────────────────────────────────────────────────────────


def normalize_plan(plan: str | Plan | None) -> Plan:
    return Plan.pro if plan == Plan.pro or plan == "pro" else Plan.free


@dataclass(frozen=True)
class EntitlementRecord:
    entitlement_key: str
    plan: Plan = Plan.free
    status: str = "free"
    updated_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class EntitlementStore(Protocol):
    async def ensure_entitlement(self, entitlement_key: str) -> None: ...

    async def get_entitlement_by_key(self, entitlement_key: str) -> EntitlementRecord | None: ...


class InMemoryEntitlementStore:
    def __init__(self) -> None:
        self._records: dict[str, EntitlementRecord] = {}

    async def ensure_entitlement(self, entitlement_key: str) -> None:
        """Create a free record for *entitlement_key* if none exists."""
        self._records.setdefault(entitlement_key, EntitlementRecord(entitlement_key))

    async def get_entitlement_by_key(self, entitlement_key: str) -> EntitlementRecord | None:
        return self._records.get(entitlement_key)

    async def upsert_entitlement(
        self, entitlement_key: str, plan: str | Plan, status: str
    ) -> EntitlementRecord:
        record = EntitlementRecord(entitlement_key, normalize_plan(plan), status)
        self._records[entitlement_key] = record
        return record


# ── Rate limiting ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class RateLimit:
    max_requests: int
    window_seconds: float


RATE_LIMITS: dict[str, RateLimit] = {
    "audit": RateLimit(max_requests=10, window_seconds=60),
    "read": RateLimit(max_requests=60, window_seconds=60),
}


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_in: float


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """Fixed-window request counter keyed by limit type and identifier."""

    def __init__(
        self, limits: dict[str, RateLimit] | None = None, clock: Clock = time.monotonic
    ) -> None:
        self._limits = limits or RATE_LIMITS
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def check(self, identifier: str, limit_type: str) -> RateLimitResult:
        """Count one request; refuse it once the window's budget is spent."""
        limit = self._limits[limit_type]
        key = f"{limit_type}:{identifier}"
        now = self._clock()

        window = self._windows.get(key)
        if window is None or now >= window.reset_at:
            window = _Window(count=0, reset_at=now + limit.window_seconds)
            self._windows[key] = window

        reset_in = max(0.0, window.reset_at - now)
        if window.count >= limit.max_requests:
            return RateLimitResult(allowed=False, remaining=0, reset_in=reset_in)

        window.count += 1
        return RateLimitResult(
            allowed=True, remaining=limit.max_requests - window.count, reset_in=reset_in
        )

    def prune(self) -> int:
        now = self._clock()
        elapsed = [k for k, w in self._windows.items() if now >= w.reset_at]
        for key in elapsed:
            del self._windows[key]
        return len(elapsed)


def client_ip(headers: Mapping[str, str]) -> str:
    """Best-effort client address from common proxy headers."""
    get = headers.get
    forwarded = get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    for name in ("X-Real-IP", "CF-Connecting-IP"):
        value = get(name)
        if value:
            return value.strip()
    return "unknown"

"""Pydantic models for audit inputs, check results, and the public report."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

AUDIT_SCHEMA_VERSION = "1.0.0"


class OutputFormat(str, Enum):
    """Supported CLI output formats."""

    json = "json"
    csv = "csv"


class CheckStatus(str, Enum):
    """Outcome of a single check, derived from its score thresholds."""

    passed = "pass"
    warning = "warning"
    fail = "fail"


class Plan(str, Enum):
    """Billing plan behind an entitlement."""

    free = "free"
    pro = "pro"


# ── Request ──────────────────────────────────────────────────────────────────


class AuditRequest(BaseModel):
    """Input to :func:`aeo_audit.core.auditor.audit_domain`. Not persisted."""

    model_config = ConfigDict(populate_by_name=True)

    domain: str | None = Field(default=None, description="Domain or URL to audit")
    full_url: bool = Field(default=False, alias="fullUrl")


# ── Internal check results (tagged union keyed by ``name``) ──────────────────


class AEOCheckResult(BaseModel):
    """Fields shared by every check result."""

    model_config = ConfigDict(frozen=True)

    name: str
    status: CheckStatus
    score: int = Field(ge=0)
    max_score: int = Field(gt=0)
    message: str
    details: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class BotAccess(BaseModel):
    """Whether a single AI crawler may fetch the site root."""

    model_config = ConfigDict(frozen=True)

    bot_name: str
    user_agent: str
    allowed: bool


class RobotsCheckResult(AEOCheckResult):
    name: Literal["ai-crawler-accessibility"] = "ai-crawler-accessibility"
    robots_url: str
    robots_accessible: bool
    robots_content: str | None = None
    ai_bots_allowed: list[BotAccess] = Field(default_factory=list)


class LlmsTxtCheckResult(AEOCheckResult):
    name: Literal["llms-txt-validation"] = "llms-txt-validation"
    llms_url: str
    llms_exists: bool
    llms_content: str | None = None
    has_sitemap: bool = False
    has_rss: bool = False
    is_valid: bool = False


class SchemaPresence(BaseModel):
    """Presence and validity of one weighted JSON-LD type."""

    model_config = ConfigDict(frozen=True)

    type: str
    present: bool
    valid: bool


class StructuredDataCheckResult(AEOCheckResult):
    name: Literal["structured-data-quality"] = "structured-data-quality"
    schemas: list[SchemaPresence] = Field(default_factory=list)
    total_schemas: int = 0


class ExtractabilityCheckResult(AEOCheckResult):
    name: Literal["content-extractability"] = "content-extractability"
    html_valid: bool = True
    has_semantic_tags: bool = False
    heading_hierarchy_valid: bool = False
    text_to_html_ratio: float = 0.0
    images_with_alt: int = 0
    images_total: int = 0


class AIMetadataCheckResult(AEOCheckResult):
    name: Literal["ai-metadata"] = "ai-metadata"
    has_canonical: bool = False
    canonical_valid: bool = False
    has_og_tags: bool = False
    has_meta_description: bool = False
    has_date_published: bool = False
    meta_description_length: int = 0


class AnswerFormatCheckResult(AEOCheckResult):
    name: Literal["answer-format"] = "answer-format"
    has_faq_schema: bool = False
    has_howto_schema: bool = False
    has_lists: bool = False
    has_tables: bool = False
    has_definition_list: bool = False
    header_count: int = 0
    questions_detected: int = 0


AEOCheckType = Annotated[
    Union[
        RobotsCheckResult,
        LlmsTxtCheckResult,
        StructuredDataCheckResult,
        ExtractabilityCheckResult,
        AIMetadataCheckResult,
        AnswerFormatCheckResult,
    ],
    Field(discriminator="name"),
]


# ── Public report ────────────────────────────────────────────────────────────

CheckCategory = Literal["access", "structure", "metadata", "content"]


class AuditCheckDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    explanation: str
    evidence: list[str] = Field(default_factory=list)
    recommendation: str


class AuditCheckMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_share_safe: bool = True
    is_pro_only: bool = False
    category: CheckCategory = "content"


class AuditCheck(BaseModel):
    """A check as it appears in the public report."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    status: CheckStatus
    score: int = Field(ge=0, le=100, description="Percentage of the check's max score")
    summary: str
    details: AuditCheckDetails
    metadata: AuditCheckMetadata


class AuditNote(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["info", "warning"] = "info"
    message: str


class AuditLimits(BaseModel):
    model_config = ConfigDict(frozen=True)

    plan: Plan = Plan.free
    audits_remaining: int | None = Field(
        default=3, description="None means unlimited"
    )
    export_available: bool = False
    history_days: int = 0


class VisibilitySummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    ai_visible_percentage: int = Field(ge=0, le=100)
    ai_invisible_percentage: int = Field(ge=0, le=100)


class AuditResult(BaseModel):
    """The aggregate report. Immutable: redaction builds a new instance."""

    model_config = ConfigDict(frozen=True)

    schema_version: str = AUDIT_SCHEMA_VERSION
    audit_id: str
    audited_url: str
    audited_at: str
    overall_score: int = Field(ge=0, le=100)
    visibility_summary: VisibilitySummary
    checks: list[AuditCheck] = Field(default_factory=list)
    notes: list[AuditNote] = Field(default_factory=list)
    limits: AuditLimits = Field(default_factory=AuditLimits)


# ── Entitlements & improvements ──────────────────────────────────────────────


class EntitlementContext(BaseModel):
    """Who is viewing a report, and through which kind of link."""

    model_config = ConfigDict(frozen=True)

    plan: Plan = Plan.free
    is_share_link: bool = False
    is_owner: bool = False


class AEOImprovement(BaseModel):
    """A prioritized, actionable fix derived from a check result."""

    priority: Literal["critical", "high", "medium", "low"]
    check: str
    issue: str
    fix: str
    points_gain: int
    effort: Literal["quick", "medium", "complex"]

"""Regex heuristics shared by the checks.

All extraction is string-based; no DOM is built.
"""

from __future__ import annotations

import json
import re
from typing import Any

# ── robots.txt ───────────────────────────────────────────────────────────────

_USER_AGENT_PREFIX = "user-agent:"
_DISALLOW_PREFIX = "disallow:"


def robots_content_allows(content: str | None, user_agent: str) -> bool:
    """Return False if *content* fully disallows *user_agent*.

    Only ``Disallow: /`` and an empty ``Disallow:`` count as blocking, for a
    group addressed to the exact agent or to ``*``. Path prefixes are ignored.
    Missing or empty content allows everything.
    """
    if not content:
        return True

    current_agent = "*"
    allowed = True
    for line in content.split("\n"):
        trimmed = line.strip()
        lowered = trimmed.lower()

        if lowered.startswith(_USER_AGENT_PREFIX):
            current_agent = trimmed[len(_USER_AGENT_PREFIX):].strip()

        if current_agent in (user_agent, "*") and lowered.startswith(_DISALLOW_PREFIX):
            path = trimmed[len(_DISALLOW_PREFIX):].strip()
            if path in ("/", ""):
                allowed = False
    return allowed


# ── JSON-LD ──────────────────────────────────────────────────────────────────

_JSON_LD_RE = re.compile(r'<script type="application/ld\+json">(.*?)</script>', re.DOTALL)

SCHEMA_REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    "BlogPosting": ("headline", "author", "datePublished"),
    "FAQPage": ("mainEntity",),
    "HowTo": ("step", "name"),
    "WebSite": ("name", "url"),
    "Person": ("name",),
}


def parse_schemas(html: str) -> list[Any]:
    """Decode every inline JSON-LD block; blocks that do not decode are skipped."""
    schemas: list[Any] = []
    for raw in _JSON_LD_RE.findall(html):
        try:
            schemas.append(json.loads(raw))
        except (ValueError, RecursionError):
            continue
    return schemas


def schema_has_type(schema: Any, schema_type: str) -> bool:
    """True if the schema's ``@type`` contains *schema_type*.

    A string ``@type`` matches by substring (``"HowToStep"`` contains
    ``"HowTo"``); a list ``@type`` matches by membership.
    """
    if not isinstance(schema, dict):
        return False
    declared = schema.get("@type")
    if isinstance(declared, (str, list)):
        return schema_type in declared
    return False


def validate_schema(schema: Any) -> bool:
    """True if a single-typed schema carries every required field for its type.

    Types without an entry in :data:`SCHEMA_REQUIRED_FIELDS` always validate.
    """
    if not isinstance(schema, dict):
        return False
    declared = schema.get("@type")
    if not isinstance(declared, str):
        return False
    required = SCHEMA_REQUIRED_FIELDS.get(declared, ())
    return all(key in schema for key in required)


# ── Headings & text ──────────────────────────────────────────────────────────

_HEADING_RE = re.compile(r"<h[1-6][^>]*>[^<]*</h[1-6]>", re.IGNORECASE)
_HEADING_LEVEL_RE = re.compile(r"h([1-6])", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")


def extract_headings(html: str) -> list[str]:
    """Return text-only ``<h1>``..``<h6>`` elements in document order."""
    return _HEADING_RE.findall(html)


def heading_level(heading: str) -> int:
    match = _HEADING_LEVEL_RE.search(heading)
    return int(match.group(1)) if match else 1


def validate_heading_hierarchy(headings: list[str]) -> bool:
    """True if no heading jumps more than one level deeper than the previous.

    Accepts raw tags (``"<h2>Intro</h2>"``) or bare names (``"h2"``). The
    walk starts from an implied h1, and an empty list is invalid.
    """
    if not headings:
        return False

    last_level = 1
    for heading in headings:
        level = heading_level(heading)
        if level > last_level + 1:
            return False
        last_level = level
    return True


def text_to_html_ratio(html: str) -> float:
    """Length of the tag-stripped text divided by the raw HTML length."""
    if not html:
        return 0.0
    text = _TAG_RE.sub(" ", html).strip()
    return len(text) / len(html)


_SEMANTIC_TAG_RE = re.compile(r"<(?:article|section)[\s>]", re.IGNORECASE)
_IMG_RE = re.compile(r"<img[^>]*>", re.IGNORECASE)
_ALT_RE = re.compile(r'alt="', re.IGNORECASE)


def has_semantic_tags(html: str) -> bool:
    return bool(_SEMANTIC_TAG_RE.search(html))


def count_images(html: str) -> tuple[int, int]:
    """Return ``(images_with_alt, images_total)``."""
    images = _IMG_RE.findall(html)
    with_alt = sum(1 for img in images if _ALT_RE.search(img))
    return with_alt, len(images)


# ── Meta tags ────────────────────────────────────────────────────────────────

META_EXTRACTORS: dict[str, re.Pattern[str]] = {
    "canonical": re.compile(
        r"""<link[^>]*rel=["']?canonical["']?[^>]*href=["']?([^"'\s>]+)["']?""", re.IGNORECASE
    ),
    "description": re.compile(
        r"""<meta[^>]*name=["']?description["']?[^>]*content=["']?([^"']+)["']?""",
        re.IGNORECASE,
    ),
    "og_title": re.compile(
        r"""<meta[^>]*property=["']?og:title["']?[^>]*content=["']?([^"']+)["']?""",
        re.IGNORECASE,
    ),
    "date_published": re.compile(
        r"""<meta[^>]*property=["']?article:published_time["']?[^>]*content=["']?([^"']+)["']?""",
        re.IGNORECASE,
    ),
}


def extract_meta(html: str, key: str) -> str:
    """First capture of the named extractor, or ``""`` when absent."""
    match = META_EXTRACTORS[key].search(html)
    return match.group(1) if match else ""


# ── Answer-format signals ────────────────────────────────────────────────────

FAQ_SCHEMA_RE = re.compile(r'"@type"\s*:\s*"FAQPage"')
HOWTO_SCHEMA_RE = re.compile(r'"@type"\s*:\s*"HowTo"')
LIST_RE = re.compile(r"<(ul|ol)[^>]*>", re.IGNORECASE)
TABLE_RE = re.compile(r"<table[^>]*>", re.IGNORECASE)
DEFINITION_LIST_RE = re.compile(r"<dl[^>]*>", re.IGNORECASE)
HEADER_TAG_RE = re.compile(r"<h[1-6][^>]*>", re.IGNORECASE)
QUESTION_RE = re.compile(r"\?[\s<]")

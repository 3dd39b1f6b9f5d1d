"""Domain normalization and validation.

Turns raw user input (``example.com``, ``https://example.com/path``, ...)
into the canonical audited origin and the bare hostname the checks fetch from.
"""

from __future__ import annotations

import re
from typing import NamedTuple

import httpx

from aeo_audit.core.errors import ValidationError

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_DOMAIN_RE = re.compile(r"^[a-z0-9]([a-z0-9-]*\.)+[a-z]{2,}$", re.IGNORECASE)

_DEFAULT_PORTS = {"http": 80, "https": 443}


class NormalizedTarget(NamedTuple):
    audited_url: str
    domain: str


def normalize_audit_url(raw: str) -> NormalizedTarget:
    """Return ``(audited_url, domain)`` for *raw* without validating the host.

    Input without an ``http(s)://`` prefix is treated as HTTPS. URL parse
    failures (``httpx.InvalidURL``) propagate unchanged. Internationalized
    hosts are kept in their ASCII (punycode) form.
    """
    trimmed = raw.strip()
    if not _SCHEME_RE.match(trimmed):
        trimmed = f"https://{trimmed}"

    url = httpx.URL(trimmed)
    host = url.raw_host.decode("ascii").lower()
    origin = f"{url.scheme}://{host}"
    if url.port is not None and url.port != _DEFAULT_PORTS.get(url.scheme):
        origin += f":{url.port}"
    return NormalizedTarget(audited_url=origin, domain=host)


def is_valid_domain(domain: str) -> bool:
    """True if *domain* is dot-separated labels ending in a 2+ letter TLD."""
    return bool(_DOMAIN_RE.match(domain))


def validate_domain_input(raw: str | None) -> NormalizedTarget:
    """Validate and normalize user input, raising :class:`ValidationError`."""
    if raw is None or not raw.strip():
        raise ValidationError("Domain is required")

    target = normalize_audit_url(raw)
    if not is_valid_domain(target.domain):
        raise ValidationError(f"Invalid domain format: {target.domain}")
    return target

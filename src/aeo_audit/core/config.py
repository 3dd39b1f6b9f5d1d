"""Configuration model and TOML loader.

Settings resolve from, in order: an explicit path, ``./.aeo-audit.toml``,
``~/.aeo-audit.toml``. A missing file means defaults.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from aeo_audit.core.errors import AUDIT_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".aeo-audit.toml"

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; AEOAudit/0.4)"


class AuditConfig(BaseModel):
    """Runtime settings for audits and the CLI."""

    model_config = ConfigDict(extra="ignore")

    audit_timeout: float = Field(
        default=AUDIT_TIMEOUT_SECONDS, gt=0,
        description="Deadline for all six checks together, in seconds",
    )
    text_fetch_timeout: float = Field(
        default=5.0, gt=0, description="Per-request timeout for robots.txt / llms.txt"
    )
    html_fetch_timeout: float = Field(
        default=10.0, gt=0, description="Per-request timeout for the homepage"
    )
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    max_content_size: int = Field(
        default=5 * 1024 * 1024, gt=0, description="Response bodies are cut at this many chars"
    )
    format: str | None = Field(default=None, description="Default CLI output format")
    verbose: bool = False


def _candidate_paths() -> list[Path]:
    return [Path.cwd() / CONFIG_FILENAME, Path.home() / CONFIG_FILENAME]


def load_config(path: str | Path | None = None) -> AuditConfig:
    """Load :class:`AuditConfig` from TOML, falling back to defaults."""
    candidates = [Path(path)] if path is not None else _candidate_paths()
    for candidate in candidates:
        if not candidate.is_file():
            continue
        with candidate.open("rb") as fh:
            data = tomllib.load(fh)
        logger.debug("Loaded config from %s", candidate)
        # Settings may live at the top level or under an [aeo-audit] table.
        section = data.get("aeo-audit", data)
        return AuditConfig.model_validate(section)
    return AuditConfig()

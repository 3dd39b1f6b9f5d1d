"""Tests for the Typer CLI interface."""

import json
from unittest.mock import patch

from typer.testing import CliRunner

from aeo_audit import __version__
from aeo_audit.core.errors import NetworkError, ValidationError
from aeo_audit.core.models import (
    AuditCheck,
    AuditCheckDetails,
    AuditCheckMetadata,
    AuditResult,
    CheckStatus,
    LlmsTxtCheckResult,
    VisibilitySummary,
)
from aeo_audit.main import app

runner = CliRunner()

_PATCH_TARGET = "aeo_audit.cli.audit.run_audit"


def _mock_result() -> AuditResult:
    """Build a known AuditResult for CLI output assertions."""
    return AuditResult(
        audit_id="cli-1",
        audited_url="https://example.com",
        audited_at="2026-01-01T00:00:00+00:00",
        overall_score=62,
        visibility_summary=VisibilitySummary(ai_visible_percentage=62, ai_invisible_percentage=38),
        checks=[
            AuditCheck(
                id="llms_txt",
                label="llms.txt",
                status=CheckStatus.fail,
                score=0,
                summary="llms.txt not found",
                details=AuditCheckDetails(
                    explanation="✗ llms.txt missing",
                    evidence=["✗ llms.txt missing"],
                    recommendation=(
                        "Create /llms.txt with content policy, sitemap, and RSS references"
                    ),
                ),
                metadata=AuditCheckMetadata(category="access"),
            ),
            AuditCheck(
                id="structured_data",
                label="Structured Data",
                status=CheckStatus.warning,
                score=40,
                summary="2/5 schema types found",
                details=AuditCheckDetails(
                    explanation="✓ WebSite",
                    evidence=["✓ WebSite"],
                    recommendation="Add FAQPage schema for FAQ content",
                ),
                metadata=AuditCheckMetadata(is_pro_only=True, category="metadata"),
            ),
        ],
    )


def _mock_checks() -> list:
    return [
        LlmsTxtCheckResult(
            status=CheckStatus.fail,
            score=0,
            max_score=15,
            message="llms.txt not found",
            recommendations=["Create /llms.txt with content policy, sitemap, and RSS references"],
            llms_url="https://example.com/llms.txt",
            llms_exists=False,
        )
    ]


async def _fake_run_audit(request, **kwargs):
    """Async mock for run_audit that returns a canned report."""
    return _mock_result(), _mock_checks()


def test_audit_json_output():
    """--json flag should emit valid JSON with the public report keys."""
    with patch(_PATCH_TARGET, side_effect=_fake_run_audit):
        result = runner.invoke(app, ["audit", "example.com", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["audited_url"] == "https://example.com"
    assert data["overall_score"] == 62
    assert data["limits"]["plan"] == "free"
    assert data["limits"]["audits_remaining"] == 3
    # Free view: evidence cleared, pro-only recommendation previewed.
    assert data["checks"][0]["details"]["evidence"] == []
    assert data["checks"][1]["details"]["recommendation"].startswith("Preview: ")


def test_audit_json_pro_keeps_everything():
    with patch(_PATCH_TARGET, side_effect=_fake_run_audit):
        result = runner.invoke(app, ["audit", "example.com", "--json", "--plan", "pro"])

    data = json.loads(result.output)
    assert data["limits"]["plan"] == "pro"
    assert data["limits"]["audits_remaining"] is None
    assert data["checks"][1]["details"]["evidence"] == ["✓ WebSite"]


def test_audit_share_view():
    with patch(_PATCH_TARGET, side_effect=_fake_run_audit):
        result = runner.invoke(app, ["audit", "example.com", "--format", "json", "--share"])

    data = json.loads(result.output)
    assert all(
        c["details"]["explanation"] == "Details are hidden in the share view."
        for c in data["checks"]
    )


def test_audit_csv_output():
    with patch(_PATCH_TARGET, side_effect=_fake_run_audit):
        result = runner.invoke(app, ["audit", "example.com", "-f", "csv"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == "check_id,label,category,status,score,summary,recommendation"
    assert lines[1].startswith("llms_txt,llms.txt,access,fail,0,")
    assert "cli-1,https://example.com,62,free," in result.output


def test_audit_format_overrides_json_flag():
    with patch(_PATCH_TARGET, side_effect=_fake_run_audit):
        result = runner.invoke(app, ["audit", "example.com", "--json", "--format", "csv"])

    assert result.exit_code == 0
    assert result.output.splitlines()[0].startswith("check_id,label,")


def test_audit_rich_output():
    """Default (Rich table) output should exit cleanly."""
    with patch(_PATCH_TARGET, side_effect=_fake_run_audit):
        result = runner.invoke(app, ["audit", "example.com"])

    assert result.exit_code == 0
    assert "example.com" in result.output
    assert "62/100" in result.output
    assert "Grade: D" in result.output
    assert "Recommendations" not in result.output


def test_audit_verbose_free_shows_recommendations():
    with patch(_PATCH_TARGET, side_effect=_fake_run_audit):
        result = runner.invoke(app, ["audit", "example.com", "--verbose"])

    assert result.exit_code == 0
    assert "Recommendations" in result.output
    assert "Improvements" not in result.output


def test_audit_verbose_pro_shows_improvements():
    with patch(_PATCH_TARGET, side_effect=_fake_run_audit):
        result = runner.invoke(app, ["audit", "example.com", "-v", "--plan", "pro"])

    assert result.exit_code == 0
    assert "Improvements" in result.output


def test_audit_timeout_option_overrides_config():
    with patch(_PATCH_TARGET, side_effect=_fake_run_audit) as mock_audit:
        runner.invoke(app, ["audit", "example.com", "--json", "--timeout", "5"])

    config = mock_audit.call_args.kwargs["config"]
    assert config.audit_timeout == 5.0


def test_audit_config_file_sets_format(tmp_path):
    config_file = tmp_path / "aeo.toml"
    config_file.write_text('format = "json"\naudit_timeout = 12\n')

    with patch(_PATCH_TARGET, side_effect=_fake_run_audit) as mock_audit:
        result = runner.invoke(app, ["audit", "example.com", "--config", str(config_file)])

    assert json.loads(result.output)["audit_id"] == "cli-1"
    assert mock_audit.call_args.kwargs["config"].audit_timeout == 12


def test_audit_network_error_exits_1():
    with patch(_PATCH_TARGET, side_effect=NetworkError("example.com", "Connection refused")):
        result = runner.invoke(app, ["audit", "example.com"])

    assert result.exit_code == 1
    assert "Failed to fetch example.com" in result.output


def test_audit_validation_error_exits_1():
    with patch(_PATCH_TARGET, side_effect=ValidationError("Invalid domain format: localhost")):
        result = runner.invoke(app, ["audit", "localhost"])

    assert result.exit_code == 1
    assert "Invalid domain format" in result.output


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == f"aeo-audit {__version__}"


def test_no_args_shows_help():
    result = runner.invoke(app, [])
    assert "audit" in result.output
    assert "serve" in result.output


def test_serve_starts_api():
    with patch("aeo_audit.cli.serve.run_api") as mock_run:
        result = runner.invoke(app, ["serve", "--port", "9000", "--host", "127.0.0.1"])

    assert result.exit_code == 0
    _, kwargs = mock_run.call_args
    assert kwargs["port"] == 9000
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["config"].audit_timeout == 30.0

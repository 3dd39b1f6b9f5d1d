"""FastMCP server exposing the AEO audit as a tool."""

from __future__ import annotations

from typing import Any

from fastmcp import FastMCP

from aeo_audit.core.auditor import audit_domain
from aeo_audit.core.models import AuditRequest

mcp = FastMCP(
    name="aeo-audit",
    instructions=(
        "Audit a website's readiness for AI answer engines: crawler access, "
        "llms.txt, structured data, extractability, metadata and answer format."
    ),
)


@mcp.tool
async def audit(domain: str) -> dict[str, Any]:
    """Run an AEO audit on a domain and return the full report as JSON.

    Args:
        domain: Domain or URL to audit (e.g. ``example.com``).
    """
    result = await audit_domain(AuditRequest(domain=domain))
    return result.model_dump(mode="json")


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()

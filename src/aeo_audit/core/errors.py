"""Error taxonomy for the auditing engine.

Every error carries a machine-readable ``code`` and an HTTP-style
``status_code`` hint. The engine never renders HTTP itself; callers (the API
server, the CLI) decide how to surface an error.
"""

from __future__ import annotations

from typing import Any

AUDIT_TIMEOUT_SECONDS: float = 30.0


class AuditError(Exception):
    """Base class for all errors raised by an audit."""

    retryable: bool = False

    def __init__(self, code: str, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Render the error as an API failure envelope."""
        return {"success": False, "error": self.message, "code": self.code}


class ValidationError(AuditError):
    """Malformed, empty, or invalid-format domain input."""

    def __init__(self, message: str) -> None:
        super().__init__("VALIDATION_ERROR", message, 400)


class NetworkError(AuditError):
    """An underlying fetch failed (DNS, TLS, connection reset, ...)."""

    retryable = True

    def __init__(self, domain: str, message: str) -> None:
        super().__init__("NETWORK_ERROR", f"Failed to fetch {domain}: {message}", 503)
        self.domain = domain


class TimeoutError(AuditError):  # noqa: A001
    """The aggregate deadline elapsed before every check settled."""

    retryable = True

    def __init__(self, domain: str, seconds: float = AUDIT_TIMEOUT_SECONDS) -> None:
        super().__init__(
            "TIMEOUT_ERROR", f"Audit timeout for {domain} (>{seconds:g}s)", 504
        )
        self.domain = domain


INTERNAL_ERROR: dict[str, Any] = {
    "success": False,
    "error": "Internal server error",
    "code": "INTERNAL_ERROR",
}


def user_message(error: BaseException) -> str:
    """Return a human string for *error*, with a retry hint where it helps."""
    if isinstance(error, ValidationError):
        return f"{error.message}. Check the domain and try again."
    if isinstance(error, TimeoutError):
        return f"{error.message}. The site responded too slowly; retrying is safe."
    if isinstance(error, NetworkError):
        return f"{error.message}. The site may be unreachable; retrying is safe."
    if isinstance(error, AuditError):
        return error.message
    return "Unexpected error while auditing. Please try again."

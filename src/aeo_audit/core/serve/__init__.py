"""HTTP API around the auditing engine."""

from aeo_audit.core.serve.api import create_api_app, run_api

__all__ = ["create_api_app", "run_api"]

"""aeo-audit: Answer Engine Optimization readiness auditing."""

__version__ = "0.4.0"

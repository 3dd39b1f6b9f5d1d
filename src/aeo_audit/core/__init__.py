"""Auditing engine: checks, scoring, redaction, and entitlements."""

"""Output formatters for audit results."""

"""HTTP API over the PII data directory."""

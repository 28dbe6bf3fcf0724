"""Core pipeline: identifiers, sanitization, chain resolution, orchestration."""

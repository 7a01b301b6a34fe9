"""
Core utilities shared across the memberhub API.

This package hosts:
- configuration helpers (env vars, feature toggles)
- cross-cutting services such as logging, the email adapter, token signing,
  hashing and rate limit helpers.

Services should depend on these primitives instead of importing FastAPI or the
storage layer for such concerns.
"""

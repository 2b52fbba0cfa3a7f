"""
Core utilities shared across the client portal.

This package hosts configuration (env vars, data file path), logging setup
and the CSRF helpers used by the server-rendered forms. Routers and services
depend on these primitives instead of reading os.environ directly.
"""

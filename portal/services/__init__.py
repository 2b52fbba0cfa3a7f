"""
Use cases for the client portal.

Service modules orchestrate the persistence adapters to implement the
business rules (id allocation, validation, record lifecycle). Routers call
these services instead of touching the JSON document directly.
"""

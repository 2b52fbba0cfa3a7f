"""
Persistence adapters.

The client collection lives in a single JSON document; services go through
json_storage instead of touching the file themselves.
"""

"""Pydantic Schemas - validation for persisted JSON records.

Invariants:
    - Schemas validate at the storage boundary (identity profiles, business info)

Design Decisions:
    - Request bodies stay raw bytes; only reserved types are parsed
"""

"""Signed Document Store - filesystem-backed, signature-gated multi-tenant store.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""

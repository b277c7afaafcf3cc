"""Core Layer - pure domain logic, no IO, no async.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - Functions are deterministic given their inputs (mtimes, headers, bytes)

Design Decisions:
    - Functional core separated from imperative shell
"""

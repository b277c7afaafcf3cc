"""API Layer - FastAPI routes, middleware and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Errors leave the API as status code + minimal JSON envelope

Design Decisions:
    - Thin routes delegate to services
"""

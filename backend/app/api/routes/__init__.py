"""Route Modules - one file per concern.

Invariants:
    - Each module defines its own APIRouter
    - Routes never contain storage logic (delegate to services)

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""

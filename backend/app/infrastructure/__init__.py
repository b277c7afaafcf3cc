"""Infrastructure Layer - filesystem access, id generation, logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All disk IO for the three domain roots goes through filesystem.FileStore

Design Decisions:
    - Thin wrappers over pathlib/os (single responsibility per module)
"""

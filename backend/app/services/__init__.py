"""Services Layer - resolver, ownership walk, mutator and their wiring.

Invariants:
    - Services do synchronous filesystem IO through infrastructure.FileStore
    - Services return Outcome dataclasses or raise DocStoreError subclasses
"""

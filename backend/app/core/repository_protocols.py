"""Boundary Protocols - contracts between core/services and the shell.

Invariants:
    - Services depend on these Protocols, never on a concrete generator
    - Implementations provided by infrastructure via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
"""

from pathlib import Path
from typing import Protocol

from app.core.domain_types import ContentType, ResourceId


class IdGenerator(Protocol):
    """Produces a candidate identifier for a new child resource.

    collection is the directory the child will be created in. Uniqueness is
    not required of the generator itself; the mutator claims the child
    directory exclusively and asks again on collision.
    """
    def __call__(
        self, content_type: ContentType, collection: Path,
    ) -> ResourceId: ...

"""Identifier Generators - injected strategies for naming new child resources.

Invariants:
    - Generators are selected at construction from settings, never module-global
    - CounterIdGenerator is monotonic and thread-safe within one process
    - The first counter id handed out for a collection is above every numeric
      child already in it, so a restarted process continues where it left off
"""

import logging
import os
import threading
import uuid
from pathlib import Path

from app.core.domain_types import ContentType, IdStrategy, ResourceId
from app.core.repository_protocols import IdGenerator

logger = logging.getLogger(__name__)


class UuidIdGenerator:
    """Random 128-bit identifiers, hex encoded."""

    def __call__(self, content_type: ContentType, collection: Path) -> ResourceId:
        return ResourceId(uuid.uuid4().hex)


class CounterIdGenerator:
    """1, 2, 3, ... shared by all collections of one process.

    Each collection is scanned once, on its first id, to skip past children
    written by an earlier process.
    """

    def __init__(self, start: int = 1):
        self._next = start
        self._seen: set[Path] = set()
        self._lock = threading.Lock()

    def __call__(self, content_type: ContentType, collection: Path) -> ResourceId:
        with self._lock:
            if collection not in self._seen:
                self._seen.add(collection)
                highest = _highest_numeric_child(collection)
                if highest >= self._next:
                    logger.info(
                        f"Counter ids in {collection} continue after {highest}",
                    )
                    self._next = highest + 1
            value = self._next
            self._next += 1
            return ResourceId(str(value))


def _is_counter_name(name: str) -> bool:
    return name.isascii() and name.isdigit()


def _highest_numeric_child(collection: Path) -> int:
    try:
        with os.scandir(collection) as entries:
            return max(
                (int(entry.name) for entry in entries if _is_counter_name(entry.name)),
                default=0,
            )
    except FileNotFoundError:
        return 0


def build_id_generator(strategy: IdStrategy) -> IdGenerator:
    match strategy:
        case IdStrategy.UUID:
            return UuidIdGenerator()
        case IdStrategy.COUNTER:
            return CounterIdGenerator()
    raise ValueError(f"Unknown id strategy: {strategy}")

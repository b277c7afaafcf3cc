"""Ownership Chain Resolver - finds the identity profile governing writes to a path.

Invariants:
    - Walk starts at the resource's directory (the path itself if it ends with "/")
      and moves strictly upward to the user domain root
    - Per directory: identity profile check first, then owner marker
    - An owner marker is followed exactly one hop, to
      <user root>/<identity collection>/<owner id>/; markers found there are ignored
    - The loop runs at most max_depth times; exceeding it is an internal fault

Design Decisions:
    - Explicit bounded loop instead of recursion
    - Corrupt profile data raises StoredIdentityError (store's fault, 500)
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from app.core.domain_types import (
    DATA_RECORD, IDENTITY_PROFILE_TYPE, OWNER_MARKER, TYPE_MARKER, OwnerId,
)
from app.core.errors import OwnershipTraversalError, StoredIdentityError
from app.infrastructure.filesystem import FileStore, is_safe_segment, split_path
from app.schemas.identity import IdentityProfile

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 128


class OwnershipResolver:
    """Resolves the owner of user domain paths."""

    def __init__(
        self, store: FileStore, identity_collection: str = "user",
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        if max_depth < 1:
            raise ValueError("max_depth must be positive")
        self._store = store
        self._identity_root = store.locate([identity_collection])
        self._max_depth = max_depth

    def resolve(self, path: str) -> IdentityProfile | None:
        """Owner of path, or None when no ancestor names one."""
        segments, trailing = split_path(path)
        start = segments if trailing else segments[:-1]
        directory = self._store.locate(start)
        for _ in range(self._max_depth):
            if self.is_identity_profile(directory):
                return self.load_profile(directory)
            owner_id = self._store.read_marker(directory, OWNER_MARKER)
            if owner_id is not None:
                return self._follow_owner_marker(OwnerId(owner_id), directory)
            if self._store.is_root(directory):
                return None
            directory = directory.parent
        logger.error(
            f"Ownership walk for {path} exceeded {self._max_depth} hops",
            extra={"path": path, "error_code": "OWNERSHIP_TRAVERSAL_EXCEEDED"},
        )
        raise OwnershipTraversalError(self._max_depth)

    def is_identity_profile(self, directory: Path) -> bool:
        return (
            self._store.read_marker(directory, TYPE_MARKER)
            == IDENTITY_PROFILE_TYPE
        )

    def load_profile(self, directory: Path) -> IdentityProfile:
        try:
            raw = self._store.read_bytes(directory / DATA_RECORD)
        except (FileNotFoundError, IsADirectoryError) as e:
            raise StoredIdentityError(f"no data record in {directory.name}") from e
        try:
            return IdentityProfile.model_validate_json(raw)
        except ValidationError as e:
            raise StoredIdentityError(f"undecodable profile {directory.name}") from e

    def _follow_owner_marker(
        self, owner_id: OwnerId, marked: Path,
    ) -> IdentityProfile | None:
        if not is_safe_segment(owner_id):
            logger.warning(
                f"Ignoring malformed owner marker in {marked}",
                extra={"owner_id": owner_id},
            )
            return None
        profile_dir = self._identity_root / owner_id
        if not self.is_identity_profile(profile_dir):
            logger.warning(
                f"Owner marker in {marked} points at a missing identity",
                extra={"owner_id": owner_id},
            )
            return None
        return self.load_profile(profile_dir)

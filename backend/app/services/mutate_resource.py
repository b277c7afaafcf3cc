"""Resource Mutator - creates child resources (POST) and overwrites files (PUT).

Invariants:
    - Check order: existence -> media type -> precondition -> authorization
    - POST target: existing user domain directory other than the domain root
    - POST writes type, data (raw body) and, with User-Id, owner into a freshly
      claimed child directory
    - PUT target: a file path (never a directory or a type/owner marker)
    - PUT requires a resolved owner and a valid signature over the raw body
    - user/instance payloads must carry non-empty name and key, on create and update

Design Decisions:
    - Ids come from an injected IdGenerator; exclusive mkdir detects collisions
    - If-Match is checked before the owner lookup, so a stale precondition is
      412 whatever the signature
    - No lock between the precondition check and the write (last write wins)
"""

import logging
from pathlib import Path

from app.core.domain_types import (
    DATA_RECORD, IDENTITY_PROFILE_TYPE, OWNER_MARKER, RESERVED_MARKERS,
    TYPE_MARKER, ContentType, OwnerId, ResourceId,
)
from app.core.errors import (
    IdAllocationError, InvalidPayloadError, MethodNotAllowedError,
    ResourceNotFoundError, UnsupportedMediaTypeError,
)
from app.core.etag import check_if_match, format_etag
from app.core.media_type import normalize_content_type
from app.core.outcomes import Created, Updated
from app.core.repository_protocols import IdGenerator
from app.core.write_policy import authorize_write
from app.infrastructure.filesystem import FileStore, is_safe_segment, split_path
from app.schemas.identity import parse_identity_profile
from app.services.ownership import OwnershipResolver

logger = logging.getLogger(__name__)

ALLOW_ON_FILE = ("GET",)
ALLOW_ON_DIRECTORY = ("GET", "POST")
MAX_ID_ATTEMPTS = 16


class ResourceMutator:
    """Write path of the document store. Operates on the user domain only."""

    def __init__(
        self, store: FileStore, ownership: OwnershipResolver,
        id_generator: IdGenerator,
    ):
        self._store = store
        self._ownership = ownership
        self._id_generator = id_generator

    # ─── POST ───────────────────────────────────────────────────

    def create(
        self, path: str, content_type_header: str | None, body: bytes,
        user_id: str | None = None,
    ) -> Created:
        """Create a child resource under the directory at path."""
        segments, _ = split_path(path)
        collection = self._store.locate(segments)
        if not self._store.exists(collection):
            raise ResourceNotFoundError(path)
        if not self._store.is_dir(collection) or self._store.is_root(collection):
            raise MethodNotAllowedError(path, ALLOW_ON_FILE)

        content_type = normalize_content_type(content_type_header)
        if content_type is None:
            raise UnsupportedMediaTypeError(content_type_header)

        if content_type == IDENTITY_PROFILE_TYPE:
            parse_identity_profile(body)
        owner_id = OwnerId(user_id.strip()) if user_id else None
        if owner_id is not None and not is_safe_segment(owner_id):
            raise InvalidPayloadError("User-Id must be a single path segment")

        resource_id, child = self._claim_child(collection, content_type)
        self._store.write_marker(child, TYPE_MARKER, content_type)
        self._store.replace_bytes(child / DATA_RECORD, body)
        if owner_id:
            self._store.write_marker(child, OWNER_MARKER, owner_id)

        location = "/" + "/".join([*segments, resource_id]) + "/"
        logger.info(
            f"Created {content_type} resource at {location}",
            extra={"resource_id": resource_id, "owner_id": owner_id, "path": location},
        )
        return Created(resource_id=resource_id, location=location)

    def _claim_child(
        self, collection: Path, content_type: ContentType,
    ) -> tuple[ResourceId, Path]:
        for _ in range(MAX_ID_ATTEMPTS):
            resource_id = self._id_generator(content_type, collection)
            if not is_safe_segment(resource_id):
                raise ValueError(f"Id generator produced unusable id {resource_id!r}")
            child = self._store.claim_child(collection, resource_id)
            if child is not None:
                return resource_id, child
        raise IdAllocationError(MAX_ID_ATTEMPTS)

    # ─── PUT ────────────────────────────────────────────────────

    def update(
        self, path: str, body: bytes, signature: str | None = None,
        if_match: str | None = None,
    ) -> Updated:
        """Overwrite the file at path with body, verbatim."""
        segments, trailing = split_path(path)
        target = self._store.locate(segments)
        if trailing or self._store.is_dir(target):
            raise MethodNotAllowedError(path, ALLOW_ON_DIRECTORY)
        if segments[-1] in RESERVED_MARKERS:
            raise MethodNotAllowedError(path, ALLOW_ON_FILE)
        self._check_ancestors_are_directories(path, target)

        current = self._store.mtime_ns(target)
        check_if_match(
            if_match, format_etag(current) if current is not None else None, path,
        )

        owner = self._ownership.resolve(path)
        authorize_write(owner.key if owner else None, body, signature)

        if (
            segments[-1] == DATA_RECORD
            and self._ownership.is_identity_profile(target.parent)
        ):
            parse_identity_profile(body)

        etag = format_etag(self._store.replace_bytes(target, body))
        logger.info(
            f"Updated {path}",
            extra={"path": path, "resource_id": segments[-1]},
        )
        return Updated(etag=etag)

    def _check_ancestors_are_directories(self, path: str, target: Path) -> None:
        directory = target.parent
        while not self._store.exists(directory):
            directory = directory.parent
        if not self._store.is_dir(directory):
            raise ResourceNotFoundError(path)

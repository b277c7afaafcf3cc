"""Resource Resolver - maps a GET path onto the user, static and business domains.

Invariants:
    - Lookup order: user entry -> type redirect -> static file -> business entry -> 404
    - User directory without trailing "/" -> 301 to path + "/"
    - Only user domain files carry an ETag and honour If-None-Match
    - Type redirect (303) only fires when /<parent type>/<basename> differs from the path
    - Listings: ?json -> JSON array, ?module -> JS module, otherwise the cached index

Design Decisions:
    - Returns Outcome dataclasses; the route turns them into responses
    - mtime is read before the bytes, so a racing write can only make the ETag
      older than the body (next conditional GET refetches)
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from app.core.domain_types import BUSINESS_INFO, ListingFormat, TYPE_MARKER
from app.core.errors import ResourceNotFoundError
from app.core.etag import format_etag, is_not_modified
from app.core.listing import render_json, render_module
from app.core.outcomes import Content, NotModified, Outcome, Redirect
from app.infrastructure.filesystem import FileStore, split_path
from app.schemas.business import BusinessInfo

logger = logging.getLogger(__name__)


class ResourceResolver:
    """Read path of the document store."""

    def __init__(
        self, user: FileStore, static: FileStore, business: FileStore,
        index_document: bytes,
    ):
        self._user = user
        self._static = static
        self._business = business
        self._index_document = index_document

    def resolve(
        self, path: str, query: str = "", if_none_match: str | None = None,
    ) -> Outcome:
        segments, trailing = split_path(path)
        canonical_path = "/" + "/".join(segments) + ("/" if trailing and segments else "")
        return (
            self._from_user(canonical_path, segments, trailing, query, if_none_match)
            or self._type_redirect(canonical_path, segments, trailing)
            or self._from_static(segments)
            or self._from_business(canonical_path, segments, trailing, query)
        )

    # ─── Domains ────────────────────────────────────────────────

    def _from_user(
        self, path: str, segments: list[str], trailing: bool,
        query: str, if_none_match: str | None,
    ) -> Outcome | None:
        target = self._user.locate(segments)
        if self._user.is_dir(target):
            if not trailing:
                return Redirect(location=path + "/", status_code=301)
            return self._listing(self._user, target, query)
        mtime_ns = self._user.mtime_ns(target)
        if mtime_ns is None:
            return None
        etag = format_etag(mtime_ns)
        if is_not_modified(if_none_match, etag):
            return NotModified()
        return Content(body=self._user.read_bytes(target), etag=etag)

    def _type_redirect(
        self, path: str, segments: list[str], trailing: bool,
    ) -> Outcome | None:
        if trailing or not segments:
            return None
        parent = self._user.locate(segments[:-1])
        type_root = self._user.read_marker(parent, TYPE_MARKER)
        if not type_root:
            return None
        if type_root.startswith(("/", "\\")):
            # would form a protocol-relative Location
            logger.warning(
                f"Ignoring type marker {type_root!r} in {parent}",
                extra={"domain": self._user.domain.value},
            )
            return None
        redirect = f"/{type_root}/{segments[-1]}"
        if redirect == path:
            return None
        return Redirect(location=redirect, status_code=303)

    def _from_static(self, segments: list[str]) -> Outcome | None:
        target = self._static.locate(segments)
        if not self._static.is_file(target):
            return None
        return Content(body=self._static.read_bytes(target))

    def _from_business(
        self, path: str, segments: list[str], trailing: bool, query: str,
    ) -> Outcome:
        target = self._business.locate(segments)
        if self._business.is_file(target):
            return Content(body=self._business.read_bytes(target))
        if self._business.is_dir(target):
            return self._listing(self._business, target, query)
        if segments and not trailing:
            redirect = self._version_redirect(segments)
            if redirect is not None:
                return redirect
        raise ResourceNotFoundError(path)

    def _version_redirect(self, segments: list[str]) -> Outcome | None:
        info_file = self._business.locate(segments[:-1]) / BUSINESS_INFO
        if not self._business.is_file(info_file):
            return None
        try:
            info = BusinessInfo.model_validate_json(
                self._business.read_bytes(info_file),
            )
        except ValidationError as e:
            logger.warning(
                f"Ignoring unreadable {info_file}: {e.error_count()} errors",
                extra={"domain": self._business.domain.value},
            )
            return None
        if not info.current_version:
            return None
        return Redirect(
            location=f"versions/{info.current_version}/{segments[-1]}",
            status_code=303,
        )

    # ─── Listing ────────────────────────────────────────────────

    def _listing(self, store: FileStore, directory: Path, query: str) -> Outcome:
        match ListingFormat.from_query(query):
            case ListingFormat.JSON:
                return Content(
                    body=render_json(store.list_children(directory)),
                    media_type="application/json",
                )
            case ListingFormat.MODULE:
                return Content(
                    body=render_module(store.list_children(directory)),
                    media_type="application/javascript",
                )
            case _:
                return Content(body=self._index_document, media_type="text/html")

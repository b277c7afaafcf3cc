"""Request Outcomes - what a service decided, before it becomes an HTTP response.

Invariants:
    - Services return one of these; only the route layer builds Response objects
    - NotModified never carries an ETag
"""

from dataclasses import dataclass

from app.core.domain_types import ResourceId


@dataclass(frozen=True)
class Content:
    """Bytes to serve with 200. media_type None leaves sniffing to middleware."""
    body: bytes
    media_type: str | None = None
    etag: str | None = None


@dataclass(frozen=True)
class Redirect:
    location: str
    status_code: int


@dataclass(frozen=True)
class NotModified:
    pass


@dataclass(frozen=True)
class Created:
    resource_id: ResourceId
    location: str


@dataclass(frozen=True)
class Updated:
    etag: str


Outcome = Content | Redirect | NotModified | Created | Updated

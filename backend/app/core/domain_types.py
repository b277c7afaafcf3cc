"""Domain Types - names and enums shared by every layer of the document store.

Invariants:
    - Marker file names (type, data, owner) are defined here and nowhere else
    - IDENTITY_PROFILE_TYPE is the only type whose payload is validated
    - All valid states encoded as Enums - no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and log records without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ResourceId = NewType("ResourceId", str)
OwnerId = NewType("OwnerId", str)
ContentType = NewType("ContentType", str)


# ─── Persisted Layout ────────────────────────────────────────────

TYPE_MARKER = "type"
DATA_RECORD = "data"
OWNER_MARKER = "owner"
BUSINESS_INFO = "info.json"

# Markers are metadata, only written on create
RESERVED_MARKERS = frozenset({TYPE_MARKER, OWNER_MARKER})

IDENTITY_PROFILE_TYPE = ContentType("user/instance")


# ─── Enums ───────────────────────────────────────────────────────

class Domain(str, Enum):
    """Storage domains in GET lookup order after the user domain."""
    USER = "user"
    STATIC = "static"
    BUSINESS = "business"


class ListingFormat(str, Enum):
    """How a collection listing is rendered, selected by the query string."""
    JSON = "json"
    MODULE = "module"
    INDEX = "index"

    @classmethod
    def from_query(cls, query: str) -> "ListingFormat":
        if query == cls.JSON.value:
            return cls.JSON
        if query == cls.MODULE.value:
            return cls.MODULE
        return cls.INDEX


class IdStrategy(str, Enum):
    """Identifier generation strategies selectable from settings."""
    UUID = "uuid"
    COUNTER = "counter"

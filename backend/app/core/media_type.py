"""Media Type Normalization - maps a request Content-Type to a stored resource type.

Invariants:
    - application/<a>.<b> -> "<a>/<b>" (every "." in the subtype becomes "/")
    - Only the subtype is kept; parameters after ";" are dropped
    - Missing, empty, or slash-less values map to None (caller answers 415)
    - Every component of the mapped type is a non-empty name other than "." or "..",
      so a stored type never starts with "/" and never climbs out of the user root
"""

from app.core.domain_types import ContentType

_FORBIDDEN_COMPONENTS = frozenset({"", ".", ".."})


def normalize_content_type(header: str | None) -> ContentType | None:
    if not header:
        return None
    media = header.split(";", 1)[0].strip()
    parts = media.split("/")
    if len(parts) < 2:
        return None
    subtype = parts[1].strip()
    if not subtype:
        return None
    mapped = subtype.replace(".", "/")
    if any(
        component in _FORBIDDEN_COMPONENTS or "\\" in component
        for component in mapped.split("/")
    ):
        return None
    return ContentType(mapped)

"""Concurrency Controller - ETags derived from modification time, precondition checks.

Invariants:
    - ETag = W/"<base36(mtime_ns)>", recomputed on every read/write, never stored
    - GET: If-None-Match hit -> not modified (caller answers 304 without ETag)
    - PUT: non-empty If-Match against a missing resource always fails
    - PUT: If-Match must equal the ETag computed BEFORE the write

Design Decisions:
    - Pure functions: mtime is read by the filesystem layer and passed in
    - Optimistic only. Two writers can both pass check_if_match and the later
      filesystem write wins; no lock is taken here.
"""

from app.core.errors import PreconditionFailedError

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(value: int) -> str:
    if value < 0:
        raise ValueError("mtime cannot be negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_DIGITS[rem])
    return "".join(reversed(digits))


def format_etag(mtime_ns: int) -> str:
    """Weak validator for a nanosecond modification timestamp."""
    return f'W/"{_base36(mtime_ns)}"'


def _parse_etag_list(header: str) -> list[str]:
    return [tag.strip() for tag in header.split(",") if tag.strip()]


def is_not_modified(if_none_match: str | None, current_etag: str | None) -> bool:
    """True when the client's cached copy is still current."""
    if not if_none_match or current_etag is None:
        return False
    tags = _parse_etag_list(if_none_match)
    return "*" in tags or current_etag in tags


def check_if_match(
    if_match: str | None, current_etag: str | None, path: str,
) -> None:
    """Raise PreconditionFailedError unless If-Match holds.

    current_etag is None when the resource does not exist yet.
    """
    if not if_match or not if_match.strip():
        return
    if current_etag is None:
        raise PreconditionFailedError(path)
    tags = _parse_etag_list(if_match)
    if "*" in tags or current_etag in tags:
        return
    raise PreconditionFailedError(path)

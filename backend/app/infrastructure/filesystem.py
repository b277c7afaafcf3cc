"""Filesystem Store - one FileStore per domain root; the only module touching disk.

Invariants:
    - Request paths are split into segments; ".", "..", NUL and backslash segments
      never reach the filesystem (treated as not found)
    - Writes replace the target atomically (temp file + os.replace)
    - Temp files carry TEMP_PREFIX: never listed, never addressable by a request path
    - A rewritten file's mtime strictly advances, so its ETag always changes
    - Child directories are claimed with an exclusive mkdir

Design Decisions:
    - Synchronous IO only: callers run it on the threadpool, one request per worker
    - No locking: last os.replace wins for concurrent writers of one file
"""

import contextlib
import logging
import os
import tempfile
from pathlib import Path

from app.core.domain_types import Domain
from app.core.errors import ResourceNotFoundError

logger = logging.getLogger(__name__)

_FORBIDDEN_SEGMENTS = frozenset({".", ".."})

# in-flight write files; hidden from listings and unreachable by path
TEMP_PREFIX = ".~tmp."


def split_path(path: str) -> tuple[list[str], bool]:
    """Split a request path into segments plus a trailing-separator flag."""
    segments = [seg for seg in path.split("/") if seg]
    for seg in segments:
        if (
            seg in _FORBIDDEN_SEGMENTS or "\\" in seg or "\x00" in seg
            or seg.startswith(TEMP_PREFIX)
        ):
            raise ResourceNotFoundError(path)
    trailing = path.endswith("/") or not segments
    return segments, trailing


def is_safe_segment(value: str) -> bool:
    """True when value can be used as a single directory name."""
    return (
        bool(value)
        and value not in _FORBIDDEN_SEGMENTS
        and "/" not in value
        and "\\" not in value
        and "\x00" not in value
        and not value.startswith(TEMP_PREFIX)
    )


class FileStore:
    """Filesystem access rooted at one domain directory."""

    def __init__(self, root: Path, domain: Domain):
        self.root = Path(root)
        self.domain = domain

    def __repr__(self) -> str:
        return f"FileStore({self.domain.value}, {str(self.root)!r})"

    def ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def ensure_directory(self, segments: list[str]) -> Path:
        directory = self.locate(segments)
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def locate(self, segments: list[str]) -> Path:
        return self.root.joinpath(*segments)

    def is_root(self, directory: Path) -> bool:
        return directory == self.root

    # ─── Reads ─────────────────────────────────────────────────

    def is_dir(self, target: Path) -> bool:
        return target.is_dir()

    def is_file(self, target: Path) -> bool:
        return target.is_file()

    def exists(self, target: Path) -> bool:
        return target.exists()

    def read_bytes(self, target: Path) -> bytes:
        return target.read_bytes()

    def read_marker(self, directory: Path, name: str) -> str | None:
        """Stripped UTF-8 content of a marker file, None when absent."""
        marker = directory / name
        try:
            return marker.read_text(encoding="utf-8").strip()
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
            return None

    def list_children(self, directory: Path) -> list[str]:
        """Child names in directory order, directories suffixed with "/"."""
        with os.scandir(directory) as entries:
            return [
                f"{entry.name}/" if entry.is_dir() else entry.name
                for entry in entries
                if not entry.name.startswith(TEMP_PREFIX)
            ]

    def mtime_ns(self, target: Path) -> int | None:
        """Modification time of a regular file, None when it does not exist."""
        try:
            st = target.stat()
        except (FileNotFoundError, NotADirectoryError):
            return None
        if not target.is_file():
            return None
        return st.st_mtime_ns

    # ─── Writes ────────────────────────────────────────────────

    def replace_bytes(self, target: Path, data: bytes) -> int:
        """Atomically replace target with data. Returns the new mtime_ns."""
        previous = self.mtime_ns(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(
            dir=target.parent, prefix=f"{TEMP_PREFIX}{target.name}.",
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(tmp, 0o644)
            os.replace(tmp, target)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp)
            raise
        st = target.stat()
        if previous is not None and st.st_mtime_ns <= previous:
            # coarse clock: same tick as the previous write
            os.utime(target, ns=(st.st_atime_ns, previous + 1))
            st = target.stat()
        return st.st_mtime_ns

    def write_marker(self, directory: Path, name: str, value: str) -> None:
        (directory / name).write_text(value, encoding="utf-8")

    def claim_child(self, directory: Path, name: str) -> Path | None:
        """Create directory/name exclusively. None if it already exists."""
        child = directory / name
        try:
            child.mkdir()
        except FileExistsError:
            logger.debug(f"Child {name!r} already exists in {directory}")
            return None
        return child

"""Service test fixtures - identity profiles and ownership markers on disk.

Invariants:
    - Helpers write the persisted layout directly (type, data, owner files)
    - Services are built over the temporary roots from the root conftest
"""

import json

import pytest

from app.core.domain_types import Domain
from app.infrastructure.filesystem import FileStore
from app.services.ownership import OwnershipResolver


@pytest.fixture
def user_store(domain_roots):
    return FileStore(domain_roots["user"], Domain.USER)


@pytest.fixture
def ownership(user_store):
    return OwnershipResolver(user_store, identity_collection="user")


@pytest.fixture
def make_identity(domain_roots):
    """make_identity(id, key, name="a") -> directory of a user/instance profile."""
    def _make(identity_id: str, key: str, name: str = "a"):
        directory = domain_roots["user"] / "user" / identity_id
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "type").write_text("user/instance")
        (directory / "data").write_text(json.dumps({"name": name, "key": key}))
        return directory
    return _make


@pytest.fixture
def make_owned(domain_roots):
    """make_owned("/files/9/", owner_id) -> resource directory with an owner marker."""
    def _make(path: str, owner_id: str, content_type: str = "file/instance"):
        directory = domain_roots["user"].joinpath(*[s for s in path.split("/") if s])
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "type").write_text(content_type)
        (directory / "data").write_bytes(b"{}")
        (directory / "owner").write_text(owner_id)
        return directory
    return _make

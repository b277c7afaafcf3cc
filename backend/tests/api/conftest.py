"""API test fixtures - app over temporary roots, async HTTP client.

Invariants:
    - ASGITransport does not run the lifespan; create_app wires everything eagerly
    - Redirects are never followed (tests assert on 301/303 themselves)
"""

import json

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.main import create_app

IDENTITY_TYPE = "application/user.instance"


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def create_identity(client, public_key_b64):
    """await create_identity(name="a") -> POST /user/ response."""
    async def _create(name: str = "a", key: str | None = None):
        payload = json.dumps({"name": name, "key": key or public_key_b64})
        return await client.post(
            "/user/", content=payload, headers={"Content-Type": IDENTITY_TYPE},
        )
    return _create

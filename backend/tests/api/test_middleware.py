"""HTTP middleware - content type by suffix, cache headers, gzip, request log line."""

import logging

import pytest
from httpx import ASGITransport, AsyncClient

from app.api.middleware import CACHE_CONTROL, sniff_content_type
from app.main import create_app


@pytest.mark.parametrize("uri,expected", [
    ("/a.css", ("text/css", True)),
    ("/a.html", ("text/html", True)),
    ("/favicon.ico", ("image/x-icon", True)),
    ("/a.png", ("image/png", True)),
    ("/a.jpg", ("image/jpeg", True)),
    ("/a.wasm", ("application/wasm", True)),
    ("/js/a.js", ("application/javascript", True)),
    ("/a.json", ("application/json", False)),
    ("/user/?json", ("application/json", False)),
    ("/user/1/files", (None, False)),
])
def test_sniff_content_type(uri, expected):
    assert sniff_content_type(uri) == expected


@pytest.mark.asyncio
async def test_static_asset_headers(client):
    response = await client.get("/js/preload.js")
    assert response.headers["Content-Type"] == "application/javascript"
    assert response.headers["Cache-Control"] == CACHE_CONTROL


@pytest.mark.asyncio
async def test_no_cache_control_on_errors(client):
    response = await client.get("/js/missing.js")
    assert response.status_code == 404
    assert "Cache-Control" not in response.headers


@pytest.mark.asyncio
async def test_gzip_when_accepted(client, domain_roots):
    (domain_roots["static"] / "big.css").write_text("body { color: red; }\n" * 200)

    response = await client.get("/big.css", headers={"Accept-Encoding": "gzip"})
    assert response.headers["Content-Encoding"] == "gzip"
    assert response.text.startswith("body { color: red; }")  # httpx decodes

    response = await client.get("/big.css", headers={"Accept-Encoding": "identity"})
    assert "Content-Encoding" not in response.headers


@pytest.mark.asyncio
async def test_request_log_line(client, caplog):
    caplog.set_level(logging.INFO, logger="app.api.middleware")
    await client.get("/?json")
    messages = [r.getMessage() for r in caplog.records if r.name == "app.api.middleware"]
    assert any(m.startswith("GET /?json took ") and m.endswith("ms") for m in messages)


@pytest.mark.asyncio
async def test_request_log_can_be_disabled(settings, caplog):
    quiet = create_app(settings.model_copy(update={"log_requests": False}))
    caplog.set_level(logging.INFO, logger="app.api.middleware")
    async with AsyncClient(transport=ASGITransport(app=quiet), base_url="http://test") as ac:
        await ac.get("/")
    assert not [r for r in caplog.records if r.name == "app.api.middleware"]

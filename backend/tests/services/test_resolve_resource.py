"""Resource Resolver - tests for GET routing precedence across domains.

Tests cover:
    - User directories: 301 without "/", listing with "/"
    - User files: bytes + ETag, 304 on matching If-None-Match
    - Type redirect (303) and its fall-through when already canonical
    - Static then business fallback, business listing, version redirect, 404
    - Listing formats: ?json, ?module, bootstrap index
"""

import json

import pytest

from app.core.errors import ResourceNotFoundError
from app.core.etag import format_etag
from app.core.outcomes import Content, NotModified, Redirect


@pytest.fixture
def resolver(document_store):
    return document_store.resolver


# ─── User domain ─────────────────────────────────────────────────

def test_root_without_query_serves_index(resolver, index_html):
    outcome = resolver.resolve("/")
    assert outcome == Content(body=index_html, media_type="text/html")


def test_root_json_lists_user_domain(resolver):
    outcome = resolver.resolve("/", "json")
    assert outcome.media_type == "application/json"
    assert set(json.loads(outcome.body)) == {"files/", "profile/", "user/"}


def test_user_directory_without_slash_redirects(resolver):
    assert resolver.resolve("/files") == Redirect(location="/files/", status_code=301)


def test_user_collection_listing(resolver, make_identity):
    make_identity("1", "KEY")
    outcome = resolver.resolve("/user/", "json")
    assert set(json.loads(outcome.body)) == {"1/", "type"}


def test_user_listing_as_module(resolver):
    outcome = resolver.resolve("/user/", "module")
    assert outcome.media_type == "application/javascript"
    assert outcome.body.startswith(b"'use strict';\nconst data=")


def test_user_file_served_with_etag(resolver, domain_roots, make_identity):
    make_identity("1", "KEY")
    outcome = resolver.resolve("/user/1/type")
    assert outcome.body == b"user/instance"
    mtime = (domain_roots["user"] / "user" / "1" / "type").stat().st_mtime_ns
    assert outcome.etag == format_etag(mtime)


def test_user_file_not_modified(resolver, make_identity):
    make_identity("1", "KEY")
    etag = resolver.resolve("/user/1/type").etag
    assert resolver.resolve("/user/1/type", "", etag) == NotModified()
    assert isinstance(resolver.resolve("/user/1/type", "", 'W/"stale"'), Content)


# ─── Type redirect ───────────────────────────────────────────────

def test_type_redirect_from_identity(resolver, make_identity):
    make_identity("1", "KEY")
    assert resolver.resolve("/user/1/page.js") == Redirect(
        location="/user/instance/page.js", status_code=303,
    )


def test_type_redirect_from_collection_marker(resolver):
    assert resolver.resolve("/user/files") == Redirect(
        location="/users/files", status_code=303,
    )


def test_canonical_type_path_falls_through(resolver, domain_roots):
    # /profile has type "profile": /profile/page.js is already canonical
    outcome = resolver.resolve("/profile/page.js")
    page = domain_roots["business"] / "profile" / "page.js"
    assert outcome == Content(body=page.read_bytes())


def test_canonical_type_path_reaches_business(resolver, make_identity):
    make_identity("1", "KEY")
    target = resolver.resolve("/user/1/page.js").location
    assert resolver.resolve(target).body == b"// user page\n"


@pytest.mark.parametrize("marker", ["/2130706433", "//evil.example", "\\evil"])
def test_type_marker_never_forms_off_site_redirect(resolver, domain_roots, marker):
    (domain_roots["user"] / "files" / "type").write_text(marker)
    with pytest.raises(ResourceNotFoundError):
        resolver.resolve("/files/page.js")


# ─── Static & business ───────────────────────────────────────────

def test_static_file(resolver, domain_roots):
    preload = domain_roots["static"] / "js" / "preload.js"
    assert resolver.resolve("/js/preload.js") == Content(body=preload.read_bytes())


def test_static_file_has_no_etag(resolver):
    assert resolver.resolve("/js/preload.js").etag is None


def test_business_directory_listing(resolver, index_html):
    assert resolver.resolve("/folder/instance/") == Content(
        body=index_html, media_type="text/html",
    )
    listing = resolver.resolve("/folder/instance/", "json")
    assert json.loads(listing.body) == ["page.js"]


def test_unknown_paths_are_not_found(resolver):
    with pytest.raises(ResourceNotFoundError):
        resolver.resolve("/users/")
    with pytest.raises(ResourceNotFoundError):
        resolver.resolve("/users/page.js")


def test_traversal_is_not_found(resolver):
    with pytest.raises(ResourceNotFoundError):
        resolver.resolve("/../static/index.html")


def test_business_version_redirect(resolver, domain_roots):
    widget = domain_roots["business"] / "widget"
    widget.mkdir()
    (widget / "info.json").write_text('{"name":"widget","currentVersion":"3"}')
    assert resolver.resolve("/widget/page.js") == Redirect(
        location="versions/3/page.js", status_code=303,
    )


def test_business_info_without_version_is_not_found(resolver, domain_roots):
    widget = domain_roots["business"] / "widget"
    widget.mkdir()
    (widget / "info.json").write_text('{"name":"widget"}')
    with pytest.raises(ResourceNotFoundError):
        resolver.resolve("/widget/page.js")


def test_unreadable_business_info_is_not_found(resolver, domain_roots):
    widget = domain_roots["business"] / "widget"
    widget.mkdir()
    (widget / "info.json").write_text("{broken")
    with pytest.raises(ResourceNotFoundError):
        resolver.resolve("/widget/page.js")


# ─── Listing contents ────────────────────────────────────────────

def test_listing_matches_children_regardless_of_order(resolver, domain_roots):
    files = domain_roots["user"] / "files"
    for name in ("b", "a", "c"):
        (files / name).mkdir()
    (files / "notes.txt").write_bytes(b"")
    outcome = resolver.resolve("/files/", "json")
    assert set(json.loads(outcome.body)) == {"a/", "b/", "c/", "notes.txt"}

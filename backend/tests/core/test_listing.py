"""Collection Listing - tests for JSON and module rendering."""

import json

from app.core.listing import render_json, render_module


def test_render_json_keeps_order_and_suffixes():
    body = render_json(["user/", "type", "files/"])
    assert body == b'["user/","type","files/"]'


def test_render_json_escapes_quotes():
    body = render_json(['we"ird', "ok/"])
    assert json.loads(body) == ['we"ird', "ok/"]


def test_render_json_empty_collection():
    assert render_json([]) == b"[]"


def test_render_module_exports_data():
    body = render_module(["a/", "b"]).decode()
    assert body == "'use strict';\nconst data=[\"a/\",\"b\"]\nexport {data}"

"""Collection Listing - renders child names as JSON or as a JavaScript module.

Invariants:
    - Names are emitted in the order given (directory order, never re-sorted)
    - Directory children carry a trailing "/"
    - Output is valid JSON: names are escaped by json.dumps, not concatenated
"""

import json


def render_json(names: list[str]) -> bytes:
    """`["a/","b"]` with no whitespace."""
    return json.dumps(names, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def render_module(names: list[str]) -> bytes:
    """ES module exporting the listing as `data`."""
    listing = render_json(names).decode("utf-8")
    return f"'use strict';\nconst data={listing}\nexport {{data}}".encode("utf-8")

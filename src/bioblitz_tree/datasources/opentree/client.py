"""Open Tree of Life API v3 client constants and request helper.

API docs: https://github.com/OpenTreeOfLife/germinator/wiki/Open-Tree-of-Life-Web-APIs

All v3 endpoints are JSON POSTs, sent once like every other request.
"""

from __future__ import annotations

from typing import Any

import requests

from bioblitz_tree.services.http import session

API_BASE = "https://api.opentreeoflife.org/v3"

MATCH_NAMES = f"{API_BASE}/tnrs/match_names"
NODE_INFO = f"{API_BASE}/tree_of_life/node_info"
INDUCED_SUBTREE = f"{API_BASE}/tree_of_life/induced_subtree"

# TNRS accepts at most this many names per request
MAX_NAMES_PER_REQUEST = 10_000


def post(url: str, payload: dict[str, Any]) -> requests.Response:
    """POST a JSON payload. The caller decides what a non-2xx status means."""
    return session.post(url, json=payload)


def post_json(url: str, payload: dict[str, Any]) -> dict[str, Any]:
    """POST a JSON payload and return the decoded body, raising on HTTP errors."""
    resp = post(url, payload)
    resp.raise_for_status()
    data: dict[str, Any] = resp.json()
    return data

"""PhyloPic API v2 client constants and GET helper.

API docs: https://api.phylopic.org/docs

Requests without a ``build`` parameter are redirected to the current build;
``requests`` follows the redirect.
"""

from __future__ import annotations

from typing import Any

from bioblitz_tree.services.http import session

API_BASE = "https://api.phylopic.org"

# Creative Commons license URLs start with one of these
CC_PREFIXES = ("https://creativecommons.org/", "http://creativecommons.org/")


def get(endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
    """GET a PhyloPic API endpoint and return the decoded body."""
    url = f"{API_BASE}/{endpoint.lstrip('/')}"
    resp = session.get(url, params=params or {})
    resp.raise_for_status()
    data: dict[str, Any] = resp.json()
    return data


def get_bytes(url: str) -> bytes:
    """Download a file (e.g. a raster image) from an absolute URL."""
    resp = session.get(url)
    resp.raise_for_status()
    return resp.content

"""
iNaturalist API client.

Low-level HTTP client for the iNaturalist API v1: request building and rate
limiting. Pagination over a project's observations lives in
``observations.py``.

API docs: https://api.inaturalist.org/v1/docs/
Rate limits: ~1 req/sec, 10k/day
Recommended practices: https://www.inaturalist.org/pages/api+recommended+practices
"""

from __future__ import annotations

import time
from typing import Any

from bioblitz_tree.services.http import session

# ---------------------------------------------------------------------------
# API configuration
# ---------------------------------------------------------------------------
API_BASE = "https://api.inaturalist.org/v1"
MAX_PER_PAGE = 200  # API maximum for /observations
WEB_BASE = "https://www.inaturalist.org"

# ---------------------------------------------------------------------------
# Rate limiting (module-level state)
# ---------------------------------------------------------------------------
_last_request_time: float = 0.0
MIN_REQUEST_INTERVAL: float = 1.1  # seconds; stay safely under 1 req/s


def _rate_limit() -> None:
    """Sleep if needed to honour the ~1 req/s rate limit."""
    global _last_request_time  # noqa: PLW0603
    now = time.monotonic()
    elapsed = now - _last_request_time
    if elapsed < MIN_REQUEST_INTERVAL:
        time.sleep(MIN_REQUEST_INTERVAL - elapsed)
    _last_request_time = time.monotonic()


def _get(endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
    """Make a rate-limited GET request to the iNaturalist API v1."""
    _rate_limit()
    url = f"{API_BASE}/{endpoint}"
    resp = session.get(url, params=params or {})
    resp.raise_for_status()
    data: dict[str, Any] = resp.json()
    return data


def get_observations(params: dict[str, Any]) -> dict[str, Any]:
    """GET /observations: search observations."""
    return _get("observations", params)

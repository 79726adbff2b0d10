"""Project observation fetching and parsing."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from bioblitz_tree.datasources.inaturalist import client

# =============================================================================
# Data Model
# =============================================================================


@dataclass
class Observation:
    """A single sighting from an iNaturalist project.

    ``scientific_name`` is None when the observation has no identification.
    """

    id: int
    scientific_name: str | None
    taxon_id: int | None = None
    taxon_rank: str | None = None
    created_at: str | None = None
    url: str = ""


# =============================================================================
# Parsing
# =============================================================================


def _parse_observation(obs: dict[str, Any]) -> Observation:
    """Parse a single observation result. A missing taxon gives a null name."""
    taxon = obs.get("taxon") or {}
    return Observation(
        id=obs["id"],
        scientific_name=taxon.get("name"),
        taxon_id=taxon.get("id"),
        taxon_rank=taxon.get("rank"),
        created_at=obs.get("created_at"),
        url=f"{client.WEB_BASE}/observations/{obs['id']}",
    )


def extract_names(observations: list[Observation]) -> list[str]:
    """Distinct non-null scientific names, sorted."""
    return sorted({o.scientific_name for o in observations if o.scientific_name})


# =============================================================================
# API Fetching
# =============================================================================


def page_count(total_results: int, per_page: int = client.MAX_PER_PAGE) -> int:
    """Number of pages needed to cover ``total_results``."""
    if total_results <= 0:
        return 0
    return math.ceil(total_results / per_page)


def fetch_total_results(project_id: str | int) -> int:
    """Ask the API how many observations a project has (no page parameter)."""
    data = client.get_observations({"project_id": project_id})
    total: int = data["total_results"]
    return total


def fetch_project_page(project_id: str | int, page: int) -> list[dict[str, Any]]:
    """
    Fetch one 1-indexed page of a project's observations, newest first.

    Returns the raw ``results`` list.
    """
    params: dict[str, Any] = {
        "project_id": project_id,
        "page": page,
        "per_page": client.MAX_PER_PAGE,
        "order": "desc",
        "order_by": "created_at",
    }
    data = client.get_observations(params)
    results: list[dict[str, Any]] = data.get("results", [])
    return results


def fetch_project_observations(project_id: str | int) -> list[Observation]:
    """
    Fetch every observation of a project.

    One metadata request learns ``total_results``; then one request per page.
    Pages are concatenated in request order. Any failed request raises and
    nothing partial is returned.

    Args:
        project_id: iNaturalist project slug or numeric id.

    Returns:
        List of Observation objects (unidentified ones have a null name).
    """
    total = fetch_total_results(project_id)
    raw: list[dict[str, Any]] = []
    for page in range(1, page_count(total) + 1):
        raw.extend(fetch_project_page(project_id, page))
    return [_parse_observation(obs) for obs in raw]

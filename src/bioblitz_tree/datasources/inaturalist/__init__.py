"""iNaturalist project observation data source.

Fetches every observation of one iNaturalist project (a BioBlitz or City
Nature Challenge) and extracts the identified scientific names.

Public API:
  - client: Low-level HTTP (rate-limited)
  - observations: Observation, fetch_project_observations, extract_names, page_count
"""

from bioblitz_tree.datasources.inaturalist.client import MAX_PER_PAGE
from bioblitz_tree.datasources.inaturalist.observations import (
    Observation,
    extract_names,
    fetch_project_observations,
    fetch_project_page,
    fetch_total_results,
    page_count,
)

__all__ = [
    "MAX_PER_PAGE",
    "Observation",
    "extract_names",
    "fetch_project_observations",
    "fetch_project_page",
    "fetch_total_results",
    "page_count",
]

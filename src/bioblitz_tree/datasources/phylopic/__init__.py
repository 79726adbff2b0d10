"""PhyloPic silhouette data source.

Looks up illustrations by species/genus name, fetches their attribution
(contributor + license) and raster image.

Public API:
  - client: API base URL, GET helpers
  - images: Attribution, normalize_license, get_image_uuid, get_attribution,
    fetch_silhouette
"""

from bioblitz_tree.datasources.phylopic.images import (
    PUBLIC_DOMAIN,
    Attribution,
    fetch_silhouette,
    get_attribution,
    get_image_uuid,
    normalize_license,
)

__all__ = [
    "PUBLIC_DOMAIN",
    "Attribution",
    "fetch_silhouette",
    "get_attribution",
    "get_image_uuid",
    "normalize_license",
]

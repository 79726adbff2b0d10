"""PhyloPic silhouettes: name -> image uuid -> attribution + raster."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from typing import TYPE_CHECKING, Any

import matplotlib.image as mpimg

from bioblitz_tree.datasources.phylopic import client
from bioblitz_tree.errors import AttributionMissingError, IllustrationNotFoundError

if TYPE_CHECKING:
    import numpy as np

PUBLIC_DOMAIN = "public domain"

# =============================================================================
# Data Model
# =============================================================================


@dataclass
class Attribution:
    """Who drew a silhouette and under which license."""

    uuid: str
    contributor: str
    license_url: str
    attribution: str | None = None

    @property
    def license_code(self) -> str:
        return normalize_license(self.license_url)


# =============================================================================
# License normalization
# =============================================================================


def normalize_license(url: str) -> str:
    """
    Turn a Creative Commons license URL into a short code.

    ``https://creativecommons.org/licenses/by-nc/4.0/`` -> ``"CC BY NC"``;
    any ``publicdomain`` URL (CC0, PDM) -> ``"public domain"``.
    Version numbers are dropped.

    Raises:
        AttributionMissingError: ``url`` is not a creativecommons.org license.
    """
    path = url.strip()
    for prefix in client.CC_PREFIXES:
        if path.startswith(prefix):
            path = path[len(prefix) :]
            break
    else:
        msg = f"Not a Creative Commons license URL: {url!r}"
        raise AttributionMissingError(msg)

    if "publicdomain" in path:
        return PUBLIC_DOMAIN

    segments = [s for s in path.strip("/").split("/") if s and s != "licenses"]
    if not segments:
        msg = f"Unrecognised license URL: {url!r}"
        raise AttributionMissingError(msg)
    slug = segments[0]
    return "CC " + " ".join(part.upper() for part in slug.split("-"))


# =============================================================================
# Parsing
# =============================================================================


def _uuid_from_href(href: str) -> str:
    """``/images/<uuid>?build=123`` -> ``<uuid>``."""
    return href.split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]


def _parse_attribution(uuid: str, image: dict[str, Any]) -> Attribution:
    links = image.get("_links") or {}
    embedded = image.get("_embedded") or {}

    contributor = (embedded.get("contributor") or {}).get("name") or (
        links.get("contributor") or {}
    ).get("title")
    license_url = (links.get("license") or {}).get("href")

    if not contributor:
        msg = f"PhyloPic image {uuid} has no contributor"
        raise AttributionMissingError(msg)
    if not license_url:
        msg = f"PhyloPic image {uuid} has no license"
        raise AttributionMissingError(msg)

    return Attribution(
        uuid=uuid,
        contributor=contributor,
        license_url=license_url,
        attribution=image.get("attribution"),
    )


def _raster_width(entry: dict[str, Any]) -> int:
    """Width from a ``sizes`` string like ``"512x341"`` (0 if unparseable)."""
    try:
        return int(str(entry.get("sizes", "")).split("x", 1)[0])
    except ValueError:
        return 0


def _pick_raster(rasters: list[dict[str, Any]], max_width: int) -> dict[str, Any]:
    """Largest raster no wider than ``max_width``, else the smallest available."""
    by_width = sorted(rasters, key=_raster_width)
    fitting = [r for r in by_width if _raster_width(r) <= max_width]
    return fitting[-1] if fitting else by_width[0]


# =============================================================================
# API Fetching
# =============================================================================


def get_image_uuid(name: str) -> str:
    """
    Find the primary silhouette for a species or genus name.

    Raises:
        IllustrationNotFoundError: No PhyloPic node (or no image) for ``name``.
    """
    data = client.get(
        "nodes",
        {"filter_name": name.lower(), "page": 0, "embed_items": "true"},
    )
    items: list[dict[str, Any]] = (data.get("_embedded") or {}).get("items") or []
    for item in items:
        href = ((item.get("_links") or {}).get("primaryImage") or {}).get("href")
        if href:
            return _uuid_from_href(href)
    msg = f"No PhyloPic illustration for {name!r}"
    raise IllustrationNotFoundError(msg)


def get_image(uuid: str) -> dict[str, Any]:
    """GET /images/{uuid} with the contributor embedded."""
    return client.get(f"images/{uuid}", {"embed_contributor": "true"})


def get_attribution(uuid: str) -> Attribution:
    """Contributor name and license URL of one image."""
    return _parse_attribution(uuid, get_image(uuid))


def fetch_silhouette(uuid: str, *, max_width: int = 512) -> np.ndarray:
    """
    Download a silhouette raster as an RGBA array.

    Raises:
        IllustrationNotFoundError: The image has no raster files.
    """
    image = get_image(uuid)
    rasters: list[dict[str, Any]] = (image.get("_links") or {}).get("rasterFiles") or []
    if not rasters:
        msg = f"PhyloPic image {uuid} has no raster files"
        raise IllustrationNotFoundError(msg)
    raster = _pick_raster(rasters, max_width)
    content = client.get_bytes(raster["href"])
    return mpimg.imread(BytesIO(content), format="png")

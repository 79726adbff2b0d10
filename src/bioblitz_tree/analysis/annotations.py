"""Join the induced tree with the clade configuration and PhyloPic attributions.

Produces the two annotation tiers the renderer draws:

  - HighlightAnnotation: broad clade, shaded wedge, one palette color each
  - CladeLabel: narrow clade, silhouette + text, credited in the caption

and the caption text crediting every silhouette.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bioblitz_tree.errors import (
    AttributionMissingError,
    CladeNotInTreeError,
    IllustrationNotFoundError,
)
from bioblitz_tree.renderers.palette import region_colors
from bioblitz_tree.schemas import MissingCladePolicy

if TYPE_CHECKING:
    from bioblitz_tree.datasources.phylopic import Attribution
    from bioblitz_tree.phylotree import PhyloTree
    from bioblitz_tree.schemas import HighlightClade, LabelledClade, ReportConfig

# =============================================================================
# Data Models
# =============================================================================


@dataclass
class HighlightAnnotation:
    """A shaded wedge behind every tip of one clade."""

    node: int
    clade: str
    display_name: str
    color: str


@dataclass
class CladeLabel:
    """A silhouette and name placed beside one clade."""

    node: int
    clade: str
    display_name: str
    illustration_uuid: str
    attribution: Attribution

    @property
    def attribution_text(self) -> str:
        return attribution_text(self.display_name, self.attribution)


@dataclass
class Annotations:
    """Everything the renderer needs besides the tree and the style."""

    highlights: list[HighlightAnnotation] = field(default_factory=list)
    labels: list[CladeLabel] = field(default_factory=list)
    caption: str = ""
    skipped: list[str] = field(default_factory=list)


# =============================================================================
# Node lookup
# =============================================================================


def resolve_clade(
    tree: PhyloTree,
    clade: str,
    policy: MissingCladePolicy = MissingCladePolicy.SKIP,
) -> int | None:
    """
    Node id of a configured clade, or None when this run's tree lacks it.

    Raises:
        CladeNotInTreeError: The clade is missing and ``policy`` is ERROR.
    """
    node = tree.node_index(clade)
    if node is None and policy == MissingCladePolicy.ERROR:
        raise CladeNotInTreeError(clade)
    return node


def present_clades(tree: PhyloTree, clades: list[LabelledClade]) -> list[LabelledClade]:
    """Configured labelled clades that are internal nodes of ``tree``."""
    return [c for c in clades if tree.node_index(c.clade) is not None]


# =============================================================================
# Annotation tiers
# =============================================================================


def build_highlights(
    tree: PhyloTree,
    clades: list[HighlightClade],
    palette: list[str],
    policy: MissingCladePolicy = MissingCladePolicy.SKIP,
) -> tuple[list[HighlightAnnotation], list[str]]:
    """
    Assign one palette color per configured region and locate each in the tree.

    Colors follow configuration order, so a clade keeps its color whether or
    not the other regions are present in this run.

    Returns:
        (highlights found in the tree, clade names skipped).
    """
    colors = region_colors(len(clades), palette)
    highlights: list[HighlightAnnotation] = []
    skipped: list[str] = []
    for clade, color in zip(clades, colors, strict=True):
        node = resolve_clade(tree, clade.clade, policy)
        if node is None:
            skipped.append(clade.clade)
            continue
        highlights.append(
            HighlightAnnotation(
                node=node, clade=clade.clade, display_name=clade.label, color=color
            )
        )
    return highlights, skipped


def build_clade_labels(
    tree: PhyloTree,
    clades: list[LabelledClade],
    uuids: dict[str, str],
    attributions: dict[str, Attribution],
    policy: MissingCladePolicy = MissingCladePolicy.SKIP,
) -> tuple[list[CladeLabel], list[str]]:
    """
    Locate each labelled clade and attach its illustration and attribution.

    Args:
        tree: This run's tree.
        clades: Configured labelled clades.
        uuids: Clade name -> PhyloPic image uuid.
        attributions: Image uuid -> Attribution.
        policy: Missing-clade policy.

    Returns:
        (labels found in the tree, clade names skipped).

    Raises:
        IllustrationNotFoundError: A present clade has no image uuid.
        AttributionMissingError: An image uuid has no attribution.
    """
    labels: list[CladeLabel] = []
    skipped: list[str] = []
    for clade in clades:
        node = resolve_clade(tree, clade.clade, policy)
        if node is None:
            skipped.append(clade.clade)
            continue

        uuid = uuids.get(clade.clade)
        if uuid is None:
            msg = f"No illustration resolved for clade {clade.clade!r}"
            raise IllustrationNotFoundError(msg)
        attribution = attributions.get(uuid)
        if attribution is None:
            msg = f"No attribution for illustration {uuid} ({clade.clade})"
            raise AttributionMissingError(msg)

        labels.append(
            CladeLabel(
                node=node,
                clade=clade.clade,
                display_name=clade.label,
                illustration_uuid=uuid,
                attribution=attribution,
            )
        )
    return labels, skipped


# =============================================================================
# Caption
# =============================================================================


def attribution_text(display_name: str, attribution: Attribution) -> str:
    """``"{clade}: {contributor}, {license code}"``."""
    return f"{display_name}: {attribution.contributor}, {attribution.license_code}"


def build_caption(labels: list[CladeLabel], credit: str) -> str:
    """Credit sentence followed by every silhouette's attribution, A-Z by clade."""
    texts = [label.attribution_text for label in sorted(labels, key=lambda lb: lb.display_name)]
    if not texts:
        return credit
    return f"{credit} " + "; ".join(texts) + "."


def annotate(
    tree: PhyloTree,
    config: ReportConfig,
    uuids: dict[str, str],
    attributions: dict[str, Attribution],
) -> Annotations:
    """Build both annotation tiers and the caption for one tree."""
    highlights, skipped_highlights = build_highlights(
        tree, config.highlights, config.style.palette, config.on_missing_clade
    )
    labels, skipped_labels = build_clade_labels(
        tree, config.labelled, uuids, attributions, config.on_missing_clade
    )
    return Annotations(
        highlights=highlights,
        labels=labels,
        caption=build_caption(labels, config.style.caption_credit),
        skipped=skipped_highlights + skipped_labels,
    )

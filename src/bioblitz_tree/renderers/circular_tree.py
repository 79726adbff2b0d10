"""Circular dendrogram renderer.

Lays the tree out as a radial cladogram (tips aligned on the outer circle,
root at the centre), then draws, back to front: highlight wedges, branches,
tip labels, clade silhouettes and their names, and the title/caption.

``build_figure`` is pure: it takes the tree, the annotations, the decoded
silhouettes and a ``FigureStyle`` and returns a ``matplotlib.figure.Figure``
without touching pyplot or a display. ``save_figure`` writes it out.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import matplotlib as mpl
from matplotlib.collections import LineCollection
from matplotlib.figure import Figure
from matplotlib.offsetbox import AnnotationBbox, OffsetImage
from matplotlib.patches import Patch, Wedge

from bioblitz_tree.errors import IllustrationNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

    import numpy as np

    from bioblitz_tree.analysis.annotations import Annotations, CladeLabel, HighlightAnnotation
    from bioblitz_tree.phylotree import PhyloTree
    from bioblitz_tree.schemas import FigureStyle

ARC_PRECISION = 15  # points per curved node bar
TIP_LABEL_GAP = 0.15  # between outermost tip and its label, in depth units
SVG_HASH_SALT = "bioblitz-tree"

# =============================================================================
# Layout
# =============================================================================


@dataclass
class CircularLayout:
    """Polar position of every node: radius in depth units, angle in radians."""

    radius: dict[int, float]
    angle: dict[int, float]
    depth: int
    tip_step: float

    def xy(self, node: int, radius: float | None = None) -> tuple[float, float]:
        r = self.radius[node] if radius is None else radius
        theta = self.angle[node]
        return r * math.cos(theta), r * math.sin(theta)


def layout_circular(tree: PhyloTree, start_angle: float = 90.0) -> CircularLayout:
    """
    Place tips evenly around the circle (clockwise, first tip at ``start_angle``
    degrees) and internal nodes at the mean angle of their children.

    No branch lengths are used: a node's radius is ``depth - height`` where
    height counts edges down to its deepest tip, so all tips share the outer
    circle.
    """
    tips = tree.tip_count
    step = 2 * math.pi / tips if tips else 0.0
    start = math.radians(start_angle)

    angle: dict[int, float] = {t: start - (t - 1) * step for t in range(1, tips + 1)}
    height: dict[int, int] = dict.fromkeys(range(1, tips + 1), 0)

    # Internal ids are preorder, so descending ids visit children before parents
    internals = range(tips + tree.node_count, tips, -1)
    for node in internals:
        children = tree.children(node)
        height[node] = 1 + max(height[c] for c in children)
        angle[node] = sum(angle[c] for c in children) / len(children)

    depth = height[tree.root]
    radius = {node: float(depth - h) for node, h in height.items()}
    return CircularLayout(radius=radius, angle=angle, depth=depth, tip_step=step)


def _tip_span(tree: PhyloTree, layout: CircularLayout, node: int) -> tuple[float, float]:
    """Angular extent (radians, low -> high) covering every tip below ``node``."""
    angles = [layout.angle[t] for t in tree.descendant_tips(node)]
    half = layout.tip_step / 2
    return min(angles) - half, max(angles) + half


def _text_rotation(theta: float) -> tuple[float, str]:
    """Rotation (degrees) and horizontal alignment keeping radial text upright."""
    degrees = math.degrees(theta) % 360
    if 90 < degrees < 270:
        return degrees - 180, "right"
    return degrees, "left"


# =============================================================================
# Drawing
# =============================================================================


def _draw_branches(ax: Any, tree: PhyloTree, layout: CircularLayout, style: FigureStyle) -> None:
    segments: list[tuple[tuple[float, float], tuple[float, float]]] = []
    for parent, child in tree.edges:
        # radial segment along the child's angle
        segments.append((layout.xy(child, layout.radius[parent]), layout.xy(child)))

    for node in range(tree.tip_count + 1, tree.tip_count + tree.node_count + 1):
        children = tree.children(node)
        lo = min(layout.angle[c] for c in children)
        hi = max(layout.angle[c] for c in children)
        if hi == lo:
            continue
        r = layout.radius[node]
        thetas = [lo + (hi - lo) * i / (ARC_PRECISION - 1) for i in range(ARC_PRECISION)]
        points = [(r * math.cos(t), r * math.sin(t)) for t in thetas]
        segments.extend(zip(points, points[1:]))

    ax.add_collection(
        LineCollection(
            segments,
            linewidths=style.line_width,
            colors=style.line_color,
            capstyle="projecting",
            zorder=1,
        )
    )


def _draw_highlights(
    ax: Any,
    tree: PhyloTree,
    layout: CircularLayout,
    highlights: list[HighlightAnnotation],
    style: FigureStyle,
) -> list[Patch]:
    handles: list[Patch] = []
    outer = layout.depth + style.wedge_padding
    for hl in highlights:
        lo, hi = _tip_span(tree, layout, hl.node)
        inner = max(layout.radius[hl.node] - 0.5, 0.0)
        ax.add_patch(
            Wedge(
                (0.0, 0.0),
                outer,
                math.degrees(lo),
                math.degrees(hi),
                width=outer - inner,
                facecolor=hl.color,
                edgecolor="none",
                alpha=style.highlight_alpha,
                zorder=0,
            )
        )
        handles.append(
            Patch(facecolor=hl.color, alpha=style.highlight_alpha, label=hl.display_name)
        )
    return handles


def _draw_tip_labels(ax: Any, tree: PhyloTree, layout: CircularLayout, style: FigureStyle) -> None:
    r = layout.depth + TIP_LABEL_GAP
    for tip in range(1, tree.tip_count + 1):
        x, y = layout.xy(tip, r)
        rotation, ha = _text_rotation(layout.angle[tip])
        ax.text(
            x,
            y,
            tree.label(tip),
            fontsize=style.tip_label_size,
            fontstyle="italic",
            rotation=rotation,
            rotation_mode="anchor",
            ha=ha,
            va="center",
            zorder=2,
        )


def _draw_clade_labels(
    ax: Any,
    tree: PhyloTree,
    layout: CircularLayout,
    labels: list[CladeLabel],
    silhouettes: dict[str, np.ndarray],
    style: FigureStyle,
) -> None:
    for label in labels:
        image = silhouettes.get(label.illustration_uuid)
        if image is None:
            msg = f"No silhouette loaded for {label.display_name} ({label.illustration_uuid})"
            raise IllustrationNotFoundError(msg)

        lo, hi = _tip_span(tree, layout, label.node)
        theta = (lo + hi) / 2
        r_image = layout.depth + style.image_offset
        r_text = layout.depth + style.text_offset

        ax.add_artist(
            AnnotationBbox(
                OffsetImage(image, zoom=style.image_zoom),
                (r_image * math.cos(theta), r_image * math.sin(theta)),
                frameon=False,
                zorder=3,
            )
        )
        ax.text(
            r_text * math.cos(theta),
            r_text * math.sin(theta),
            label.display_name,
            fontsize=style.clade_label_size,
            ha="center",
            va="center",
            zorder=3,
        )


def _rc(style: FigureStyle) -> dict[str, Any]:
    """Matplotlib settings scoped to one render/save; text stays text in SVG/PDF."""
    return {
        "font.family": style.font_family,
        "svg.fonttype": "none",
        "svg.hashsalt": SVG_HASH_SALT,
        "pdf.fonttype": 42,
    }


def build_figure(
    tree: PhyloTree,
    annotations: Annotations,
    silhouettes: dict[str, np.ndarray],
    style: FigureStyle,
) -> Figure:
    """
    Draw the annotated circular tree.

    Args:
        tree: Parsed induced subtree.
        annotations: Highlight wedges, clade labels and caption.
        silhouettes: Image uuid -> RGBA array for every clade label.
        style: Figure-wide styling.

    Raises:
        IllustrationNotFoundError: A clade label's silhouette is missing.
    """
    with mpl.rc_context(_rc(style)):
        fig = Figure(figsize=(style.size, style.size), dpi=style.dpi)
        ax = fig.add_axes((0.05, 0.1, 0.9, 0.8))
        ax.set_aspect("equal")
        ax.set_axis_off()

        layout = layout_circular(tree, style.start_angle)
        handles = _draw_highlights(ax, tree, layout, annotations.highlights, style)
        _draw_branches(ax, tree, layout, style)
        if style.show_tip_labels:
            _draw_tip_labels(ax, tree, layout, style)
        _draw_clade_labels(ax, tree, layout, annotations.labels, silhouettes, style)

        extent = layout.depth + max(style.text_offset, style.wedge_padding) + 1.0
        ax.set_xlim(-extent, extent)
        ax.set_ylim(-extent, extent)

        if handles:
            ax.legend(handles=handles, loc="lower right", frameon=False, fontsize=style.clade_label_size)

        fig.suptitle(style.title, fontsize=style.title_size, y=0.975)
        if style.subtitle:
            fig.text(0.5, 0.93, style.subtitle, ha="center", fontsize=style.title_size * 0.6)
        if annotations.caption:
            fig.text(
                0.05,
                0.02,
                annotations.caption,
                ha="left",
                va="bottom",
                fontsize=style.caption_size,
                wrap=True,
            )
    return fig


def save_figure(fig: Figure, svg_path: Path, pdf_path: Path, style: FigureStyle) -> list[Path]:
    """
    Write the vector (SVG) and print (PDF) documents.

    Creation dates are left out so identical inputs give identical text.
    """
    written: list[Path] = []
    with mpl.rc_context(_rc(style)):
        for path, metadata in (
            (svg_path, {"Date": None}),
            (pdf_path, {"CreationDate": None}),
        ):
            path.parent.mkdir(parents=True, exist_ok=True)
            fig.savefig(path, metadata=metadata)
            written.append(path)
    return written

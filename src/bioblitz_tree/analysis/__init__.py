"""Cross-datasource joins.

Each module combines outputs from 2+ datasources into structures renderers
can consume directly.

Dependency rule: analysis/ imports datasource *models* only. It never
fetches data or produces figures/HTML.

Modules:
  - annotations: induced tree + clade config + PhyloPic attributions ->
    highlight wedges, clade labels, caption
"""

from bioblitz_tree.analysis.annotations import (
    Annotations,
    CladeLabel,
    HighlightAnnotation,
    annotate,
    attribution_text,
    build_caption,
    build_clade_labels,
    build_highlights,
    present_clades,
    resolve_clade,
)

__all__ = [
    "Annotations",
    "CladeLabel",
    "HighlightAnnotation",
    "annotate",
    "attribution_text",
    "build_caption",
    "build_clade_labels",
    "build_highlights",
    "present_clades",
    "resolve_clade",
]

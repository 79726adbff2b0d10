"""Clades highlighted and labelled on the report figure.

Labels must match Open Tree synthetic-tree node names exactly (as returned by
``induced_subtree`` with ``label_format="name"``, underscores read as spaces).
"""

from bioblitz_tree.schemas import FigureStyle, HighlightClade, LabelledClade, ReportConfig

# Broad groups drawn as shaded wedges, one palette color each
HIGHLIGHT_CLADES: list[HighlightClade] = [
    HighlightClade(clade="Arthropoda", display_name="Arthropods"),
    HighlightClade(clade="Mollusca", display_name="Molluscs"),
    HighlightClade(clade="Annelida", display_name="Segmented worms"),
    HighlightClade(clade="Chordata", display_name="Chordates"),
    HighlightClade(clade="Cnidaria", display_name="Cnidarians"),
]

# Narrower groups marked with a silhouette of a familiar member
LABELLED_CLADES: list[LabelledClade] = [
    LabelledClade(clade="Insecta", display_name="Insects", illustration_name="Apis mellifera"),
    LabelledClade(clade="Arachnida", display_name="Arachnids", illustration_name="Araneus diadematus"),
    LabelledClade(clade="Isopoda", display_name="Woodlice", illustration_name="Oniscus asellus"),
    LabelledClade(clade="Gastropoda", display_name="Snails & slugs", illustration_name="Cepaea nemoralis"),
    LabelledClade(clade="Aves", display_name="Birds", illustration_name="Turdus merula"),
    LabelledClade(clade="Mammalia", display_name="Mammals", illustration_name="Vulpes vulpes"),
    LabelledClade(clade="Amphibia", display_name="Amphibians", illustration_name="Rana temporaria"),
    LabelledClade(clade="Actinopterygii", display_name="Ray-finned fish", illustration_name="Esox lucius"),
]

DEFAULT_STYLE = FigureStyle(
    title="The tree of life, as seen by one BioBlitz",
    subtitle="Every animal identified on iNaturalist, placed on the Open Tree of Life",
    caption_credit=(
        "Observations: iNaturalist. Phylogeny: Open Tree of Life synthetic tree. "
        "Silhouettes from PhyloPic (https://www.phylopic.org)."
    ),
)

DEFAULT_REPORT_CONFIG = ReportConfig(
    highlights=HIGHLIGHT_CLADES,
    labelled=LABELLED_CLADES,
    style=DEFAULT_STYLE,
)

"""Qualitative palette and region color assignment for clade highlights."""

from __future__ import annotations

from bioblitz_tree.errors import PaletteTooSmallError

# ColorBrewer Set2 followed by Set3 extras; light enough to sit behind branches
QUALITATIVE_PALETTE = [
    "#66c2a5",  # teal
    "#fc8d62",  # orange
    "#8da0cb",  # blue
    "#e78ac3",  # pink
    "#a6d854",  # lime
    "#ffd92f",  # yellow
    "#e5c494",  # tan
    "#b3b3b3",  # grey
    "#80b1d3",  # sky
    "#bc80bd",  # purple
]


def region_colors(regions: int, palette: list[str]) -> list[str]:
    """Pick one distinct palette color per highlighted region, in order.

    Colors are never recycled.

    Raises:
        PaletteTooSmallError: More regions than colors.
    """
    if regions > len(palette):
        raise PaletteTooSmallError(regions=regions, colors=len(palette))
    return palette[:regions]

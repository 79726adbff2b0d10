"""
Report configuration models.

Pydantic models for everything the figure needs that is *chosen* rather than
fetched: which clades to highlight, which to label with a silhouette, and the
figure styling. Defaults live in ``reference/clades.py``.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, model_validator

from bioblitz_tree.renderers.palette import QUALITATIVE_PALETTE


class MissingCladePolicy(StrEnum):
    """What to do when a configured clade is not in this run's tree."""

    SKIP = "skip"
    ERROR = "error"


class HighlightClade(BaseModel):
    """A broad clade drawn as a shaded wedge."""

    model_config = {"str_strip_whitespace": True, "frozen": True}

    clade: str = Field(..., description="Internal node label in the induced subtree")
    display_name: str | None = Field(default=None, description="Legend text (defaults to clade)")

    @property
    def label(self) -> str:
        return self.display_name or self.clade


class LabelledClade(BaseModel):
    """A narrow clade marked with a PhyloPic silhouette and a text label."""

    model_config = {"str_strip_whitespace": True, "frozen": True}

    clade: str = Field(..., description="Internal node label in the induced subtree")
    display_name: str | None = None
    illustration_name: str | None = Field(
        default=None, description="Species/genus name to look up on PhyloPic"
    )
    illustration_uuid: str | None = Field(
        default=None, description="PhyloPic image uuid (skips the name lookup)"
    )

    @property
    def label(self) -> str:
        return self.display_name or self.clade

    @model_validator(mode="after")
    def _needs_illustration(self) -> LabelledClade:
        if not self.illustration_name and not self.illustration_uuid:
            msg = f"Labelled clade {self.clade!r} needs illustration_name or illustration_uuid"
            raise ValueError(msg)
        return self


class FigureStyle(BaseModel):
    """All figure-wide styling, passed explicitly to the renderer."""

    title: str = "What did we see?"
    subtitle: str = ""
    caption_credit: str = "Silhouettes from PhyloPic (https://www.phylopic.org)."
    font_family: str = "DejaVu Sans"

    palette: list[str] = Field(default_factory=lambda: list(QUALITATIVE_PALETTE))
    highlight_alpha: float = Field(default=0.35, ge=0.0, le=1.0)

    line_width: float = 0.3
    line_color: str = "#333333"

    # Square output; inches and dots per inch
    size: float = 10.0
    dpi: int = 300

    show_tip_labels: bool = True
    tip_label_size: float = 2.0
    clade_label_size: float = 7.0
    title_size: float = 16.0
    caption_size: float = 5.0

    # Radial offsets, in units of tree depth beyond the outermost tip
    image_offset: float = 1.6
    text_offset: float = 2.6
    image_zoom: float = 0.08
    wedge_padding: float = 1.0

    # Where the first tip sits, degrees counter-clockwise from 3 o'clock
    start_angle: float = 90.0


class ReportConfig(BaseModel):
    """Everything the annotator and renderer need besides the tree itself."""

    highlights: list[HighlightClade] = Field(default_factory=list)
    labelled: list[LabelledClade] = Field(default_factory=list)
    style: FigureStyle = Field(default_factory=FigureStyle)
    on_missing_clade: MissingCladePolicy = MissingCladePolicy.SKIP

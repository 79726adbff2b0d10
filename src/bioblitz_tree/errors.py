"""Named failures that stop a report run.

Transport failures (``requests.HTTPError``, connection errors, bad JSON) are
not wrapped; they propagate from the datasources unchanged. The classes here
cover what ``requests`` cannot describe:

    ReportError
    ├── EmptyTaxonSetError          nothing left to build a tree from
    ├── UpstreamServiceError        a service answered, but not usefully
    │   └── SubtreeInductionError
    └── AnnotationConfigError       the figure configuration doesn't fit this run
        ├── CladeNotInTreeError
        ├── IllustrationNotFoundError
        ├── AttributionMissingError
        └── PaletteTooSmallError
"""

from __future__ import annotations


class ReportError(Exception):
    """Base class for errors that abort the report."""


class EmptyTaxonSetError(ReportError):
    """No observation resolved to an OTT id in the synthetic tree."""


class UpstreamServiceError(ReportError):
    """An upstream service rejected a request or returned unusable data."""


class SubtreeInductionError(UpstreamServiceError):
    """Open Tree could not induce a subtree for the requested OTT ids."""

    def __init__(self, ott_ids: list[int], detail: str) -> None:
        self.ott_ids = ott_ids
        self.detail = detail
        super().__init__(f"induced_subtree failed for {len(ott_ids)} OTT ids: {detail}")


class AnnotationConfigError(ReportError):
    """The clade/illustration/palette configuration is wrong for this tree."""


class CladeNotInTreeError(AnnotationConfigError):
    """A configured clade label is not an internal node of this run's tree."""

    def __init__(self, clade: str) -> None:
        self.clade = clade
        super().__init__(f"Clade {clade!r} is not present in this run's tree")


class IllustrationNotFoundError(AnnotationConfigError):
    """No PhyloPic illustration exists for a configured name or uuid."""


class AttributionMissingError(AnnotationConfigError):
    """A PhyloPic image lacks the contributor or license needed for the caption."""


class PaletteTooSmallError(AnnotationConfigError):
    """Fewer palette colors than highlighted regions."""

    def __init__(self, regions: int, colors: int) -> None:
        self.regions = regions
        self.colors = colors
        super().__init__(f"{regions} highlighted regions but only {colors} palette colors")

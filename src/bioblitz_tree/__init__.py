"""BioBlitz tree - a phylogeny of everything observed during one iNaturalist project.

Architecture::

    datasources/   External APIs (iNaturalist, Open Tree of Life, PhyloPic)
    phylotree.py   Newick -> PhyloTree (ape-style node numbering)
    analysis/      Cross-datasource logic (clade annotations, attribution captions)
    renderers/     Pure data -> figure / HTML (circular dendrogram, report page)
    flows/         Prefect orchestration (one flow, one task per stage)
    reference/     Static report configuration (clades, illustrations, styling)
    services/      Shared utilities (HTTP client)

Data flow: iNaturalist observations -> Open Tree TNRS names -> induced subtree
(Newick on disk) -> PhyloTree -> annotations -> SVG + PDF + index.html
"""

__version__ = "0.1.0"

from bioblitz_tree.config import Settings
from bioblitz_tree.schemas import FigureStyle, ReportConfig

__all__ = ["FigureStyle", "ReportConfig", "Settings", "__version__"]

"""Static report configuration.

Reference data that doesn't change with API calls: the clades the figure
highlights or labels, and the default styling.
"""

from bioblitz_tree.reference.clades import DEFAULT_REPORT_CONFIG as DEFAULT_REPORT_CONFIG
from bioblitz_tree.reference.clades import HIGHLIGHT_CLADES as HIGHLIGHT_CLADES
from bioblitz_tree.reference.clades import LABELLED_CLADES as LABELLED_CLADES

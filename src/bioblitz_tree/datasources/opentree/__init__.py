"""Open Tree of Life data source.

Resolves observed names to OTT ids and induces the subtree spanning them.

Public API:
  - client: API URLs and JSON POST helpers
  - tnrs: ResolvedTaxon, dedupe_names, match_names, is_in_tree, resolve_names,
    filter_resolved, unique_ott_ids
  - tree: induce_subtree, write_newick
"""

from bioblitz_tree.datasources.opentree.tnrs import (
    ResolvedTaxon,
    dedupe_names,
    filter_resolved,
    is_in_tree,
    match_names,
    resolve_names,
    unique_ott_ids,
)
from bioblitz_tree.datasources.opentree.tree import induce_subtree, write_newick

__all__ = [
    "ResolvedTaxon",
    "dedupe_names",
    "filter_resolved",
    "induce_subtree",
    "is_in_tree",
    "match_names",
    "resolve_names",
    "unique_ott_ids",
    "write_newick",
]

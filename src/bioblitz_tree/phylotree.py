"""
In-memory phylogeny with ape-style node numbering.

Newick text (as written by ``datasources.opentree.tree.write_newick``) is
parsed with Biopython's ``Bio.Phylo`` and renumbered so that:

  - tips are ``1..T`` in left-to-right Newick order
  - internal nodes are ``T+1..T+N`` in preorder, the root being ``T+1``
  - ``node_labels[p - 1]`` is the label of node ``T + p``

so a clade label at 1-based position ``p`` of ``node_labels`` is node
``T + p``. Labels have underscores read as spaces (``Cepaea_nemoralis`` ->
``Cepaea nemoralis``). Unary internal nodes are kept: when Open Tree
collapses an ancestor id onto its descendant, the ancestor's name survives
only as an internal label.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from io import StringIO
from pathlib import Path

from Bio import Phylo
from Bio.Phylo.BaseTree import Clade


def clean_label(name: str | None) -> str:
    """Newick label -> display label (underscores to spaces, trimmed)."""
    if not name:
        return ""
    return str(name).replace("_", " ").strip()


@dataclass
class PhyloTree:
    """A rooted tree: tip labels, internal node labels, and (parent, child) edges."""

    tip_labels: list[str]
    node_labels: list[str]
    edges: list[tuple[int, int]] = field(default_factory=list)

    @property
    def tip_count(self) -> int:
        return len(self.tip_labels)

    @property
    def node_count(self) -> int:
        """Number of internal nodes."""
        return len(self.node_labels)

    @property
    def root(self) -> int:
        return self.tip_count + 1 if self.node_labels else 1

    @property
    def nodes(self) -> range:
        """All node ids, tips first."""
        return range(1, self.tip_count + self.node_count + 1)

    def is_tip(self, node: int) -> bool:
        return 1 <= node <= self.tip_count

    def label(self, node: int) -> str:
        if self.is_tip(node):
            return self.tip_labels[node - 1]
        return self.node_labels[node - self.tip_count - 1]

    def node_index(self, label: str) -> int | None:
        """
        Node id of the internal node labelled ``label`` (exact match).

        Returns ``tip_count + p`` for the first match at 1-based position
        ``p``, or None when no internal node carries that label.
        """
        try:
            position = self.node_labels.index(label) + 1
        except ValueError:
            return None
        return self.tip_count + position

    @cached_property
    def _children(self) -> dict[int, list[int]]:
        children: dict[int, list[int]] = {n: [] for n in self.nodes}
        for parent, child in self.edges:
            children[parent].append(child)
        return children

    @cached_property
    def _parents(self) -> dict[int, int]:
        return {child: parent for parent, child in self.edges}

    def children(self, node: int) -> list[int]:
        return self._children.get(node, [])

    def parent(self, node: int) -> int | None:
        return self._parents.get(node)

    def descendant_tips(self, node: int) -> list[int]:
        """Tips below ``node`` (itself, for a tip), in tip order."""
        tips: list[int] = []
        stack = [node]
        while stack:
            current = stack.pop()
            if self.is_tip(current):
                tips.append(current)
            else:
                stack.extend(self.children(current))
        return sorted(tips)


def _from_clade(root: Clade) -> PhyloTree:
    """Renumber a Bio.Phylo clade hierarchy ape-style."""
    # Preorder walk; terminals come out left to right
    order: list[Clade] = []
    stack = [root]
    while stack:
        clade = stack.pop()
        order.append(clade)
        stack.extend(reversed(clade.clades))

    tips = [c for c in order if c.is_terminal()]
    internals = [c for c in order if not c.is_terminal()]

    ids: dict[int, int] = {}
    for i, clade in enumerate(tips, start=1):
        ids[id(clade)] = i
    for i, clade in enumerate(internals, start=len(tips) + 1):
        ids[id(clade)] = i

    edges = [
        (ids[id(parent)], ids[id(child)]) for parent in order for child in parent.clades
    ]
    return PhyloTree(
        tip_labels=[clean_label(c.name) for c in tips],
        node_labels=[clean_label(c.name) for c in internals],
        edges=edges,
    )


def parse_newick(text: str) -> PhyloTree:
    """Parse one Newick tree string into a PhyloTree."""
    tree = Phylo.read(StringIO(text.strip()), "newick")
    return _from_clade(tree.root)


def read_tree(path: Path) -> PhyloTree:
    """Read the Newick file written by the subtree builder."""
    return parse_newick(Path(path).read_text())

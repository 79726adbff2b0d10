"""Induced subtree retrieval.

The subtree is fetched as Newick text and written to disk; parsing happens
separately in ``bioblitz_tree.phylotree``. Going through the text keeps every
named internal node, which the annotator needs for clade labels.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from bioblitz_tree.datasources.opentree import client
from bioblitz_tree.errors import EmptyTaxonSetError, SubtreeInductionError, UpstreamServiceError

if TYPE_CHECKING:
    from pathlib import Path

    import requests


def _error_detail(resp: requests.Response) -> str:
    """Best-effort human message from an Open Tree error response."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body)
    return str(body)


def induce_subtree(ott_ids: list[int], *, label_format: str = "name") -> str:
    """
    Request the minimal subtree of the synthetic tree spanning ``ott_ids``.

    When one id is an ancestor of another, only the descendant becomes a tip;
    the ancestor appears as a labelled internal node.

    Args:
        ott_ids: Distinct OTT ids, all checked to be in the synthetic tree.
        label_format: ``"name"`` labels nodes with taxon names, not ids.

    Returns:
        Newick text ending in ``;``.

    Raises:
        EmptyTaxonSetError: ``ott_ids`` is empty; no request is sent.
        SubtreeInductionError: Open Tree rejected the batch (any id not
            inducible fails the whole request).
    """
    if not ott_ids:
        msg = "No taxa to build a tree from: no observation resolved to an in-tree OTT id"
        raise EmptyTaxonSetError(msg)

    resp = client.post(
        client.INDUCED_SUBTREE,
        {"ott_ids": list(ott_ids), "label_format": label_format},
    )
    if 400 <= resp.status_code < 500:
        raise SubtreeInductionError(list(ott_ids), _error_detail(resp))
    resp.raise_for_status()

    data: dict[str, Any] = resp.json()
    newick = data.get("newick")
    if not newick:
        msg = "induced_subtree response has no 'newick' field"
        raise UpstreamServiceError(msg)
    return str(newick).strip()


def write_newick(newick: str, path: Path) -> Path:
    """Write Newick text to ``path`` (parent dirs created), newline-terminated."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        f.write(newick)
        f.write("\n")
    return path

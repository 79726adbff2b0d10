"""Taxonomic name resolution: observed names -> OTT ids in the synthetic tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from bioblitz_tree.datasources.opentree import client

if TYPE_CHECKING:
    from collections.abc import Iterable

DEFAULT_CONTEXT = "Animals"
DEFAULT_MIN_SCORE = 0.9

# node_info answers these when an id has no node in the synthetic tree
_NOT_IN_TREE_STATUSES = {400, 404}

# =============================================================================
# Data Model
# =============================================================================


@dataclass
class ResolvedTaxon:
    """Best TNRS match for one observed name."""

    name: str
    ott_id: int | None
    score: float = 0.0
    in_tree: bool = False
    unique_name: str | None = None
    rank: str | None = None
    is_synonym: bool = False
    approximate_match: bool = False
    number_matches: int = 0
    flags: list[str] = field(default_factory=list)


# =============================================================================
# Parsing
# =============================================================================


def dedupe_names(names: Iterable[str | None]) -> list[str]:
    """Unique non-null names, sorted so the TNRS batch is deterministic."""
    return sorted({n for n in names if n})


def _parse_match_result(name: str, result: dict[str, Any]) -> ResolvedTaxon:
    """Pick the best match of one ``match_names`` result (highest score, first wins)."""
    matches: list[dict[str, Any]] = result.get("matches") or []
    if not matches:
        return ResolvedTaxon(name=name, ott_id=None)

    best = max(matches, key=lambda m: m.get("score", 0.0))
    taxon = best.get("taxon") or {}
    return ResolvedTaxon(
        name=name,
        ott_id=taxon.get("ott_id"),
        score=float(best.get("score", 0.0)),
        unique_name=taxon.get("unique_name"),
        rank=taxon.get("rank"),
        is_synonym=bool(best.get("is_synonym", False)),
        approximate_match=bool(best.get("is_approximate_match", False)),
        number_matches=len(matches),
        flags=list(taxon.get("flags") or []),
    )


# =============================================================================
# API Calls
# =============================================================================


def match_names(
    names: list[str],
    *,
    context_name: str = DEFAULT_CONTEXT,
    approximate: bool = True,
) -> list[ResolvedTaxon]:
    """
    Match a batch of names against the Open Tree taxonomy in one request.

    Args:
        names: Distinct scientific names.
        context_name: TNRS context restricting the search (e.g. "Animals").
        approximate: Allow fuzzy matching (lower scores).

    Returns:
        One ResolvedTaxon per input name, in input order. Unmatched names have
        ``ott_id=None``. ``in_tree`` is not checked here.
    """
    if not names:
        return []
    if len(names) > client.MAX_NAMES_PER_REQUEST:
        msg = f"match_names accepts at most {client.MAX_NAMES_PER_REQUEST} names, got {len(names)}"
        raise ValueError(msg)

    data = client.post_json(
        client.MATCH_NAMES,
        {
            "names": names,
            "context_name": context_name,
            "do_approximate_matching": approximate,
            "include_suppressed": False,
        },
    )

    # TNRS echoes each search string (case may differ) as result["name"]
    by_search: dict[str, dict[str, Any]] = {
        str(r.get("name", "")).casefold(): r for r in data.get("results", [])
    }
    return [_parse_match_result(n, by_search.get(n.casefold(), {})) for n in names]


def is_in_tree(ott_id: int) -> bool:
    """
    Check whether an OTT id has a node in the current synthetic tree.

    Taxa can be in the taxonomy yet absent from synthesis (pruned, broken,
    incertae sedis). Open Tree answers those with a 400.
    """
    resp = client.post(client.NODE_INFO, {"ott_id": ott_id})
    if resp.status_code in _NOT_IN_TREE_STATUSES:
        return False
    resp.raise_for_status()
    return True


def resolve_names(
    names: Iterable[str | None],
    *,
    context_name: str = DEFAULT_CONTEXT,
) -> list[ResolvedTaxon]:
    """
    Deduplicate, match, and check synthetic-tree membership.

    Names with no OTT id are dropped. Every remaining id gets one
    ``node_info`` lookup (slow, unbatched).

    Returns:
        ResolvedTaxon rows with ``in_tree`` filled in, sorted by name.
    """
    rows: list[ResolvedTaxon] = []
    for row in match_names(dedupe_names(names), context_name=context_name):
        if row.ott_id is None:
            continue
        row.in_tree = is_in_tree(row.ott_id)
        rows.append(row)
    return rows


def filter_resolved(
    rows: list[ResolvedTaxon],
    min_score: float = DEFAULT_MIN_SCORE,
) -> list[ResolvedTaxon]:
    """Keep rows with an OTT id, present in the tree, scoring above ``min_score``."""
    return [r for r in rows if r.ott_id is not None and r.in_tree and r.score > min_score]


def unique_ott_ids(rows: list[ResolvedTaxon]) -> list[int]:
    """Distinct OTT ids of the given rows, sorted."""
    return sorted({r.ott_id for r in rows if r.ott_id is not None})

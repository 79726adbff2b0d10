"""
Prefect flow building the BioBlitz tree report.

observations -> names -> OTT ids -> induced subtree (Newick on disk)
-> PhyloTree -> annotations -> SVG + PDF + index.html

Every stage runs once, in order. Tasks have no retries and no caching:
a failed request aborts the run, and a re-run always refetches.

Run locally:
    python -m bioblitz_tree.flows.report

Run with Prefect dashboard:
    prefect server start &
    python -m bioblitz_tree.flows.report
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from prefect import flow, task
from prefect.cache_policies import NO_CACHE

from bioblitz_tree.analysis.annotations import Annotations, annotate, present_clades
from bioblitz_tree.config import get_settings
from bioblitz_tree.datasources import inaturalist, opentree, phylopic
from bioblitz_tree.phylotree import PhyloTree, read_tree
from bioblitz_tree.reference.clades import DEFAULT_REPORT_CONFIG
from bioblitz_tree.renderers.circular_tree import build_figure, save_figure
from bioblitz_tree.renderers.report_page import build_report_html
from bioblitz_tree.schemas import FigureStyle, LabelledClade, ReportConfig

if TYPE_CHECKING:
    import numpy as np

REPORT_PAGE = "index.html"


# =============================================================================
# Fetch / resolve / induce
# =============================================================================


@task(name="fetch-observations", cache_policy=NO_CACHE)
def fetch_observations(project_id: str) -> list[inaturalist.Observation]:
    """Fetch every observation of the project."""
    observations = inaturalist.fetch_project_observations(project_id)
    print(f"Project {project_id}: {len(observations)} observations")
    unidentified = sum(1 for o in observations if o.scientific_name is None)
    if unidentified:
        print(f"  {unidentified} observations have no taxon")
    return observations


@task(name="resolve-taxa", cache_policy=NO_CACHE)
def resolve_taxa(
    names: list[str],
    context_name: str = opentree.tnrs.DEFAULT_CONTEXT,
    min_score: float = opentree.tnrs.DEFAULT_MIN_SCORE,
) -> list[opentree.ResolvedTaxon]:
    """Match names on Open Tree and keep confident, in-tree matches."""
    rows = opentree.resolve_names(names, context_name=context_name)
    kept = opentree.filter_resolved(rows, min_score=min_score)
    print(
        f"Resolved {len(names)} names: {len(rows)} with an OTT id, "
        f"{len(kept)} in the synthetic tree with score > {min_score}"
    )
    return kept


@task(name="induce-tree", cache_policy=NO_CACHE)
def induce_tree(ott_ids: list[int], tree_path: Path) -> Path:
    """Fetch the induced subtree as Newick and write it to ``tree_path``."""
    newick = opentree.induce_subtree(ott_ids)
    return opentree.write_newick(newick, tree_path)


@task(name="load-tree", cache_policy=NO_CACHE)
def load_tree(tree_path: Path) -> PhyloTree:
    """Parse the Newick file written by ``induce_tree``."""
    tree = read_tree(tree_path)
    print(f"Tree: {tree.tip_count} tips, {tree.node_count} internal nodes")
    return tree


# =============================================================================
# Annotate / render
# =============================================================================


@task(name="fetch-illustrations", cache_policy=NO_CACHE)
def fetch_illustrations(
    tree: PhyloTree,
    clades: list[LabelledClade],
) -> tuple[dict[str, str], dict[str, phylopic.Attribution], dict[str, np.ndarray]]:
    """
    Resolve, credit, and download the silhouette of every labelled clade in the tree.

    Returns:
        (clade -> image uuid, uuid -> Attribution, uuid -> RGBA array).
    """
    uuids: dict[str, str] = {}
    attributions: dict[str, phylopic.Attribution] = {}
    silhouettes: dict[str, np.ndarray] = {}
    for clade in present_clades(tree, clades):
        uuid = clade.illustration_uuid or phylopic.get_image_uuid(clade.illustration_name or "")
        uuids[clade.clade] = uuid
        if uuid not in attributions:
            attributions[uuid] = phylopic.get_attribution(uuid)
            silhouettes[uuid] = phylopic.fetch_silhouette(uuid)
    print(f"Fetched {len(silhouettes)} silhouettes")
    return uuids, attributions, silhouettes


@task(name="annotate-tree", cache_policy=NO_CACHE)
def annotate_tree(
    tree: PhyloTree,
    config: ReportConfig,
    uuids: dict[str, str],
    attributions: dict[str, phylopic.Attribution],
) -> Annotations:
    """Locate highlight and label clades; build the caption."""
    annotations = annotate(tree, config, uuids, attributions)
    if annotations.skipped:
        print(f"Clades not in this tree (skipped): {', '.join(annotations.skipped)}")
    return annotations


@task(name="render-figure", cache_policy=NO_CACHE)
def render_figure(
    tree: PhyloTree,
    annotations: Annotations,
    silhouettes: dict[str, np.ndarray],
    style: FigureStyle,
    svg_path: Path,
    pdf_path: Path,
) -> list[Path]:
    """Draw the circular tree and save SVG + PDF."""
    fig = build_figure(tree, annotations, silhouettes, style)
    return save_figure(fig, svg_path, pdf_path, style)


@task(name="write-report-page", cache_policy=NO_CACHE)
def write_report_page(html: str, path: Path) -> Path:
    """Write the HTML report page."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        f.write(html)
    return path


# =============================================================================
# Flow
# =============================================================================


@flow(name="build-tree-report", log_prints=True)
def build_report(
    project_id: str | None = None,
    output_dir: Path | None = None,
    config: ReportConfig | None = None,
) -> dict[str, Any]:
    """
    Build the whole report for one iNaturalist project.

    Args:
        project_id: iNaturalist project (defaults to settings).
        output_dir: Where the Newick, SVG, PDF and page go (defaults to settings).
        config: Clades and styling (defaults to ``reference.clades``).

    Returns:
        Summary dict with counts and output paths.
    """
    settings = get_settings()
    if output_dir is not None:
        settings = settings.model_copy(update={"output_dir": Path(output_dir)})
    project_id = project_id or settings.project_id
    config = config or DEFAULT_REPORT_CONFIG

    tree_path = settings.tree_path
    svg_path = settings.svg_path
    pdf_path = settings.pdf_path

    print("Fetching observations...")
    observations = fetch_observations(project_id)
    names = inaturalist.extract_names(observations)
    print(f"{len(names)} distinct names")

    print("Resolving names on Open Tree...")
    taxa = resolve_taxa(names, settings.taxon_context, settings.min_match_score)
    ott_ids = opentree.unique_ott_ids(taxa)

    print("Inducing subtree...")
    induce_tree(ott_ids, tree_path)
    tree = load_tree(tree_path)

    print("Annotating...")
    uuids, attributions, silhouettes = fetch_illustrations(tree, config.labelled)
    annotations = annotate_tree(tree, config, uuids, attributions)

    print("Rendering...")
    figures = render_figure(tree, annotations, silhouettes, config.style, svg_path, pdf_path)

    html = build_report_html(
        project_id=project_id,
        style=config.style,
        annotations=annotations,
        taxa=taxa,
        observation_count=len(observations),
        tip_count=tree.tip_count,
        svg_name=svg_path.name,
        pdf_name=pdf_path.name,
        tree_name=tree_path.name,
    )
    page = write_report_page(html, settings.output_dir / REPORT_PAGE)

    print(f"Report built: {page}")
    return {
        "project_id": project_id,
        "observations": len(observations),
        "names": len(names),
        "taxa": len(taxa),
        "tips": tree.tip_count,
        "skipped_clades": annotations.skipped,
        "outputs": [str(p) for p in [tree_path, *figures, page]],
    }


if __name__ == "__main__":
    result = build_report()
    print(f"Flow complete: {result}")

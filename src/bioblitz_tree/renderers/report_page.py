"""HTML report page: the figure plus what went into it."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bioblitz_tree.renderers import render_template

if TYPE_CHECKING:
    from bioblitz_tree.analysis.annotations import Annotations
    from bioblitz_tree.datasources.opentree import ResolvedTaxon
    from bioblitz_tree.schemas import FigureStyle


def build_report_html(
    *,
    project_id: str,
    style: FigureStyle,
    annotations: Annotations,
    taxa: list[ResolvedTaxon],
    observation_count: int,
    tip_count: int,
    svg_name: str,
    pdf_name: str,
    tree_name: str,
) -> str:
    """Render the report page for one run."""
    rows = [
        {
            "name": t.name,
            "ott_id": t.ott_id,
            "score": f"{t.score:.2f}",
            "rank": t.rank or "",
            "url": f"https://tree.opentreeoflife.org/taxonomy/browse?id={t.ott_id}",
        }
        for t in sorted(taxa, key=lambda t: t.name)
    ]
    return render_template(
        "report.html.j2",
        project_id=project_id,
        project_url=f"https://www.inaturalist.org/projects/{project_id}",
        title=style.title,
        subtitle=style.subtitle,
        caption=annotations.caption,
        highlights=annotations.highlights,
        labels=sorted(annotations.labels, key=lambda lb: lb.display_name),
        skipped=annotations.skipped,
        taxa=rows,
        observation_count=observation_count,
        tip_count=tip_count,
        svg_name=svg_name,
        pdf_name=pdf_name,
        tree_name=tree_name,
    )

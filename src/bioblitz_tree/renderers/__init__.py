"""Rendering: structured data -> figure / HTML.

  - circular_tree: PhyloTree + Annotations + FigureStyle -> matplotlib Figure
    (pure), and ``save_figure`` writing SVG + PDF
  - report_page: run summary -> HTML page (Jinja2) embedding the SVG
  - palette: qualitative colors and per-region color assignment

Used by flows/report.py, which orchestrates the pipeline.

Adding an HTML fragment
-----------------------
1. Create ``templates/{name}.html.j2``.
2. Render it with ``render_template("{name}.html.j2", **context)``.
3. Add tests: call the build function with sample data and assert the
   returned HTML contains expected content.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2

# Shared Jinja2 environment for HTML renderers
_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
_jinja_env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=True,
)


def render_template(template_name: str, **kwargs: Any) -> str:
    """Render a Jinja2 template by name."""
    return _jinja_env.get_template(template_name).render(**kwargs)

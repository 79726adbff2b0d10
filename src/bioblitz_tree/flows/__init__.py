"""
Prefect flows.

Flows:
- report: observations -> resolved taxa -> induced subtree -> annotated figure

Usage (local):
    python -m bioblitz_tree.flows.report

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    python -m bioblitz_tree.flows.report
"""

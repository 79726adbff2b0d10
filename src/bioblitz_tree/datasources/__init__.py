"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants, request helpers, rate limiting
    └── {feature}.py      # Models + fetch functions (one per endpoint/concept)

Sources:
  - inaturalist: project observations -> scientific names
  - opentree: names -> OTT ids (TNRS), OTT ids -> induced subtree (Newick)
  - phylopic: names -> silhouette image, contributor, license

Adding a new datasource
-----------------------
1. Create ``datasources/{name}/`` with files above.
   See ``phylopic/`` for a minimal example, ``opentree/`` for a richer one.

2. Write fetch functions that return dicts or dataclasses::

       from bioblitz_tree.services.http import session

       def fetch_something(name) -> dict[str, Any]:
           resp = session.get(API_URL, params={...})
           resp.raise_for_status()
           return resp.json()

3. Re-export public API in ``__init__.py`` with ``__all__``.

4. Wire into the pipeline (see ``flows/report.py``):
   - Add a ``@task`` that calls your fetch function
   - Add the task call to ``build_report()``

5. Add tests in ``tests/test_{name}.py``.
"""

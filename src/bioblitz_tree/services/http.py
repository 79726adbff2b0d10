"""
Shared HTTP client with a default timeout and no retries.

Provides a pre-configured ``requests.Session``. Every request is sent once:
a failed page, match or image request surfaces as an error from
``resp.raise_for_status()`` and aborts the run. Pass a custom ``Retry`` to
``create_session`` to opt in. All datasource modules should use this instead
of bare ``requests.get`` / ``requests.post``.

Usage::

    from bioblitz_tree.services.http import session

    resp = session.get("https://api.inaturalist.org/v1/observations", params={...})
    resp.raise_for_status()
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from bioblitz_tree import __version__

#: Default strategy: every request is sent exactly once.
DEFAULT_RETRY = Retry(
    total=0,
    raise_on_status=False,  # let resp.raise_for_status() handle it
)

DEFAULT_TIMEOUT = 60  # seconds; induced_subtree can be slow for large id sets

USER_AGENT = f"bioblitz-tree/{__version__}"


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a ``requests.Session`` with the retry adapter mounted.

    Args:
        retry: Custom retry strategy (defaults to ``DEFAULT_RETRY``).
        timeout: Default timeout applied to every request.
    """
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or DEFAULT_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = USER_AGENT

    # Inject a default timeout so callers don't need to pass ``timeout=``.
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s


#: Module-level session; import and use directly.
session: requests.Session = create_session()

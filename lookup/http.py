"""
lookup/http.py — Shared requests session with bounded retries.
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from core.constants import KairenConstants as C


def build_session(
    total_retries: int = C.LOOKUP_RETRIES,
    backoff_factor: float = C.LOOKUP_BACKOFF_S,
) -> requests.Session:
    """
    Create a session that retries idempotent GETs on transient failures.

    Retries cover connection errors and 429/5xx responses; a 404 is returned
    immediately because it means "no entry", not "try again".

    Args:
        total_retries: Maximum retry attempts per request.
        backoff_factor: urllib3 exponential backoff factor in seconds.

    Returns:
        A configured :class:`requests.Session`.
    """
    session = requests.Session()
    retries = Retry(
        total=total_retries,
        backoff_factor=backoff_factor,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retries)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"Accept": "application/json"})
    return session

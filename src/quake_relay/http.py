"""Shared HTTP session factory."""

from __future__ import annotations

from requests import Session
from requests.adapters import HTTPAdapter


def create_session(pool_maxsize: int = 20) -> Session:
    """Create a requests Session for the JMA feed.

    The feed is never retried: a failed index fetch fails the refresh and a
    failed detail fetch drops that one record. *pool_maxsize* keeps a
    connection per concurrent detail fetch.
    """
    adapter = HTTPAdapter(max_retries=0, pool_maxsize=pool_maxsize)
    session = Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session

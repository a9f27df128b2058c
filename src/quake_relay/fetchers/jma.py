"""JMA earthquake bulletin feed fetchers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from urllib.parse import urljoin

from pydantic import ValidationError
from requests import RequestException, Session

from quake_relay.config import INDEX_LIMIT
from quake_relay.errors import RecordUnusable, UpstreamUnavailable
from quake_relay.fetchers.schemas import ListEventSchema
from quake_relay.http import create_session
from quake_relay.models import IndexEntry

logger = logging.getLogger(__name__)

JMA_INDEX_URL = "https://www.jma.go.jp/bosai/quake/data/list.json"
JMA_DETAIL_BASE_URL = "https://www.jma.go.jp/bosai/quake/data/"


def fetch_index(
    session: Session | None = None,
    url: str = JMA_INDEX_URL,
    limit: int = INDEX_LIMIT,
    timeout: int = 30,
) -> list[IndexEntry]:
    """Fetch the bulletin index, most recent first.

    Only the first *limit* entries are considered; a malformed entry among
    them is skipped. Raises :class:`UpstreamUnavailable` if the index cannot
    be fetched or is not a JSON list.
    """
    if session is None:
        session = create_session()

    try:
        resp = session.get(url, timeout=timeout)
        resp.raise_for_status()
        payload = resp.json()
    except (RequestException, ValueError) as exc:
        raise UpstreamUnavailable(f"Failed to fetch {url}: {exc}") from exc

    if not isinstance(payload, list):
        raise UpstreamUnavailable(f"Unexpected index payload from {url}")

    entries: list[IndexEntry] = []
    for position, item in enumerate(payload[:limit]):
        try:
            ev = ListEventSchema.model_validate(item)
        except ValidationError as exc:
            logger.warning("Skipping malformed index entry %d: %s", position, exc)
            continue
        entries.append(
            IndexEntry(
                document_id=ev.json_name,
                title=ev.title,
                event_id=ev.event_id,
                max_intensity=ev.max_intensity,
                intensity=ev.intensity,
            )
        )
    return entries


def fetch_detail(
    entry: IndexEntry,
    session: Session | None = None,
    base_url: str = JMA_DETAIL_BASE_URL,
    timeout: int = 30,
) -> dict:
    """Fetch the detail document of one index entry.

    Raises :class:`RecordUnusable` on any failure of this entry.
    """
    if session is None:
        session = create_session()

    url = urljoin(base_url, entry.document_id)
    try:
        resp = session.get(url, timeout=timeout)
        resp.raise_for_status()
        document = resp.json()
    except (RequestException, ValueError) as exc:
        raise RecordUnusable(entry.document_id, f"fetch failed: {exc}") from exc

    if not isinstance(document, dict):
        raise RecordUnusable(entry.document_id, "document is not a JSON object")
    return document


async def fetch_details(
    entries: Sequence[IndexEntry],
    session: Session,
    base_url: str = JMA_DETAIL_BASE_URL,
    timeout: int = 30,
) -> list[dict | None]:
    """Fetch all detail documents concurrently.

    Every entry gets its own worker thread, so all fetches are in flight at
    once. Waits until every fetch has settled. The result is aligned with
    *entries*; a failed fetch yields ``None`` and does not affect siblings.
    """
    if not entries:
        return []

    loop = asyncio.get_running_loop()
    with ThreadPoolExecutor(
        max_workers=len(entries), thread_name_prefix="jma-detail"
    ) as executor:
        results = await asyncio.gather(
            *(
                loop.run_in_executor(
                    executor, fetch_detail, entry, session, base_url, timeout
                )
                for entry in entries
            ),
            return_exceptions=True,
        )

    documents: list[dict | None] = []
    for entry, result in zip(entries, results):
        if isinstance(result, RecordUnusable):
            logger.warning("Dropping bulletin %s", result)
            documents.append(None)
        elif isinstance(result, BaseException):
            logger.warning(
                "Unexpected error fetching %s", entry.document_id, exc_info=result
            )
            documents.append(None)
        else:
            documents.append(result)
    return documents

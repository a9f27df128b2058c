"""Pipeline orchestrator: fetch -> classify -> normalize -> cache, and the read path."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, TypeVar

from requests import Session

from quake_relay.cache import KeyValueStore, SnapshotPort
from quake_relay.classify import BulletinKind, partition
from quake_relay.config import QuakeRelayConfig, resolve_language
from quake_relay.dictionary import load_dictionaries
from quake_relay.errors import CacheUnavailable
from quake_relay.fetchers.jma import fetch_details, fetch_index
from quake_relay.http import create_session
from quake_relay.models import Snapshot
from quake_relay.normalize import normalize_documents
from quake_relay.translate import translate

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def ingest(config: QuakeRelayConfig, session: Session | None = None) -> Snapshot:
    """Build a fresh snapshot from the JMA feed.

    Steps:
    1. Fetch the index (first ``index_limit`` entries)
    2. Classify entries into detailed and basic bulletins
    3. Fetch all detail documents concurrently
    4. Normalize, dropping unusable records

    Raises :class:`UpstreamUnavailable` if the index cannot be fetched.
    """
    if session is None:
        session = create_session()

    # Step 1: Index
    entries = await asyncio.to_thread(
        fetch_index,
        session,
        config.index_url,
        config.index_limit,
        config.request_timeout,
    )
    logger.info("Index entries considered: %d", len(entries))

    # Step 2: Classify before any detail I/O
    detailed_entries, basic_entries = partition(entries)

    # Step 3: Fan out over both buckets at once
    documents = await fetch_details(
        detailed_entries + basic_entries,
        session,
        base_url=config.detail_base_url,
        timeout=config.request_timeout,
    )
    split = len(detailed_entries)

    # Step 4: Normalize
    snapshot = Snapshot(
        detailed=tuple(normalize_documents(BulletinKind.DETAILED, documents[:split])),
        basic=tuple(normalize_documents(BulletinKind.BASIC, documents[split:])),
    )
    logger.info(
        "Normalized bulletins: %d/%d detailed, %d/%d basic",
        len(snapshot.detailed), len(detailed_entries),
        len(snapshot.basic), len(basic_entries),
    )
    return snapshot


async def refresh(
    cache: SnapshotPort,
    config: QuakeRelayConfig,
    session: Session | None = None,
) -> Snapshot:
    """Ingest and replace the cached snapshot.

    A cache write failure is logged; the fresh snapshot is returned anyway.
    """
    snapshot = await ingest(config, session)
    try:
        await asyncio.to_thread(cache.put, snapshot, config.cache_ttl_seconds)
    except CacheUnavailable:
        logger.exception("Failed to write snapshot to cache")
    return snapshot


async def read_snapshot(cache: SnapshotPort) -> Snapshot | None:
    """Read the cached snapshot, treating an unavailable store as a miss."""
    try:
        return await asyncio.to_thread(cache.get)
    except CacheUnavailable:
        logger.warning("Cache read failed; treating as miss", exc_info=True)
        return None


def build_response(
    snapshot: Snapshot,
    language: str,
    dictionary_store: KeyValueStore,
) -> dict[str, Any]:
    """Translate *snapshot* and wrap it in the response envelope.

    ``last_updated`` is the response construction time, not the fetch time.
    """
    dicts = load_dictionaries(dictionary_store)
    translated = translate(snapshot, language, dicts)
    return {
        "data": {
            "detailed": [asdict(q) for q in translated["detailed"]],
            "basic": [asdict(q) for q in translated["basic"]],
        },
        "last_updated": datetime.now(tz=timezone.utc).isoformat(),
    }


class SingleFlight:
    """Per-key de-duplication of concurrent coroutine runs.

    Callers arriving while a run for the same key is in flight await that
    run instead of starting their own.
    """

    def __init__(self) -> None:
        self._inflight: dict[str, asyncio.Task[Any]] = {}

    def in_flight(self, key: str) -> bool:
        return key in self._inflight

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._inflight[key] = task

            def _forget(done: asyncio.Task[Any]) -> None:
                if self._inflight.get(key) is done:
                    del self._inflight[key]

            task.add_done_callback(_forget)
        else:
            logger.debug("Joining in-flight run for %s", key)
        return await asyncio.shield(task)


class EarthquakeService:
    """Bundles the dependencies of the refresh and read paths."""

    def __init__(
        self,
        config: QuakeRelayConfig,
        cache: SnapshotPort,
        dictionary_store: KeyValueStore,
        session: Session | None = None,
    ) -> None:
        self.config = config
        self.cache = cache
        self.dictionary_store = dictionary_store
        self.session = session if session is not None else create_session()
        self.flight = SingleFlight()
        self.last_refresh: datetime | None = None
        self.refresh_count = 0

    async def _refresh_once(self) -> Snapshot:
        snapshot = await refresh(self.cache, self.config, self.session)
        self.last_refresh = datetime.now(tz=timezone.utc)
        self.refresh_count += 1
        return snapshot

    async def refresh(self) -> Snapshot:
        """On-demand refresh, shared between concurrent callers if configured."""
        if self.config.single_flight:
            return await self.flight.run("refresh", self._refresh_once)
        return await self._refresh_once()

    async def scheduled_refresh(self) -> None:
        """Periodic refresh. Failures are logged and re-raised to the scheduler."""
        try:
            await self.refresh()
        except Exception:
            logger.exception("Scheduled earthquake refresh failed")
            raise

    async def get_earthquakes(
        self, language: str | None = None, force: bool = False,
    ) -> dict[str, Any]:
        """Serve translated bulletins, refreshing on force or cache miss."""
        _, dict_language = resolve_language(language, self.config.default_language)

        snapshot = None if force else await read_snapshot(self.cache)
        if snapshot is None:
            logger.info("Refreshing earthquake data (force=%s)", force)
            snapshot = await self.refresh()

        return await asyncio.to_thread(
            build_response, snapshot, dict_language, self.dictionary_store
        )

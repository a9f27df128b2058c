"""Key-value stores with TTL expiry and the snapshot cache built on them."""

from __future__ import annotations

import json
import logging
import threading
import time
from pathlib import Path
from typing import Protocol

from quake_relay.config import EARTHQUAKE_CACHE_TTL
from quake_relay.errors import CacheUnavailable
from quake_relay.models import Snapshot

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "earthquakes:latest"


class KeyValueStore(Protocol):
    def get(self, key: str) -> bytes | None: ...

    def put(self, key: str, data: bytes, ttl_seconds: int | None = None) -> None: ...


class SnapshotPort(Protocol):
    """What the refresh and read paths need from a snapshot cache."""

    def get(self) -> Snapshot | None: ...

    def put(self, snapshot: Snapshot, ttl_seconds: int) -> None: ...


def _is_expired(expires_at: float | None) -> bool:
    return expires_at is not None and time.time() >= expires_at


class FileKeyValueStore:
    """Directory-backed store: one data file plus a ``.meta`` expiry sidecar per key."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _paths(self, key: str) -> tuple[Path, Path]:
        name = key.replace("/", "_").replace(":", "--")
        return self.directory / name, self.directory / f"{name}.meta"

    def get(self, key: str) -> bytes | None:
        """Return stored bytes if present and unexpired, else None."""
        data_path, meta_path = self._paths(key)
        if not data_path.exists() or not meta_path.exists():
            return None

        try:
            meta = json.loads(meta_path.read_text())
            if _is_expired(meta["expires_at"]):
                logger.debug("Cache expired for %s", key)
                return None
            data = data_path.read_bytes()
        except OSError as exc:
            raise CacheUnavailable(f"Cannot read {key}: {exc}") from exc
        except (ValueError, KeyError, TypeError):
            logger.warning("Discarding corrupt cache metadata for %s", key)
            return None

        logger.debug("Cache hit for %s", key)
        return data

    def put(self, key: str, data: bytes, ttl_seconds: int | None = None) -> None:
        """Store bytes, expiring after *ttl_seconds* (never if None)."""
        data_path, meta_path = self._paths(key)
        now = time.time()
        expires_at = now + ttl_seconds if ttl_seconds is not None else None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            data_path.write_bytes(data)
            meta_path.write_text(json.dumps({"timestamp": now, "expires_at": expires_at}))
        except OSError as exc:
            raise CacheUnavailable(f"Cannot write {key}: {exc}") from exc
        logger.debug("Cached %s (%d bytes)", key, len(data))


class MemoryKeyValueStore:
    """Process-local store with the same TTL semantics."""

    def __init__(self) -> None:
        self._items: dict[str, tuple[bytes, float | None]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> bytes | None:
        with self._lock:
            item = self._items.get(key)
        if item is None:
            return None
        data, expires_at = item
        if _is_expired(expires_at):
            return None
        return data

    def put(self, key: str, data: bytes, ttl_seconds: int | None = None) -> None:
        expires_at = time.time() + ttl_seconds if ttl_seconds is not None else None
        with self._lock:
            self._items[key] = (data, expires_at)


class SnapshotCache:
    """Stores the latest snapshot under a single key.

    ``put`` always replaces the whole snapshot. Reads never refresh.
    """

    def __init__(self, store: KeyValueStore, key: str = SNAPSHOT_KEY) -> None:
        self.store = store
        self.key = key

    def get(self) -> Snapshot | None:
        """Return the cached snapshot, or None on a miss.

        Raises :class:`CacheUnavailable` if the store cannot be read.
        """
        data = self.store.get(self.key)
        if data is None:
            return None
        try:
            return Snapshot.from_dict(json.loads(data))
        except (ValueError, KeyError, TypeError):
            logger.warning("Discarding undecodable snapshot under %s", self.key)
            return None

    def put(self, snapshot: Snapshot, ttl_seconds: int = EARTHQUAKE_CACHE_TTL) -> None:
        payload = json.dumps(snapshot.to_dict(), ensure_ascii=False).encode("utf-8")
        self.store.put(self.key, payload, ttl_seconds=ttl_seconds)
        logger.info(
            "Cached snapshot: %d detailed, %d basic (ttl=%ds)",
            len(snapshot.detailed), len(snapshot.basic), ttl_seconds,
        )

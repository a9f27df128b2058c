"""Tests for the key-value stores and snapshot cache."""

from __future__ import annotations

import json
import time

import pytest

from quake_relay.cache import FileKeyValueStore, MemoryKeyValueStore, SnapshotCache
from quake_relay.errors import CacheUnavailable
from quake_relay.models import Snapshot


class TestFileKeyValueStore:
    def test_miss_returns_none(self, tmp_path):
        assert FileKeyValueStore(tmp_path).get("nonexistent") is None

    def test_put_then_get(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        store.put("test", b"hello world", ttl_seconds=3600)
        assert store.get("test") == b"hello world"

    def test_expired_returns_none(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        store.put("old", b"stale data", ttl_seconds=300)
        # Backdate the expiry
        (tmp_path / "old.meta").write_text(
            json.dumps({"timestamp": time.time() - 600, "expires_at": time.time() - 300})
        )
        assert store.get("old") is None

    def test_no_ttl_never_expires(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        store.put("dictionary:epi", b"{}")
        meta = json.loads((tmp_path / "dictionary--epi.meta").read_text())
        assert meta["expires_at"] is None
        assert store.get("dictionary:epi") == b"{}"

    def test_directory_created_on_put(self, tmp_path):
        cache_dir = tmp_path / "sub" / "deep"
        FileKeyValueStore(cache_dir).put("k", b"v")
        assert cache_dir.is_dir()

    def test_different_keys_dont_collide(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        store.put("a", b"alpha")
        store.put("b", b"bravo")
        assert store.get("a") == b"alpha"
        assert store.get("b") == b"bravo"

    def test_corrupted_meta_returns_none(self, tmp_path):
        (tmp_path / "bad").write_bytes(b"data")
        (tmp_path / "bad.meta").write_text("not json")
        assert FileKeyValueStore(tmp_path).get("bad") is None

    @pytest.mark.parametrize(
        "meta",
        [
            b"\xff\xfe",
            b"[]",
            b"null",
            b"{\"expires_at\": \"soon\"}",
            b"{\"timestamp\": 0}",
        ],
    )
    def test_unusable_meta_is_miss(self, tmp_path, meta):
        (tmp_path / "bad").write_bytes(b"data")
        (tmp_path / "bad.meta").write_bytes(meta)
        assert FileKeyValueStore(tmp_path).get("bad") is None

    def test_unwritable_directory_raises_cache_unavailable(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(CacheUnavailable):
            FileKeyValueStore(blocker / "cache").put("k", b"v")


class TestMemoryKeyValueStore:
    def test_put_then_get(self):
        store = MemoryKeyValueStore()
        store.put("k", b"v", ttl_seconds=60)
        assert store.get("k") == b"v"

    def test_expiry(self, monkeypatch):
        store = MemoryKeyValueStore()
        now = time.time()
        monkeypatch.setattr("quake_relay.cache.time.time", lambda: now)
        store.put("k", b"v", ttl_seconds=300)
        monkeypatch.setattr("quake_relay.cache.time.time", lambda: now + 299)
        assert store.get("k") == b"v"
        monkeypatch.setattr("quake_relay.cache.time.time", lambda: now + 300)
        assert store.get("k") is None


class TestSnapshotCache:
    def test_empty_cache_is_miss(self, snapshot_cache):
        assert snapshot_cache.get() is None

    def test_round_trip(self, snapshot_cache, sample_snapshot):
        snapshot_cache.put(sample_snapshot, ttl_seconds=300)
        assert snapshot_cache.get() == sample_snapshot

    def test_put_replaces_whole_snapshot(self, snapshot_cache, sample_snapshot):
        snapshot_cache.put(sample_snapshot, ttl_seconds=300)
        snapshot_cache.put(Snapshot(), ttl_seconds=300)
        assert snapshot_cache.get() == Snapshot()

    def test_stored_under_single_key(self, memory_store, sample_snapshot):
        SnapshotCache(memory_store).put(sample_snapshot, ttl_seconds=300)
        stored = json.loads(memory_store.get("earthquakes:latest"))
        assert set(stored) == {"detailed", "basic"}
        assert stored["basic"][0]["magnitude"] == "Ｍ不明"

    def test_undecodable_snapshot_is_miss(self, memory_store):
        memory_store.put("earthquakes:latest", b"{\"detailed\": [{}]}")
        assert SnapshotCache(memory_store).get() is None

    def test_file_backed(self, tmp_path, sample_snapshot):
        cache = SnapshotCache(FileKeyValueStore(tmp_path))
        cache.put(sample_snapshot, ttl_seconds=300)
        assert SnapshotCache(FileKeyValueStore(tmp_path)).get() == sample_snapshot

    def test_corrupt_file_meta_is_miss(self, tmp_path, sample_snapshot):
        cache = SnapshotCache(FileKeyValueStore(tmp_path))
        cache.put(sample_snapshot, ttl_seconds=300)
        (tmp_path / "earthquakes--latest.meta").write_bytes(b"\xff")
        assert cache.get() is None

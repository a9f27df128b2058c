"""Shared fixtures for quake_relay tests."""

from __future__ import annotations

import copy
import json
from collections.abc import Callable
from typing import Any

import pytest

from quake_relay.cache import MemoryKeyValueStore, SnapshotCache
from quake_relay.config import QuakeRelayConfig
from quake_relay.dictionary import TranslationDictionaries, dictionary_key
from quake_relay.models import (
    Area,
    BasicEarthquake,
    City,
    Comments,
    DetailedEarthquake,
    Location,
    Region,
    Snapshot,
)
from quake_relay.normalize import NO_TSUNAMI_TEXT

INDEX_URL = "https://www.jma.go.jp/bosai/quake/data/list.json"
DETAIL_BASE_URL = "https://www.jma.go.jp/bosai/quake/data/"

SAMPLE_PREFS: list[dict[str, Any]] = [
    {
        "Code": "17",
        "Name": "石川県",
        "MaxInt": "7",
        "Area": [
            {
                "Code": "390",
                "Name": "石川県能登",
                "MaxInt": "7",
                "City": [
                    {"Code": "1720400", "Name": "輪島市", "MaxInt": "7"},
                    {"Code": "1720500", "Name": "珠洲市", "MaxInt": "6+"},
                ],
            },
            {
                "Code": "391",
                "Name": "石川県加賀",
                "MaxInt": "5+",
                "City": [{"Code": "1720100", "Name": "金沢市", "MaxInt": "5+"}],
            },
        ],
    },
    {
        "Code": "15",
        "Name": "新潟県",
        "MaxInt": "6-",
        "Area": [
            {
                "Code": "372",
                "Name": "新潟県上越",
                "MaxInt": "6-",
                "City": [{"Code": "1522200", "Name": "上越市", "MaxInt": "6-"}],
            },
        ],
    },
]


def detail_id(n: int, code: str = "VXSE53") -> str:
    """A JMA document id for the n-th bulletin of the given type."""
    return f"20240101{n:06d}_20240101{n:06d}_{code}_1.json"


@pytest.fixture
def make_detailed_document() -> Callable[..., dict[str, Any]]:
    """Factory for VXSE53 (hypocenter and intensity) documents."""

    def _make(
        prefs: list[dict[str, Any]] | None = None,
        comment: str = NO_TSUNAMI_TEXT,
        magnitude: str = "7.6",
        epicenter: str = "390",
        origin_time: str = "2024-01-01T16:10:00+09:00",
    ) -> dict[str, Any]:
        return {
            "Control": {"Title": "震源・震度情報", "Status": "通常"},
            "Head": {"Title": "震源・震度情報", "InfoKind": "地震情報"},
            "Body": {
                "Earthquake": {
                    "OriginTime": origin_time,
                    "ArrivalTime": origin_time,
                    "Magnitude": magnitude,
                    "Hypocenter": {
                        "Area": {
                            "Name": "石川県能登地方",
                            "Code": epicenter,
                            "Coordinate": "+37.5+137.3-10000/",
                        }
                    },
                },
                "Intensity": {
                    "Observation": {
                        "MaxInt": "7",
                        "Pref": copy.deepcopy(SAMPLE_PREFS if prefs is None else prefs),
                    }
                },
                "Comments": {"ForecastComment": {"Text": comment, "Code": "0215"}},
            },
        }

    return _make


@pytest.fixture
def make_basic_document() -> Callable[..., dict[str, Any]]:
    """Factory for VXSE52 (hypocenter only) documents."""

    def _make(
        comment: str = "0",
        magnitude: str = "4.1",
        epicenter: str = "350",
    ) -> dict[str, Any]:
        return {
            "Control": {"Title": "震源に関する情報"},
            "Body": {
                "Earthquake": {
                    "OriginTime": "2024-01-02T09:00:00+09:00",
                    "Magnitude": magnitude,
                    "Hypocenter": {
                        "Area": {"Code": epicenter, "Coordinate": "+35.7+139.8-50000/"}
                    },
                },
                "Comments": {"ForecastComment": {"Text": comment}},
            },
        }

    return _make


@pytest.fixture
def config(tmp_path) -> QuakeRelayConfig:
    """Config pointing at JMA defaults, with no background scheduler."""
    return QuakeRelayConfig(cache_dir=tmp_path / "cache", scheduler_enabled=False)


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def snapshot_cache(memory_store: MemoryKeyValueStore) -> SnapshotCache:
    return SnapshotCache(memory_store)


@pytest.fixture
def sample_dictionaries() -> TranslationDictionaries:
    return TranslationDictionaries(
        epi={
            "390": {"english": "Noto, Ishikawa Prefecture", "korean": "이시카와현 노토 지방"},
            "391": {"english": "Kaga, Ishikawa Prefecture"},
            "350": {"english": "Southern Ibaraki Prefecture"},
        },
        pref={
            "17": {"english": "Ishikawa", "korean": "이시카와현"},
            "15": {"english": "Niigata"},
        },
        city={
            "1720400": {"english": "Wajima"},
            "1720500": {"english": "Suzu"},
            "13101": {"en": "Chiyoda"},
        },
    )


@pytest.fixture
def dictionary_store(
    memory_store: MemoryKeyValueStore, sample_dictionaries: TranslationDictionaries,
) -> MemoryKeyValueStore:
    """The shared memory store, populated with the sample dictionaries."""
    for name in ("epi", "pref", "city"):
        table = getattr(sample_dictionaries, name)
        memory_store.put(dictionary_key(name), json.dumps(table).encode("utf-8"))
    return memory_store


@pytest.fixture
def sample_snapshot() -> Snapshot:
    """Pre-built canonical snapshot for cache and translation tests."""
    return Snapshot(
        detailed=(
            DetailedEarthquake(
                time="2024-01-01T16:10:00+09:00",
                magnitude="7.6",
                max_intensity="7",
                location=Location(code="390", coordinate="+37.5+137.3-10000/"),
                regions=(
                    Region(
                        pref_code="17",
                        areas=(
                            Area(
                                area_code="390",
                                cities=(City("1720400"), City("1720500")),
                            ),
                            Area(area_code="999", cities=(City("1799999"),)),
                        ),
                    ),
                    Region(pref_code="15", areas=(Area(area_code="372"),)),
                ),
                comments=Comments(has_tsunami_warning=True),
            ),
        ),
        basic=(
            BasicEarthquake(
                time="2024-01-02T09:00:00+09:00",
                magnitude="Ｍ不明",
                location=Location(code="350", coordinate="+35.7+139.8-50000/"),
                comments=Comments(has_tsunami_warning=False),
            ),
        ),
    )

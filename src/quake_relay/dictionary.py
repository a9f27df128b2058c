"""JMA code-to-name dictionaries held in the translation store."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from quake_relay.cache import KeyValueStore
from quake_relay.errors import CacheUnavailable

logger = logging.getLogger(__name__)

# code -> {dictionary language -> display name}
Translation = dict[str, dict[str, str]]

DICTIONARY_NAMES = ("epi", "pref", "city")


def dictionary_key(name: str) -> str:
    return f"dictionary:{name}"


@dataclass(frozen=True)
class TranslationDictionaries:
    """Epicenter, prefecture and city name tables.

    Area codes share the epicenter table.
    """

    epi: Translation = field(default_factory=dict)
    pref: Translation = field(default_factory=dict)
    city: Translation = field(default_factory=dict)


def _load_one(store: KeyValueStore, name: str) -> Translation:
    key = dictionary_key(name)
    try:
        data = store.get(key)
    except CacheUnavailable:
        logger.warning("Translation store unavailable for %s", key, exc_info=True)
        return {}
    if data is None:
        logger.warning("Dictionary %s not found; codes will be shown untranslated", key)
        return {}
    try:
        table = json.loads(data)
    except ValueError:
        logger.warning("Dictionary %s is not valid JSON", key)
        return {}
    if not isinstance(table, dict):
        logger.warning("Dictionary %s is not a mapping", key)
        return {}
    return table


def load_dictionaries(store: KeyValueStore) -> TranslationDictionaries:
    """Load all three dictionaries; a missing one loads as empty."""
    return TranslationDictionaries(
        epi=_load_one(store, "epi"),
        pref=_load_one(store, "pref"),
        city=_load_one(store, "city"),
    )


def import_dictionaries(store: KeyValueStore, directory: Path) -> dict[str, int]:
    """Write ``epi.json``, ``pref.json`` and ``city.json`` from *directory* into the store.

    Returns the number of codes imported per dictionary. Files that do not
    exist are skipped.
    """
    counts: dict[str, int] = {}
    for name in DICTIONARY_NAMES:
        path = directory / f"{name}.json"
        if not path.exists():
            logger.warning("No %s in %s, skipping", path.name, directory)
            continue
        table = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(table, dict):
            raise ValueError(f"{path} must contain a JSON object")
        store.put(dictionary_key(name), json.dumps(table, ensure_ascii=False).encode("utf-8"))
        counts[name] = len(table)
        logger.info("Imported %d %s names", len(table), name)
    return counts

"""Project canonical records through the name dictionaries."""

from __future__ import annotations

from collections.abc import Iterable

from quake_relay.dictionary import Translation, TranslationDictionaries
from quake_relay.models import (
    BasicEarthquake,
    DetailedEarthquake,
    Location,
    Snapshot,
    TranslatedArea,
    TranslatedBasicEarthquake,
    TranslatedCity,
    TranslatedDetailedEarthquake,
    TranslatedLocation,
    TranslatedRegion,
)

TranslatedRecord = TranslatedDetailedEarthquake | TranslatedBasicEarthquake


def lookup(table: Translation, code: str, language: str) -> str:
    """Return the display name of *code*, or the code itself if untranslated.

    Entries that are not a language mapping, and names that are not
    non-empty strings, count as untranslated.
    """
    entry = table.get(code)
    if not isinstance(entry, dict):
        return code
    name = entry.get(language)
    return name if isinstance(name, str) and name else code


def _location(loc: Location, language: str, dicts: TranslationDictionaries) -> TranslatedLocation:
    return TranslatedLocation(
        code=loc.code,
        coordinate=loc.coordinate,
        name=lookup(dicts.epi, loc.code, language),
    )


def translate_record(
    quake: DetailedEarthquake | BasicEarthquake,
    language: str,
    dicts: TranslationDictionaries,
) -> TranslatedRecord:
    if isinstance(quake, DetailedEarthquake):
        return TranslatedDetailedEarthquake(
            time=quake.time,
            magnitude=quake.magnitude,
            max_intensity=quake.max_intensity,
            location=_location(quake.location, language, dicts),
            regions=tuple(
                TranslatedRegion(
                    pref_code=region.pref_code,
                    name=lookup(dicts.pref, region.pref_code, language),
                    areas=tuple(
                        TranslatedArea(
                            area_code=area.area_code,
                            name=lookup(dicts.epi, area.area_code, language),
                            cities=tuple(
                                TranslatedCity(
                                    city_code=city.city_code,
                                    name=lookup(dicts.city, city.city_code, language),
                                )
                                for city in area.cities
                            ),
                        )
                        for area in region.areas
                    ),
                )
                for region in quake.regions
            ),
            comments=quake.comments,
        )
    if isinstance(quake, BasicEarthquake):
        return TranslatedBasicEarthquake(
            time=quake.time,
            magnitude=quake.magnitude,
            location=_location(quake.location, language, dicts),
            comments=quake.comments,
        )
    raise TypeError(f"Only canonical records can be translated, got {type(quake).__name__}")


def translate(
    data: Snapshot | Iterable[DetailedEarthquake | BasicEarthquake],
    language: str,
    dicts: TranslationDictionaries,
) -> dict[str, list[TranslatedRecord]] | list[TranslatedRecord]:
    """Translate a snapshot (to ``{"detailed", "basic"}``) or a list of records.

    *language* is a dictionary language key such as ``"english"``.
    Ordering is preserved at every level and the input is not modified.
    """
    if isinstance(data, Snapshot):
        return {
            "detailed": [translate_record(q, language, dicts) for q in data.detailed],
            "basic": [translate_record(q, language, dicts) for q in data.basic],
        }
    return [translate_record(q, language, dicts) for q in data]

"""Data models for the earthquake bulletin pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class IndexEntry:
    """One bulletin announcement from the JMA ``list.json`` index."""

    document_id: str
    title: str = ""
    event_id: str = ""
    max_intensity: str | None = None
    intensity: list[Any] | None = None


@dataclass(frozen=True)
class Location:
    """Epicenter identifier and JMA coordinate string (e.g. ``+35.7+139.8-10000/``)."""

    code: str
    coordinate: str


@dataclass(frozen=True)
class Comments:
    has_tsunami_warning: bool


@dataclass(frozen=True)
class City:
    city_code: str


@dataclass(frozen=True)
class Area:
    area_code: str
    cities: tuple[City, ...] = ()


@dataclass(frozen=True)
class Region:
    """One prefecture with its areas and cities, in received order."""

    pref_code: str
    areas: tuple[Area, ...] = ()


@dataclass(frozen=True)
class DetailedEarthquake:
    """A bulletin with a prefecture > area > city intensity breakdown."""

    time: str
    magnitude: str  # upstream may send placeholders such as "Ｍ不明"
    max_intensity: str
    location: Location
    regions: tuple[Region, ...]
    comments: Comments


@dataclass(frozen=True)
class BasicEarthquake:
    """A bulletin carrying only epicenter-level information."""

    time: str
    magnitude: str
    location: Location
    comments: Comments


@dataclass(frozen=True)
class Snapshot:
    """The full set of normalized records, cached and replaced as one unit."""

    detailed: tuple[DetailedEarthquake, ...] = ()
    basic: tuple[BasicEarthquake, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "detailed": [asdict(q) for q in self.detailed],
            "basic": [asdict(q) for q in self.basic],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Snapshot:
        """Rebuild a snapshot from :meth:`to_dict` output.

        Raises KeyError or TypeError on malformed input.
        """
        return cls(
            detailed=tuple(_detailed_from_dict(d) for d in data["detailed"]),
            basic=tuple(_basic_from_dict(b) for b in data["basic"]),
        )


def _detailed_from_dict(d: dict[str, Any]) -> DetailedEarthquake:
    return DetailedEarthquake(
        time=d["time"],
        magnitude=d["magnitude"],
        max_intensity=d["max_intensity"],
        location=Location(**d["location"]),
        regions=tuple(
            Region(
                pref_code=r["pref_code"],
                areas=tuple(
                    Area(
                        area_code=a["area_code"],
                        cities=tuple(City(city_code=c["city_code"]) for c in a["cities"]),
                    )
                    for a in r["areas"]
                ),
            )
            for r in d["regions"]
        ),
        comments=Comments(**d["comments"]),
    )


def _basic_from_dict(d: dict[str, Any]) -> BasicEarthquake:
    return BasicEarthquake(
        time=d["time"],
        magnitude=d["magnitude"],
        location=Location(**d["location"]),
        comments=Comments(**d["comments"]),
    )


# Translated views. These are produced from canonical records and are
# never fed back into the translator.


@dataclass(frozen=True)
class TranslatedLocation:
    code: str
    coordinate: str
    name: str


@dataclass(frozen=True)
class TranslatedCity:
    city_code: str
    name: str


@dataclass(frozen=True)
class TranslatedArea:
    area_code: str
    name: str
    cities: tuple[TranslatedCity, ...] = ()


@dataclass(frozen=True)
class TranslatedRegion:
    pref_code: str
    name: str
    areas: tuple[TranslatedArea, ...] = ()


@dataclass(frozen=True)
class TranslatedDetailedEarthquake:
    time: str
    magnitude: str
    max_intensity: str
    location: TranslatedLocation
    regions: tuple[TranslatedRegion, ...]
    comments: Comments


@dataclass(frozen=True)
class TranslatedBasicEarthquake:
    time: str
    magnitude: str
    location: TranslatedLocation
    comments: Comments

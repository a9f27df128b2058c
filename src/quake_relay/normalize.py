"""Normalize raw JMA bulletin documents into canonical records."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from quake_relay.classify import BulletinKind
from quake_relay.fetchers.schemas import BasicEarthquakeSchema, DetailedEarthquakeSchema
from quake_relay.models import (
    Area,
    BasicEarthquake,
    City,
    Comments,
    DetailedEarthquake,
    Location,
    Region,
)

logger = logging.getLogger(__name__)

# Exact forecast comment JMA publishes when there is no tsunami concern.
# Matching on wording breaks silently if JMA rephrases it.
NO_TSUNAMI_TEXT = "この地震による津波の心配はありません。"

# Tsunami flag used by hypocenter-only bulletins.
BASIC_TSUNAMI_FLAG = "1"


def _has_earthquake_body(raw: Any) -> bool:
    if not isinstance(raw, dict):
        return False
    body = raw.get("Body")
    return isinstance(body, dict) and isinstance(body.get("Earthquake"), dict)


def normalize_detailed(raw: Any) -> DetailedEarthquake | None:
    """Convert a VXSE53 document into a :class:`DetailedEarthquake`.

    Returns None (and logs) when the document lacks an earthquake body,
    fails validation, or has no prefecture intensity observations.
    """
    if not _has_earthquake_body(raw):
        logger.info("Skipping detailed bulletin without earthquake body")
        return None

    try:
        doc = DetailedEarthquakeSchema.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Invalid detailed bulletin: %s", exc)
        return None

    body = doc.body
    observation = body.intensity.observation
    if not observation.prefs:
        logger.info("Skipping detailed bulletin with no prefecture observations")
        return None

    return DetailedEarthquake(
        time=body.earthquake.origin_time,
        magnitude=body.earthquake.magnitude,
        max_intensity=observation.max_int,
        location=Location(
            code=body.earthquake.hypocenter.area.code,
            coordinate=body.earthquake.hypocenter.area.coordinate,
        ),
        regions=tuple(
            Region(
                pref_code=pref.code,
                areas=tuple(
                    Area(
                        area_code=area.code,
                        cities=tuple(City(city_code=city.code) for city in area.cities),
                    )
                    for area in pref.areas
                ),
            )
            for pref in observation.prefs
        ),
        comments=Comments(
            has_tsunami_warning=body.comments.forecast_comment.text != NO_TSUNAMI_TEXT,
        ),
    )


def normalize_basic(raw: Any) -> BasicEarthquake | None:
    """Convert a VXSE52 document into a :class:`BasicEarthquake`, or None."""
    if not _has_earthquake_body(raw):
        logger.info("Skipping basic bulletin without earthquake body")
        return None

    try:
        doc = BasicEarthquakeSchema.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Invalid basic bulletin: %s", exc)
        return None

    body = doc.body
    return BasicEarthquake(
        time=body.earthquake.origin_time,
        magnitude=body.earthquake.magnitude,
        location=Location(
            code=body.earthquake.hypocenter.area.code,
            coordinate=body.earthquake.hypocenter.area.coordinate,
        ),
        comments=Comments(
            has_tsunami_warning=body.comments.forecast_comment.text == BASIC_TSUNAMI_FLAG,
        ),
    )


def normalize_documents(
    kind: BulletinKind, documents: Iterable[dict | None],
) -> list[DetailedEarthquake] | list[BasicEarthquake]:
    """Normalize fetched documents of one kind, dropping unusable ones."""
    if kind is BulletinKind.DETAILED:
        detailed = [normalize_detailed(d) for d in documents if d is not None]
        return [q for q in detailed if q is not None]
    if kind is BulletinKind.BASIC:
        basic = [normalize_basic(d) for d in documents if d is not None]
        return [q for q in basic if q is not None]
    raise ValueError(f"Cannot normalize {kind.value} bulletins")

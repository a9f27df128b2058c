"""Pydantic models of the JMA bulletin document shapes.

Only the fields the pipeline reads are declared; everything else in the
upstream documents is ignored.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ListEventSchema(BaseModel):
    """One entry of ``list.json``."""

    json_name: str = Field(alias="json")
    title: str = Field(default="", alias="ttl")
    event_id: str = Field(default="", alias="eid")
    max_intensity: str | None = Field(default=None, alias="maxi")
    intensity: list[Any] | None = Field(default=None, alias="int")


class HypocenterAreaSchema(BaseModel):
    code: str = Field(alias="Code")
    coordinate: str = Field(alias="Coordinate")


class HypocenterSchema(BaseModel):
    area: HypocenterAreaSchema = Field(alias="Area")


class EarthquakeBodySchema(BaseModel):
    origin_time: str = Field(alias="OriginTime")
    magnitude: str = Field(alias="Magnitude")
    hypocenter: HypocenterSchema = Field(alias="Hypocenter")


class ForecastCommentSchema(BaseModel):
    text: str = Field(alias="Text")


class CommentsSchema(BaseModel):
    forecast_comment: ForecastCommentSchema = Field(alias="ForecastComment")


class IntensityCitySchema(BaseModel):
    code: str = Field(alias="Code")
    max_int: str = Field(alias="MaxInt")


class IntensityAreaSchema(BaseModel):
    code: str = Field(alias="Code")
    cities: list[IntensityCitySchema] = Field(alias="City")


class IntensityPrefSchema(BaseModel):
    code: str = Field(alias="Code")
    areas: list[IntensityAreaSchema] = Field(alias="Area")


class ObservationSchema(BaseModel):
    max_int: str = Field(alias="MaxInt")
    prefs: list[IntensityPrefSchema] = Field(alias="Pref")


class IntensitySchema(BaseModel):
    observation: ObservationSchema = Field(alias="Observation")


class BasicBodySchema(BaseModel):
    earthquake: EarthquakeBodySchema = Field(alias="Earthquake")
    comments: CommentsSchema = Field(alias="Comments")


class DetailedBodySchema(BasicBodySchema):
    intensity: IntensitySchema = Field(alias="Intensity")


class BasicEarthquakeSchema(BaseModel):
    """Hypocenter-only bulletin (VXSE52)."""

    body: BasicBodySchema = Field(alias="Body")


class DetailedEarthquakeSchema(BaseModel):
    """Hypocenter and seismic intensity bulletin (VXSE53)."""

    body: DetailedBodySchema = Field(alias="Body")

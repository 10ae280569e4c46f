"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- engine inputs (`Place`, `ContextSnapshot`)
- explainable scoring output (`ScoredPlace`, `ContextExplanation`)
- service/API envelopes (`RescoreRequest`, `RescoreResult`)

Keeping these models in one place helps:
- validation (reject bad input shapes early, before any scoring runs),
- typed refactors,
- consistent JSON output across CLI/API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from contextscore.domain.weather import WeatherCondition, parse_condition

FactorName = Literal["time", "weather", "mood", "activity_sequence", "location"]


def _normalize_label(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip().lower()
    return value or None


def _normalize_tags(tags: list[str]) -> list[str]:
    return sorted({t.strip().lower() for t in tags if t and t.strip()})


class GeoPoint(BaseModel):
    """A geographic point in decimal degrees."""

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class Place(BaseModel):
    """A candidate place carrying its pre-context match score.

    Unknown fields supplied by the caller (name, address, ...) are kept as-is and
    travel through scoring untouched.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    category: str | None = None
    sub_category: str | None = None
    tags: list[str] = Field(default_factory=list)
    base_match_score: float = Field(0.0, ge=0, allow_inf_nan=False)

    coordinates: GeoPoint | None = None
    region: str | None = None
    sub_region: str | None = None
    # Meters from the user, precomputed by the caller; may be malformed (see features/location.py).
    distance: float | None = None

    @field_validator("category", "sub_category")
    @classmethod
    def _normalize_category(cls, value: str | None) -> str | None:
        return _normalize_label(value)

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, tags: list[str]) -> list[str]:
        return _normalize_tags(tags)


class WeatherReading(BaseModel):
    """Weather at request time; `condition` accepts provider free text."""

    condition: WeatherCondition = WeatherCondition.UNKNOWN
    temperature: float | None = None
    rain_probability: float | None = None
    humidity: float | None = None
    wind_speed: float | None = None
    uv_index: float | None = None

    @field_validator("condition", mode="before")
    @classmethod
    def _parse_condition(cls, value: Any) -> WeatherCondition:
        return parse_condition(value)


class MoodState(BaseModel):
    label: str | None = None
    intensity: float = Field(3, ge=1, le=5)

    @field_validator("label")
    @classmethod
    def _clean_label(cls, value: str | None) -> str | None:
        return _normalize_label(value)


class RecentActivity(BaseModel):
    """The place the user visited most recently."""

    category: str | None = None
    place_type: str | None = None
    # Negative or non-finite values are tolerated here and ignored by the activity scorer.
    elapsed_minutes: float | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("category", "place_type")
    @classmethod
    def _normalize_category(cls, value: str | None) -> str | None:
        return _normalize_label(value)

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, tags: list[str]) -> list[str]:
        return _normalize_tags(tags)


class LocationContext(BaseModel):
    coordinates: GeoPoint | None = None
    region: str | None = None
    sub_region: str | None = None
    transport_mode: str | None = None

    @field_validator("transport_mode")
    @classmethod
    def _normalize_mode(cls, value: str | None) -> str | None:
        return _normalize_label(value)


class ContextSnapshot(BaseModel):
    """Situational signals for one request. Every part is optional."""

    time: datetime | None = None
    # 0 = Sunday ... 6 = Saturday; derived from `time` when omitted.
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    weather: WeatherReading | None = None
    mood: MoodState | None = None
    recent_activity: RecentActivity | None = None
    location: LocationContext | None = None


class ContextFactors(BaseModel):
    """Per-factor multipliers behind a place's context score."""

    time_score: float
    weather_score: float
    mood_score: float
    activity_score: float
    location_score: float


class ScoredPlace(Place):
    """A place after context re-scoring."""

    context_score: float
    final_match_score: float
    context_boost: bool = False
    context_reduction: bool = False
    boost_reasons: list[FactorName] = Field(default_factory=list)
    reduction_reasons: list[FactorName] = Field(default_factory=list)
    context_factors: ContextFactors


class ContextExplanation(BaseModel):
    context_reasons: list[str] = Field(default_factory=list)
    has_context_explanation: bool = False


class RescoreRequest(BaseModel):
    """Service/API payload: candidates plus the request's context."""

    places: list[Place]
    context: ContextSnapshot | None = None
    include_explanations: bool = False
    max_results: int | None = Field(default=None, ge=1, le=200)
    settings_overrides: dict[str, Any] | None = None


class RescoreItem(BaseModel):
    place: ScoredPlace | Place
    explanation: ContextExplanation | None = None


class RescoreResult(BaseModel):
    generated_at: datetime
    results: list[RescoreItem]
    meta: dict[str, Any] = Field(default_factory=dict)


class ExplainRequest(BaseModel):
    place: Place
    context: ContextSnapshot | None = None

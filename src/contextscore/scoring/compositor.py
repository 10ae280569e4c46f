"""
Score compositor.

Wires the context normalizers, factor scorers and ranker together:

    context -> factor bundles (once per request)
    place   -> trait set (once per place) -> five FactorResults -> composite -> ScoredPlace
    scored  -> stable ranking

Every function here is pure: no caching, no module-level state, and the input places and
context are never mutated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import singledispatch
from typing import Any, Sequence

from contextscore.config.settings import Settings, get_settings
from contextscore.domain.models import ContextFactors, ContextSnapshot, Place, ScoredPlace
from contextscore.features.activity import ActivityFactors, calculate_activity_sequence, score_activity
from contextscore.features.location import LocationFactors, calculate_location_relevance, score_location
from contextscore.features.mood import MoodFactors, calculate_mood_compatibility, score_mood
from contextscore.features.time import TimeFactors, calculate_time_factors, score_time
from contextscore.features.traits import PlaceTraitSet, build_trait_set
from contextscore.features.weather import WeatherFactors, calculate_weather_factors, score_weather
from contextscore.scoring.composite import FactorResult, compose_context_score, factor_reasons
from contextscore.scoring.ranking import rank_places

logger = logging.getLogger(__name__)

# Fields a previous scoring pass may have left on the place.
_SCORED_FIELDS = set(ScoredPlace.model_fields) - set(Place.model_fields)


@dataclass(frozen=True)
class FactorBundle:
    """All normalized context tables for one request."""

    time: TimeFactors
    weather: WeatherFactors
    mood: MoodFactors
    activity: ActivityFactors
    location: LocationFactors


def build_factor_bundle(context: ContextSnapshot, *, settings: Settings | None = None) -> FactorBundle:
    settings = settings or get_settings()
    return FactorBundle(
        time=calculate_time_factors(context.time, context.day_of_week),
        weather=calculate_weather_factors(context.weather),
        mood=calculate_mood_compatibility(context.mood),
        activity=calculate_activity_sequence(context.recent_activity, settings=settings),
        location=calculate_location_relevance(context.location, settings=settings),
    )


@singledispatch
def _score_with(factors: Any, traits: PlaceTraitSet, settings: Settings) -> FactorResult:
    raise TypeError(f"Unsupported factor bundle: {type(factors).__name__}")


@_score_with.register
def _(factors: TimeFactors, traits: PlaceTraitSet, settings: Settings) -> FactorResult:
    return score_time(traits, factors, settings=settings)


@_score_with.register
def _(factors: WeatherFactors, traits: PlaceTraitSet, settings: Settings) -> FactorResult:
    return score_weather(traits, factors, settings=settings)


@_score_with.register
def _(factors: MoodFactors, traits: PlaceTraitSet, settings: Settings) -> FactorResult:
    return score_mood(traits, factors, settings=settings)


@_score_with.register
def _(factors: ActivityFactors, traits: PlaceTraitSet, settings: Settings) -> FactorResult:
    return score_activity(traits, factors, settings=settings)


def context_score(
    place: Place,
    factors: TimeFactors | WeatherFactors | MoodFactors | ActivityFactors | None,
    *,
    traits: PlaceTraitSet | None = None,
    settings: Settings | None = None,
) -> FactorResult:
    """Score one place against one normalized factor table (time, weather, mood or activity)."""
    if factors is None:
        return FactorResult()
    settings = settings or get_settings()
    traits = traits or build_trait_set(place, settings=settings)
    return _score_with(factors, traits, settings)


def location_score(place: Place, factors: LocationFactors | None, *, settings: Settings | None = None) -> FactorResult:
    """Score one place's proximity and region match."""
    if factors is None:
        return FactorResult()
    return score_location(place, factors, settings=settings)


def score_place(place: Place, bundle: FactorBundle, *, settings: Settings | None = None) -> ScoredPlace:
    settings = settings or get_settings()
    traits = build_trait_set(place, settings=settings)
    results: dict[str, FactorResult] = {
        "time": context_score(place, bundle.time, traits=traits, settings=settings),
        "weather": context_score(place, bundle.weather, traits=traits, settings=settings),
        "mood": context_score(place, bundle.mood, traits=traits, settings=settings),
        "activity_sequence": context_score(place, bundle.activity, traits=traits, settings=settings),
        "location": location_score(place, bundle.location, settings=settings),
    }
    composite = compose_context_score(results, settings=settings)

    return ScoredPlace(
        **place.model_dump(exclude=_SCORED_FIELDS),
        context_score=composite,
        final_match_score=float(place.base_match_score) * composite,
        context_boost=composite > 1.0,
        context_reduction=composite < 1.0,
        boost_reasons=factor_reasons(results, "boost"),
        reduction_reasons=factor_reasons(results, "reduction"),
        context_factors=ContextFactors(
            time_score=results["time"].multiplier,
            weather_score=results["weather"].multiplier,
            mood_score=results["mood"].multiplier,
            activity_score=results["activity_sequence"].multiplier,
            location_score=results["location"].multiplier,
        ),
    )


def score_places(
    places: Sequence[Place], context: ContextSnapshot, *, settings: Settings | None = None
) -> list[ScoredPlace]:
    """Score every place (input order kept, no ranking)."""
    settings = settings or get_settings()
    bundle = build_factor_bundle(context, settings=settings)
    logger.debug(
        "Scoring %d places: time_of_day=%s weather=%s mood=%s activity=%s location=%s",
        len(places),
        bundle.time.time_of_day,
        bundle.weather.condition.value,
        bundle.mood.mood,
        bundle.activity.category,
        bundle.location.transport_mode if bundle.location.has_location else None,
    )
    return [score_place(place, bundle, settings=settings) for place in places]


def apply_contextual_factors(
    places: Sequence[Place] | None,
    context: ContextSnapshot | None,
    *,
    settings: Settings | None = None,
) -> list[Place] | list[ScoredPlace]:
    """Re-score and re-rank `places` for `context`.

    - no places (or not a list) -> []
    - no context -> the places unchanged, in their original order
    """
    if not isinstance(places, (list, tuple)) or not places:
        return []
    if context is None:
        return list(places)
    return rank_places(score_places(places, context, settings=settings))

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from contextscore.config.settings import get_settings
from contextscore.domain.models import (
    ContextSnapshot,
    LocationContext,
    MoodState,
    Place,
    RecentActivity,
    ScoredPlace,
    WeatherReading,
)
from contextscore.scoring.composite import FactorResult, compose_context_score
from contextscore.scoring.compositor import apply_contextual_factors, score_places

SEOUL = ZoneInfo("Asia/Seoul")
SATURDAY_AFTERNOON = datetime(2026, 10, 17, 15, 0, tzinfo=SEOUL)


def _quiet_cafe(**kwargs) -> Place:
    return Place(id="cafe-1", name="Quiet Cafe", category="cafe", tags=["조용한"], base_match_score=10, **kwargs)


def _saturday_context(**kwargs) -> ContextSnapshot:
    return ContextSnapshot(
        time=SATURDAY_AFTERNOON,
        weather=WeatherReading(condition="sunny", temperature=20),
        mood=MoodState(label="stressed", intensity=5),
        **kwargs,
    )


def test_quiet_cafe_on_a_relaxed_saturday_is_boosted():
    [scored] = apply_contextual_factors([_quiet_cafe()], _saturday_context())

    assert isinstance(scored, ScoredPlace)
    assert scored.context_factors.weather_score == pytest.approx(1.0)
    assert scored.context_factors.mood_score > 1.0
    # time 1.32 * mood 1.2
    assert scored.context_score == pytest.approx(1.584)
    assert scored.final_match_score > 10
    assert scored.context_boost and not scored.context_reduction
    assert scored.boost_reasons == ["time", "mood"]
    assert scored.reduction_reasons == []


def test_weak_activity_signal_is_floored_in_the_composite():
    context = _saturday_context(recent_activity=RecentActivity(category="cafe", elapsed_minutes=5))

    [scored] = apply_contextual_factors([_quiet_cafe()], context)

    assert scored.context_factors.activity_score == pytest.approx(0.7)
    # max(0.8, 0.7) is used, not 0.7.
    assert scored.context_score == pytest.approx(1.584 * 0.8)
    assert "activity_sequence" in scored.reduction_reasons


def test_unrecognized_mood_does_not_raise():
    context = ContextSnapshot(mood=MoodState(label="furious", intensity=5))

    [scored] = apply_contextual_factors([_quiet_cafe()], context)

    assert scored.context_factors.mood_score == 1.0
    assert scored.context_score == 1.0


def test_nearby_restaurant_when_walking():
    context = ContextSnapshot(location=LocationContext(region="서울", transport_mode="walking"))
    place = Place(id="r", category="restaurant", base_match_score=5, distance=500)

    [scored] = apply_contextual_factors([place], context)

    assert scored.context_factors.location_score >= 1.2
    assert "location" in scored.boost_reasons


def test_no_context_returns_places_unchanged():
    places = [Place(id="a", base_match_score=1), Place(id="b", base_match_score=9)]

    out = apply_contextual_factors(places, None)

    assert out == places
    assert out is not places
    assert not any(isinstance(p, ScoredPlace) for p in out)


@pytest.mark.parametrize("places", [[], None, "not-a-list", {"id": "a"}])
def test_empty_or_invalid_places_yield_empty_list(places):
    assert apply_contextual_factors(places, _saturday_context()) == []


def test_every_multiplier_stays_within_bounds():
    bounds = get_settings().scoring.multiplier_bounds
    context = ContextSnapshot(
        time=datetime(2026, 10, 14, 3, 0, tzinfo=SEOUL),
        weather=WeatherReading(condition="rainy", temperature=-5, rain_probability=95, wind_speed=30),
        mood=MoodState(label="stressed", intensity=5),
        recent_activity=RecentActivity(category="outdoor", elapsed_minutes=600),
        location=LocationContext(region="부산", transport_mode="walking"),
    )
    places = [
        Place(id="park", category="outdoor", tags=["공원", "붐비는", "라이브"], region="서울", distance=9000),
        Place(id="view", category="viewpoint", tags=["rooftop", "terrace"], region="부산", distance=10),
        Place(id="cafe", category="cafe", tags=["조용한", "실내"], region="부산", distance=100),
    ]

    for scored in apply_contextual_factors(places, context):
        f = scored.context_factors
        for value in (f.time_score, f.weather_score, f.mood_score, f.activity_score, f.location_score):
            assert bounds.min <= value <= bounds.max
        assert bounds.min <= scored.context_score <= bounds.max


def test_composite_is_clamped():
    results = {name: FactorResult(multiplier=2.0) for name in ("time", "weather", "mood")}
    assert compose_context_score(results) == 2.0

    results = {name: FactorResult(multiplier=0.5) for name in ("time", "weather", "mood")}
    assert compose_context_score(results) == 0.5


def test_ranking_is_descending_and_stable_on_ties():
    context = ContextSnapshot(mood=MoodState(label="relaxed"))
    places = [
        Place(id="first", category="shop", base_match_score=3),
        Place(id="second", category="shop", base_match_score=3),
        Place(id="best", category="shop", base_match_score=7),
        Place(id="third", category="shop", base_match_score=3),
    ]

    ranked = apply_contextual_factors(places, context)

    assert [p.id for p in ranked] == ["best", "first", "second", "third"]


def test_inputs_are_not_mutated_and_extra_fields_survive():
    place = _quiet_cafe()
    before = place.model_dump()

    [scored] = apply_contextual_factors([place], _saturday_context())

    assert place.model_dump() == before
    assert scored.model_extra["name"] == "Quiet Cafe"


def test_rescoring_a_scored_place_starts_from_base_score():
    context = _saturday_context()
    [once] = score_places([_quiet_cafe()], context)
    [twice] = score_places([once], context)

    assert twice.final_match_score == pytest.approx(once.final_match_score)
